from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt

from ..core.constants import DEFAULT_TOKEN_TTL_DAYS
from ..core.enums import Role

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"

CLAIM_ID = "id"
CLAIM_TIPO = "tipo"


@dataclass(frozen=True)
class TokenPayload:
    user_id: str
    tipo: Role


class TokenService:
    """Issue and verify signed session tokens.

    Payload is ``{id, tipo, iat, exp}``; the client treats the token as opaque.
    """

    def __init__(
        self,
        secret: str,
        *,
        ttl_days: int = DEFAULT_TOKEN_TTL_DAYS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret:
            raise ValueError("SESSION_SECRET no configurado")
        self._secret = secret
        self._ttl = timedelta(days=int(ttl_days))
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def issue(self, *, user_id: str, tipo: Role) -> str:
        now = self._clock()
        payload = {
            CLAIM_ID: user_id,
            CLAIM_TIPO: tipo.value,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def verify(self, token: str) -> Optional[TokenPayload]:
        """Return the payload, or None when the token cannot be trusted."""

        try:
            data = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["exp", CLAIM_ID]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Token expirado")
            return None
        except jwt.PyJWTError as exc:
            logger.info("Token invalido: %s", type(exc).__name__)
            return None

        user_id = data.get(CLAIM_ID)
        if not isinstance(user_id, str) or not user_id:
            return None
        try:
            tipo = Role(data.get(CLAIM_TIPO))
        except ValueError:
            return None
        return TokenPayload(user_id=user_id, tipo=tipo)
