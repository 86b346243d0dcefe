from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import Request, request

from ..core.exceptions import AuthenticationError
from .tokens import TokenPayload, TokenService

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class AuthSession:
    """Identity attached to one request.

    Built from the Authorization header and handed to views explicitly; an
    unverifiable token yields an anonymous session instead of an error.
    """

    payload: Optional[TokenPayload] = None

    @classmethod
    def anonymous(cls) -> "AuthSession":
        return cls()

    @classmethod
    def from_request(cls, req: Request, tokens: TokenService) -> "AuthSession":
        header = req.headers.get("Authorization", "")
        if not header.startswith(BEARER_PREFIX):
            return cls.anonymous()
        token = header[len(BEARER_PREFIX):].strip()
        if not token:
            return cls.anonymous()
        return cls(payload=tokens.verify(token))

    @property
    def is_authenticated(self) -> bool:
        return self.payload is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.payload.user_id if self.payload else None

    def require(self) -> TokenPayload:
        if self.payload is None:
            raise AuthenticationError("Autenticacion requerida")
        return self.payload


def with_session(tokens: TokenService):
    """Pass the request's AuthSession to the view as the ``auth`` argument."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            kwargs["auth"] = AuthSession.from_request(request, tokens)
            return view(*args, **kwargs)

        return wrapper

    return decorator
