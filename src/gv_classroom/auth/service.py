from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.exceptions import AccountDisabled, AuthenticationError, AuthorizationError, InvalidCredentials
from ..core.permissions import Permission, is_allowed
from ..users.model import Usuario
from ..users.repository import UserRepository
from .session import AuthSession
from .tokens import TokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    user: Usuario
    token: str


class AuthService:
    """Use case: authenticate user (login) by RUT and password."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def login(self, rut: Any, password: Any) -> LoginResult:
        rut = require_non_empty(rut, "rut")
        password = require_non_empty(password, "password")

        user = self._users.get_by_rut(rut)
        if not user:
            raise InvalidCredentials("RUT o contrasena incorrectos")

        # seed placeholders ('CHANGE_ME') never match; an unknown hash method raises ValueError
        try:
            password_ok = bool(user.password_hash) and check_password_hash(user.password_hash, password)
        except ValueError:
            logger.warning("Hash de contrasena ilegible para usuario=%s", user.id)
            password_ok = False
        if not password_ok:
            raise InvalidCredentials("RUT o contrasena incorrectos")

        if not user.activo:
            raise AccountDisabled("Usuario desactivado")

        token = self._tokens.issue(user_id=user.id, tipo=user.tipo)
        logger.info("Login correcto usuario=%s tipo=%s", user.id, user.tipo.value)
        return LoginResult(user=user, token=token)


class PermissionService:
    """Use case: resolve the acting user and check a permission.

    The actor is re-read from storage on every check so a profile change takes
    effect without waiting for the token to expire.
    """

    def __init__(self, users: UserRepository):
        self._users = users

    def current_user(self, auth: AuthSession) -> Optional[Usuario]:
        if not auth.is_authenticated:
            return None
        return self._users.get_by_id(auth.user_id)

    def require_user(self, auth: AuthSession) -> Usuario:
        payload = auth.require()
        user = self._users.get_by_id(payload.user_id)
        if not user:
            raise AuthenticationError("Usuario no encontrado")
        return user

    def require(self, auth: AuthSession, permission: Permission, *, message: Optional[str] = None) -> Usuario:
        user = self.require_user(auth)
        permisos_raw = user.perfil.permisos if user.perfil else None
        if not is_allowed(user.tipo, permisos_raw, permission):
            raise AuthorizationError(message or f"No tiene permiso: {permission.value}")
        return user
