from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty, require_positive_id
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .repository import UserRepository


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    full_name: str
    email: str
    role: Role
    company_id: int


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user or not user.is_active:
            raise AuthenticationError("Email o contraseña incorrectos")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Email o contraseña incorrectos")

        return SessionUser(
            user_id=user.user_id,
            full_name=user.full_name,
            email=user.email,
            role=user.role,
            company_id=user.company_id,
        )


class UserService:
    """Use cases: self-service registration and who may read whose records."""

    def __init__(self, users: UserRepository):
        self._users = users

    def register(self, *, full_name: str, email: str, password: str, company_id: Any) -> int:
        full_name = require_non_empty(full_name, "Nombre completo")
        email = require_email(email)
        require_min_length(password, "Contraseña", 6)
        company_id = require_positive_id(company_id, "company_id")

        if self._users.get_by_email(email):
            raise ValidationError("El email ya está registrado")

        return self._users.create_user(
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role.USER,
            company_id=company_id,
        )

    def resolve_subject(self, viewer_id: int, requested: Any = None) -> int:
        """User whose records ``viewer_id`` may read.

        Everyone reads their own records. Reading a colleague's requires the
        admin role and the same company.
        """
        viewer_id = require_positive_id(viewer_id, "user_id")
        if requested in (None, ""):
            return viewer_id
        target_id = require_positive_id(requested, "user_id")
        if target_id == viewer_id:
            return viewer_id

        viewer = self._users.get_by_id(viewer_id)
        if viewer is None or viewer.role != Role.ADMIN:
            raise AuthorizationError("Solo un administrador puede ver los registros de otro usuario")
        target = self._users.get_by_id(target_id)
        if target is None or target.company_id != viewer.company_id:
            raise AuthorizationError("El usuario no pertenece a tu empresa")
        return target_id
