from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User profile.

    Note: Plain data object (no database access code).
    """

    user_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role
    company_id: int
    is_active: bool = True

    @property
    def first_name(self) -> str:
        return self.full_name.split(" ")[0] if self.full_name else "Usuario"
