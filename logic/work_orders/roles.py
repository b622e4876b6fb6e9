from __future__ import annotations

from .errors import PermissionDeniedError
from .models import User

ROLE_RANK = {"user": 1, "admin": 2, "superadmin": 3}


def has_role_at_least(user: User | None, role: str) -> bool:
    if user is None:
        return False
    return ROLE_RANK.get(user.role, 0) >= ROLE_RANK[role]


def require_role_at_least(user: User | None, role: str) -> User:
    if not has_role_at_least(user, role):
        who = user.role if user is not None else "anonimo"
        raise PermissionDeniedError(f"Se requiere rol {role} o superior (actual: {who})")
    return user
