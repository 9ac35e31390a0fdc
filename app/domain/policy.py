# app/domain/policy.py
from typing import Iterable

from app.domain.enums import Role


def is_allowed(role: str | Role | None, required_roles: Iterable[Role]) -> bool:
    """Jedyna funkcja decydujaca o dostepie: rola wywolujacego vs role wymagane przez trase."""
    if role is None:
        return False
    try:
        caller = Role(role)
    except ValueError:
        return False
    return caller in set(required_roles)
