# File: /taskgrid/core/roles.py | Version: 1.2 | Title: Advisory workspace roles (UI gating only)
from __future__ import annotations

from enum import Enum
from typing import Optional


class Role(str, Enum):
    MEMBER = "member"
    MANAGER = "manager"
    ADMIN = "admin"


# Lowest → Highest
ROLE_ORDER = [Role.MEMBER, Role.MANAGER, Role.ADMIN]
ROLE_RANK = {r: i for i, r in enumerate(ROLE_ORDER)}

# A workspace without an explicit role row treats the user as admin
DEFAULT_ROLE = Role.ADMIN


def normalize_role(value: str | Role | None) -> Optional[Role]:
    if value is None:
        return None
    if isinstance(value, Role):
        return value
    try:
        normalized = value.strip().lower()
    except AttributeError:
        return None
    for r in Role:
        if r.value == normalized:
            return r
    return None


def effective_role(value: str | Role | None) -> Role:
    """
    Resolve the role the UI should act on. Unknown or missing roles fall back
    to DEFAULT_ROLE; the backend, not this value, is what enforces access.
    """
    return normalize_role(value) or DEFAULT_ROLE


def has_min_role(value: str | Role | None, minimum: Role) -> bool:
    return ROLE_RANK[effective_role(value)] >= ROLE_RANK[minimum]


def can_view_dashboard(value: str | Role | None) -> bool:
    return has_min_role(value, Role.MANAGER)


def is_member_role(value: str | Role | None) -> bool:
    return effective_role(value) is Role.MEMBER
