# File: /taskgrid/engine/staff.py | Version: 1.0 | Title: Staff directory (read-only)
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

from taskgrid.schemas.state import StaffMember


def normalize_staff(raw: Iterable[Mapping[str, Any]]) -> List[StaffMember]:
    """Drop entries without an email, derive a display name, sort by name."""
    out: List[StaffMember] = []
    for u in raw or []:
        if not u or not u.get("email"):
            continue
        first = u.get("firstName") or u.get("first_name") or ""
        last = u.get("lastName") or u.get("last_name") or ""
        name = u.get("name") or f"{first} {last}".strip() or u["email"] or "Unknown user"
        out.append(StaffMember(id=u.get("id"), email=u["email"], name=name))
    return sorted(out, key=lambda m: m.name.lower())


class StaffDirectory(Protocol):
    def list_staff(self, tenant_id: str) -> List[StaffMember]: ...


class StaticStaffDirectory:
    def __init__(self, staff: Optional[Iterable[Mapping[str, Any]]] = None) -> None:
        self._staff = normalize_staff(staff or [])

    def list_staff(self, tenant_id: str) -> List[StaffMember]:
        return list(self._staff)


def display_names(staff: Iterable[StaffMember]) -> Dict[str, str]:
    return {m.email: m.name for m in staff}


def assignee_name(email: Optional[str], names: Mapping[str, str]) -> str:
    if not email:
        return "Unassigned"
    return names.get(email) or email
