# File: /taskgrid/crud/workspace_state.py | Version: 1.0 | Title: Workspace state blob CRUD
from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from taskgrid.models.workspace_state import WorkspaceRoleRow, WorkspaceStateRow, utcnow


def get_state(
    db: Session, *, location_id: str, workspace_id: str
) -> Optional[WorkspaceStateRow]:
    return db.execute(
        select(WorkspaceStateRow)
        .where(
            WorkspaceStateRow.location_id == location_id,
            WorkspaceStateRow.workspace_id == workspace_id,
        )
        .limit(1)
    ).scalar_one_or_none()


def upsert_state(
    db: Session, *, location_id: str, workspace_id: str, state: Dict[str, Any]
) -> WorkspaceStateRow:
    """
    Whole-document replace. There is no version check: the last save wins.
    """
    row = get_state(db, location_id=location_id, workspace_id=workspace_id)
    try:
        if row:
            row.state_json = state
            row.updated_at = utcnow()
        else:
            row = WorkspaceStateRow(
                location_id=location_id,
                workspace_id=workspace_id,
                state_json=state,
            )
            db.add(row)
        db.commit()
        db.refresh(row)
        return row
    except Exception:
        db.rollback()
        raise


def get_role(
    db: Session, *, location_id: str, workspace_id: str, user_email: Optional[str]
) -> Optional[str]:
    if not user_email:
        return None
    row = db.execute(
        select(WorkspaceRoleRow)
        .where(
            WorkspaceRoleRow.location_id == location_id,
            WorkspaceRoleRow.workspace_id == workspace_id,
            func.lower(WorkspaceRoleRow.user_email) == user_email.strip().lower(),
        )
        .limit(1)
    ).scalar_one_or_none()
    return row.role if row else None


def set_role(
    db: Session, *, location_id: str, workspace_id: str, user_email: str, role: str
) -> WorkspaceRoleRow:
    email = user_email.strip().lower()
    row = db.execute(
        select(WorkspaceRoleRow).where(
            WorkspaceRoleRow.location_id == location_id,
            WorkspaceRoleRow.workspace_id == workspace_id,
            WorkspaceRoleRow.user_email == email,
        )
    ).scalar_one_or_none()
    try:
        if row:
            row.role = role
        else:
            row = WorkspaceRoleRow(
                location_id=location_id,
                workspace_id=workspace_id,
                user_email=email,
                role=role,
            )
            db.add(row)
        db.commit()
        db.refresh(row)
        return row
    except Exception:
        db.rollback()
        raise
