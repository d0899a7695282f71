# File: taskgrid/routers/workspace_state.py | Version: 1.2 | Title: Workspace state blob endpoints (load/save + advisory roles)
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from taskgrid.core.roles import normalize_role
from taskgrid.crud import workspace_state as crud
from taskgrid.db.session import get_db
from taskgrid.schemas.state import RoleIn, RoleOut, SaveStateIn, StateOut

log = logging.getLogger(__name__)

router = APIRouter(tags=["Workspace State"])


def _require_keys(location_id: Optional[str], workspace_id: Optional[str]) -> None:
    if not (location_id or "").strip() or not (workspace_id or "").strip():
        raise HTTPException(status_code=400, detail="Missing locationId or workspaceId")


@router.get("/workspace-state", response_model=StateOut, summary="Load a workspace document")
def load_state(
    location_id: Optional[str] = Query(default=None, alias="locationId"),
    workspace_id: Optional[str] = Query(default=None, alias="workspaceId"),
    user_email: Optional[str] = Query(default=None, alias="userEmail"),
    db: Session = Depends(get_db),
):
    _require_keys(location_id, workspace_id)
    row = crud.get_state(db, location_id=location_id, workspace_id=workspace_id)
    role = crud.get_role(
        db, location_id=location_id, workspace_id=workspace_id, user_email=user_email
    )
    if row is None:
        return StateOut(state=None, updated_at=None, role=role)
    return StateOut(state=row.state_json, updated_at=row.updated_at, role=role)


@router.post("/workspace-state", response_model=StateOut, summary="Replace a workspace document")
def save_state(data: SaveStateIn, db: Session = Depends(get_db)):
    _require_keys(data.location_id, data.workspace_id)
    if data.state is None:
        raise HTTPException(status_code=400, detail="Missing state")
    row = crud.upsert_state(
        db,
        location_id=data.location_id,
        workspace_id=data.workspace_id,
        state=data.state,
    )
    log.info(
        "Saved workspace %s/%s (%d tasks)",
        data.location_id,
        data.workspace_id,
        len(data.state.get("tasks") or []),
    )
    role = crud.get_role(
        db,
        location_id=data.location_id,
        workspace_id=data.workspace_id,
        user_email=data.user_email,
    )
    return StateOut(state=row.state_json, updated_at=row.updated_at, role=role)


@router.get("/workspace-roles", response_model=RoleOut, summary="Look up a user's advisory role")
def get_role(
    location_id: Optional[str] = Query(default=None, alias="locationId"),
    workspace_id: Optional[str] = Query(default=None, alias="workspaceId"),
    user_email: str = Query(..., alias="userEmail"),
    db: Session = Depends(get_db),
):
    _require_keys(location_id, workspace_id)
    role = crud.get_role(
        db, location_id=location_id, workspace_id=workspace_id, user_email=user_email
    )
    return RoleOut(user_email=user_email.strip().lower(), role=role)


@router.post("/workspace-roles", response_model=RoleOut, summary="Set a user's advisory role")
def set_role(data: RoleIn, db: Session = Depends(get_db)):
    _require_keys(data.location_id, data.workspace_id)
    role = normalize_role(data.role)
    if role is None:
        raise HTTPException(status_code=422, detail=f"Unknown role: {data.role}")
    row = crud.set_role(
        db,
        location_id=data.location_id,
        workspace_id=data.workspace_id,
        user_email=data.user_email,
        role=role.value,
    )
    log.info("Role set: %s -> %s", row.user_email, row.role)
    return RoleOut(user_email=row.user_email, role=row.role)
