# File: /taskgrid/schemas/state.py | Version: 1.0 | Title: Persisted workspace document + service payloads
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field, field_validator

from taskgrid.schemas._base import DocumentModel, drop_null_items
from taskgrid.schemas.columns import Column
from taskgrid.schemas.filters import FilterSet, Grid
from taskgrid.schemas.records import ActivityEntry, Record


class WorkspaceDocument(DocumentModel):
    """
    The whole persisted state of one workspace. `tasks` is None (not empty)
    when the stored document never carried a task list.
    """

    # Keys written by other clients (e.g. userColors) survive a round trip
    model_config = ConfigDict(extra="allow")

    tasks: Optional[List[Record]] = None
    columns: Optional[List[Column]] = None
    filters: Dict[str, FilterSet] = Field(default_factory=dict)
    activity: Optional[List[ActivityEntry]] = None
    grids: Optional[List[Grid]] = None
    current_grid_id: Optional[str] = None

    @field_validator("tasks", "columns", "filters", "activity", "grids", mode="before")
    @classmethod
    def skip_null_entries(cls, value: Any) -> Any:
        return drop_null_items(value)


class StaffMember(DocumentModel):
    id: Optional[str] = None
    email: str
    name: str


# ---- State service payloads ----


class SaveStateIn(DocumentModel):
    location_id: str = ""
    workspace_id: str = ""
    user_email: Optional[str] = None
    state: Optional[Dict[str, Any]] = None


class StateOut(DocumentModel):
    ok: bool = True
    state: Optional[Dict[str, Any]] = None
    updated_at: Optional[datetime] = None
    role: Optional[str] = None


class RoleIn(DocumentModel):
    location_id: str
    workspace_id: str
    user_email: str = Field(min_length=3)
    role: str


class RoleOut(DocumentModel):
    user_email: str
    role: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
