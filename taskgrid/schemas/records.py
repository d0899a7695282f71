# File: /taskgrid/schemas/records.py | Version: 1.1 | Title: Record, Comment & Activity schemas
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from taskgrid.schemas._base import DocumentModel, drop_null_items


class Comment(DocumentModel):
    id: str
    text: str
    user: str = "unknown"
    timestamp: datetime


class Record(DocumentModel):
    id: str
    title: str = ""
    status: str = ""
    assignee_email: Optional[str] = None
    fields: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    comments: List[Comment] = Field(default_factory=list)

    @field_validator("comments", mode="before")
    @classmethod
    def skip_null_comments(cls, value: Any) -> Any:
        return drop_null_items(value)


class ActivityEntry(DocumentModel):
    """Immutable once appended."""

    id: str
    task_id: str
    field: str
    before: Optional[Any] = None
    after: Optional[Any] = None
    user: str = "unknown"
    timestamp: datetime
