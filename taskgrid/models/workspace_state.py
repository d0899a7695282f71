# File: /taskgrid/models/workspace_state.py | Version: 1.0 | Title: Workspace state blob + advisory role rows
from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from taskgrid.db.base_class import Base


def gen_uuid() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class WorkspaceStateRow(Base):
    """One JSON document per (location, workspace); replaced wholesale on every save."""

    __tablename__ = "workspace_states"
    __table_args__ = (
        UniqueConstraint("location_id", "workspace_id", name="uq_workspace_state_key"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    location_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    workspace_id: Mapped[str] = mapped_column(String(128), nullable=False)
    state_json: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )


class WorkspaceRoleRow(Base):
    __tablename__ = "workspace_roles"
    __table_args__ = (
        UniqueConstraint(
            "location_id", "workspace_id", "user_email", name="uq_workspace_role_user"
        ),
        Index("ix_workspace_roles_scope", "location_id", "workspace_id"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    location_id: Mapped[str] = mapped_column(String(128), nullable=False)
    workspace_id: Mapped[str] = mapped_column(String(128), nullable=False)
    user_email: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Optional[str]] = mapped_column(String(32))
