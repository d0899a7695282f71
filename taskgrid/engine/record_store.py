# File: /taskgrid/engine/record_store.py | Version: 1.2 | Title: Record Store (records + activity log)
from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any, Callable, Iterable, List, Optional

from taskgrid.core.errors import MutationRejected
from taskgrid.engine.field_values import coerce_value, kind_for
from taskgrid.engine.schema_registry import SchemaRegistry
from taskgrid.schemas._base import short_id
from taskgrid.schemas.columns import Column, ColumnType, SemanticRole
from taskgrid.schemas.records import ActivityEntry, Comment, Record

log = logging.getLogger(__name__)

Clock = Callable[[], datetime]

NEW_RECORD_TITLE = "New Task"


def utcnow() -> datetime:
    return datetime.now(UTC)


def read_value(record: Record, column: Column, position: Optional[int] = None) -> Any:
    """
    Current value of `column` on `record`. Built-in slots are read through the
    column's role, derived types from record metadata, custom fields from the
    field map (shaped by the column type).
    """
    role = column.role
    if role is SemanticRole.title:
        return record.title or ""
    if role is SemanticRole.status:
        return record.status or ""
    if role is SemanticRole.assignee:
        return record.assignee_email or ""
    if role is SemanticRole.updated_at:
        return record.updated_at or record.created_at

    ctype = column.type
    if ctype is ColumnType.autonumber:
        return position
    if ctype is ColumnType.created_time:
        return record.created_at
    if ctype is ColumnType.last_modified_time:
        return record.updated_at
    if ctype is ColumnType.created_by:
        return record.created_by
    if ctype is ColumnType.last_modified_by:
        return record.updated_by
    return coerce_value(kind_for(ctype), record.fields.get(column.id))


class RecordStore:
    """
    Ordered record collection plus the append-only activity log of one workspace.
    Operations on unknown ids are no-ops: they return None/False and never raise.
    """

    def __init__(
        self,
        registry: SchemaRegistry,
        records: Optional[Iterable[Record]] = None,
        activity: Optional[Iterable[ActivityEntry]] = None,
        *,
        clock: Clock = utcnow,
    ) -> None:
        self.registry = registry
        self._records: List[Record] = list(records or [])
        self._activity: List[ActivityEntry] = list(activity or [])
        self._clock = clock

    # ---- Queries ----

    @property
    def records(self) -> List[Record]:
        return list(self._records)

    @property
    def activity(self) -> List[ActivityEntry]:
        return list(self._activity)

    def get(self, record_id: Optional[str]) -> Optional[Record]:
        if not record_id:
            return None
        for r in self._records:
            if r.id == record_id:
                return r
        return None

    def activity_for(self, record_id: str) -> List[ActivityEntry]:
        return [a for a in self._activity if a.task_id == record_id]

    def __len__(self) -> int:
        return len(self._records)

    # ---- Installation (pull / push echo) ----

    def replace_records(self, records: Iterable[Record]) -> None:
        self._records = list(records)

    def replace_activity(self, activity: Iterable[ActivityEntry]) -> None:
        self._activity = list(activity)

    # ---- Audit helpers ----

    def _touch(self, record: Record, actor_email: Optional[str]) -> None:
        now = self._clock()
        if record.created_at is None:
            record.created_at = now
        record.updated_at = now
        record.updated_by = actor_email or record.updated_by

    def _log(
        self,
        record_id: str,
        field: str,
        before: Any,
        after: Any,
        actor_email: Optional[str],
    ) -> Optional[ActivityEntry]:
        if before == after:
            return None
        if before is None and after is None:
            return None
        entry = ActivityEntry(
            id=short_id("act", 6),
            task_id=record_id,
            field=field,
            before=before,
            after=after,
            user=actor_email or "unknown",
            timestamp=self._clock(),
        )
        self._activity.append(entry)
        return entry

    def _sync_completion(self, record: Record) -> None:
        if record.status and record.status == self.registry.terminal_status_id:
            if record.completed_at is None:
                record.completed_at = self._clock()
        else:
            record.completed_at = None

    # ---- Mutations ----

    def upsert_field(
        self,
        record_id: str,
        column_id: str,
        new_value: Any,
        actor_email: Optional[str] = None,
    ) -> Optional[Record]:
        """Write one value; the record comes back even when the write was a no-op."""
        changed = self.apply_field(record_id, column_id, new_value, actor_email)
        if changed is not None:
            return changed
        if self.registry.find_column(column_id) is None:
            return None
        return self.get(record_id)

    def apply_field(
        self,
        record_id: str,
        column_id: str,
        new_value: Any,
        actor_email: Optional[str] = None,
    ) -> Optional[Record]:
        """Like `upsert_field`, but None unless the value actually changed."""
        record = self.get(record_id)
        column = self.registry.find_column(column_id)
        if record is None or column is None or column.is_readonly:
            return None

        role = column.role
        if role is SemanticRole.title:
            before, after = record.title, coerce_value(kind_for(ColumnType.text), new_value) or ""
        elif role is SemanticRole.status:
            before, after = record.status, coerce_value(kind_for(ColumnType.text), new_value) or ""
        elif role is SemanticRole.assignee:
            before = record.assignee_email
            after = coerce_value(kind_for(ColumnType.text), new_value) or None
        else:
            before = record.fields.get(column.id)
            after = coerce_value(kind_for(column.type), new_value)

        if before == after:
            return None
        if role is SemanticRole.status and after:
            allowed = {opt.id for opt in self.registry.status_options()}
            if after not in allowed:
                raise MutationRejected(f"Unknown status '{after}'", field=column.id)

        if role is SemanticRole.title:
            record.title = after
        elif role is SemanticRole.status:
            record.status = after
            self._sync_completion(record)
        elif role is SemanticRole.assignee:
            record.assignee_email = after
        else:
            record.fields[column.id] = after

        self._log(record.id, column.id, before, after, actor_email)
        self._touch(record, actor_email)
        return record

    def create_record(self, actor_email: Optional[str] = None) -> Record:
        now = self._clock()
        record = Record(
            id=short_id("t", 10),
            title=NEW_RECORD_TITLE,
            status=self.registry.default_status_id(),
            assignee_email=actor_email or None,
            created_by=actor_email or None,
            updated_by=actor_email or None,
            created_at=now,
            updated_at=now,
        )
        self._sync_completion(record)
        self._records.append(record)
        return record

    def duplicate_record(
        self, record_id: str, actor_email: Optional[str] = None
    ) -> Optional[Record]:
        original = self.get(record_id)
        if original is None:
            return None
        now = self._clock()
        copy = original.model_copy(
            update={
                "id": short_id("t", 10),
                "title": f"{original.title or 'Untitled'} Copy",
                "created_at": now,
                "updated_at": now,
                "completed_at": None,
            },
            deep=True,
        )
        if actor_email:
            copy.created_by = actor_email
            copy.updated_by = actor_email
        # The copy completes "now" if it is already in the terminal status
        self._sync_completion(copy)
        self._records.append(copy)
        return copy

    def delete_record(self, record_id: str) -> Optional[Record]:
        """Hard delete. Activity entries that reference the record are kept."""
        record = self.get(record_id)
        if record is None:
            return None
        self._records.remove(record)
        return record

    def reorder_record(self, source_id: str, target_id: str) -> bool:
        if not source_id or not target_id or source_id == target_id:
            return False
        ids = [r.id for r in self._records]
        if source_id not in ids or target_id not in ids:
            return False
        from_idx, to_idx = ids.index(source_id), ids.index(target_id)
        self._records.insert(to_idx, self._records.pop(from_idx))
        return True

    def add_comment(
        self, record_id: str, text: str, actor_email: Optional[str] = None
    ) -> Optional[Comment]:
        body = (text or "").strip()
        if not body:
            raise MutationRejected("Comment text required", field="text")
        record = self.get(record_id)
        if record is None:
            return None
        comment = Comment(
            id=short_id("c", 5),
            text=body,
            user=actor_email or "unknown",
            timestamp=self._clock(),
        )
        record.comments.append(comment)
        self._touch(record, actor_email)
        return comment
