# File: /taskgrid/engine/schema_registry.py | Version: 1.1 | Title: Schema Registry (typed columns)
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from taskgrid.core.config import settings
from taskgrid.core.errors import MutationRejected
from taskgrid.schemas._base import short_id
from taskgrid.schemas.columns import (
    LEGACY_ROLE_IDS,
    Column,
    ColumnOption,
    ColumnType,
    SemanticRole,
)
from taskgrid.schemas.records import Record

log = logging.getLogger(__name__)

OPTION_COLORS = ["gray", "blue", "green", "red", "yellow", "purple", "pink", "teal"]

NEW_FIELD_LABEL = "New Field"


def default_status_options() -> List[ColumnOption]:
    return [
        ColumnOption(id="todo", label="To Do", color_tag="gray"),
        ColumnOption(id="in_progress", label="In Progress", color_tag="blue"),
        ColumnOption(id="done", label="Done", color_tag="green"),
    ]


def default_columns() -> List[Column]:
    return [
        Column(id="title", label="Title", type=ColumnType.text, role=SemanticRole.title),
        Column(
            id="status",
            label="Status",
            type=ColumnType.single_select,
            role=SemanticRole.status,
            options=default_status_options(),
        ),
        Column(id="assignee", label="Assignee", type=ColumnType.user, role=SemanticRole.assignee),
        Column(
            id="updatedAt",
            label="Updated",
            type=ColumnType.date,
            role=SemanticRole.updated_at,
            readonly=True,
        ),
    ]


def normalize_columns(columns: Iterable[Column]) -> List[Column]:
    """
    Lock flags are local UI policy, so anything coming off the wire is unlocked.
    Documents written before roles existed get them back from the legacy ids.
    """
    out: List[Column] = []
    for col in columns:
        update = {"locked": False}
        if col.role is None and col.id in LEGACY_ROLE_IDS:
            update["role"] = LEGACY_ROLE_IDS[col.id]
        out.append(col.model_copy(update=update, deep=True))
    return out


def _seed_options() -> List[ColumnOption]:
    return [
        ColumnOption(id=short_id("opt", 4), label="Option 1", color_tag="blue"),
        ColumnOption(id=short_id("opt", 4), label="Option 2", color_tag="green"),
    ]


def _clean_label(label: Optional[str]) -> str:
    return (label or "").strip()


class SchemaRegistry:
    """
    Ordered column list of the active workspace.

    Every mutation returns the full, updated column list, or None when it
    changed nothing (unknown id, same label, move out of range). An empty
    registry behaves like the default schema; the first effective mutation
    materialises it.
    """

    def __init__(
        self,
        columns: Optional[Sequence[Column]] = None,
        *,
        terminal_status_id: Optional[str] = None,
    ) -> None:
        self._columns: List[Column] = list(columns or [])
        self.terminal_status_id = terminal_status_id or settings.TERMINAL_STATUS_ID

    # ---- Queries ----

    def get_columns(self) -> List[Column]:
        return list(self._columns) if self._columns else default_columns()

    @property
    def stored_columns(self) -> List[Column]:
        return list(self._columns)

    def find_column(self, column_id: Optional[str]) -> Optional[Column]:
        if not column_id:
            return None
        for col in self.get_columns():
            if col.id == column_id:
                return col
        return None

    def resolve_column(self, column_id: Optional[str]) -> Column:
        """
        Never fails: a deleted or unknown id resolves to a read-only placeholder
        so editors and labels keep working. Callers that must fail closed
        (filtering) check `find_column` instead.
        """
        col = self.find_column(column_id)
        if col is not None:
            return col
        return Column(id=column_id or "", label="Field", type=ColumnType.text, readonly=True)

    def column_for_role(self, role: SemanticRole) -> Optional[Column]:
        for col in self.get_columns():
            if col.role is role:
                return col
        return None

    def status_options(self) -> List[ColumnOption]:
        col = self.column_for_role(SemanticRole.status)
        if col is not None and col.options:
            return list(col.options)
        return default_status_options()

    def default_status_id(self) -> str:
        options = self.status_options()
        return options[0].id if options else ""

    # ---- Installation (pull) ----

    def install(self, columns: Optional[Sequence[Column]]) -> List[Column]:
        self._columns = normalize_columns(columns) if columns else normalize_columns(default_columns())
        return self.get_columns()

    def reset(self) -> None:
        """Forget the stored columns (workspace switch); defaults apply until the next install."""
        self._columns = []

    # ---- Mutations ----

    def _working(self) -> List[Column]:
        if not self._columns:
            self._columns = default_columns()
        return self._columns

    def _index(self, column_id: Optional[str]) -> int:
        """Position of `column_id`; a hit materialises the default schema."""
        for i, col in enumerate(self.get_columns()):
            if col.id == column_id:
                self._working()
                return i
        return -1

    def add_column(
        self,
        label: str,
        type: ColumnType | str = ColumnType.text,
        *,
        options: Optional[Sequence[ColumnOption]] = None,
    ) -> List[Column]:
        name = _clean_label(label)
        if not name:
            raise MutationRejected("Field name required", field="label")
        col_type = ColumnType(type)
        col = Column(id=short_id("fld", 5), label=name, type=col_type)
        if col.is_select:
            col.options = list(options) if options else _seed_options()
        self._working().append(col)
        log.info("Column added: %s (%s)", col.id, col_type.value)
        return self.get_columns()

    def insert_column(self, anchor_id: str, side: str = "right") -> Optional[List[Column]]:
        idx = self._index(anchor_id)
        if idx == -1:
            return None
        cols = self._columns
        labels = {c.label for c in cols}
        label, suffix = NEW_FIELD_LABEL, 1
        while label in labels:
            suffix += 1
            label = f"{NEW_FIELD_LABEL} {suffix}"
        col = Column(id=short_id("fld", 5), label=label, type=ColumnType.text)
        cols.insert(idx if side == "left" else idx + 1, col)
        return self.get_columns()

    def rename_column(self, column_id: str, label: str) -> Optional[List[Column]]:
        name = _clean_label(label)
        if not name:
            raise MutationRejected("Field name required", field="label")
        idx = self._index(column_id)
        if idx == -1 or self._columns[idx].label == name:
            return None
        self._columns[idx].label = name
        return self.get_columns()

    def retype_column(self, column_id: str, new_type: ColumnType | str) -> Optional[List[Column]]:
        idx = self._index(column_id)
        if idx == -1:
            return None
        col = self._columns[idx]
        if col.locked:
            raise MutationRejected(f"Field '{col.label}' is locked", field=column_id)
        target = ColumnType(new_type)
        if col.type is target:
            return None
        col.type = target
        if col.is_select:
            if not col.options:
                col.options = _seed_options()
        else:
            col.options = None
        return self.get_columns()

    def update_options(self, column_id: str, labels: Sequence[str]) -> Optional[List[Column]]:
        idx = self._index(column_id)
        if idx == -1:
            return None
        cleaned = [s.strip() for s in labels if s and s.strip()]
        self._columns[idx].options = [
            ColumnOption(
                id=short_id(f"opt_{i}", 3),
                label=label,
                color_tag=OPTION_COLORS[i % len(OPTION_COLORS)],
            )
            for i, label in enumerate(cleaned)
        ] or None
        return self.get_columns()

    def delete_column(
        self, column_id: str, records: Iterable[Record] = ()
    ) -> Optional[List[Column]]:
        idx = self._index(column_id)
        if idx == -1:
            return None
        col = self._columns[idx]
        if col.locked:
            raise MutationRejected(f"Field '{col.label}' is locked", field=column_id)
        del self._columns[idx]
        stripped = 0
        for record in records:
            if column_id in record.fields:
                del record.fields[column_id]
                stripped += 1
        log.info("Column deleted: %s (values stripped from %d records)", column_id, stripped)
        return self.get_columns()

    def move_column(self, column_id: str, delta: int) -> Optional[List[Column]]:
        idx = self._index(column_id)
        target = idx + delta
        if idx == -1 or delta == 0 or target < 0 or target >= len(self._columns):
            return None
        self._columns.insert(target, self._columns.pop(idx))
        return self.get_columns()

    def reorder_column(self, source_id: str, target_id: str) -> Optional[List[Column]]:
        if not source_id or not target_id or source_id == target_id:
            return None
        from_idx, to_idx = self._index(source_id), self._index(target_id)
        if from_idx == -1 or to_idx == -1:
            return None
        self._columns.insert(to_idx, self._columns.pop(from_idx))
        return self.get_columns()

    def duplicate_column(self, column_id: str) -> Optional[List[Column]]:
        idx = self._index(column_id)
        if idx == -1:
            return None
        src = self._columns[idx]
        # A copy never inherits the built-in role; there is one title/status/assignee
        copy = src.model_copy(
            update={
                "id": short_id("fld", 5),
                "label": f"{src.label} Copy",
                "locked": False,
                "role": None,
                "readonly": src.readonly and src.role is None,
            },
            deep=True,
        )
        if copy.options:
            for opt in copy.options:
                opt.id = short_id("opt", 4)
        self._columns.insert(idx + 1, copy)
        return self.get_columns()
