# File: /taskgrid/engine/workspace.py | Version: 1.2 | Title: Workspace facade (the one state object the UI talks to)
from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

from taskgrid.core.errors import MutationRejected
from taskgrid.core.roles import can_view_dashboard, effective_role
from taskgrid.engine.dashboard import DashboardData, dashboard_counts
from taskgrid.engine.filtering import RecordGroup, filter_and_group
from taskgrid.engine.grids import GridBook
from taskgrid.engine.record_store import Clock, RecordStore, utcnow
from taskgrid.engine.schema_registry import SchemaRegistry
from taskgrid.engine.signals import Notice, Signal
from taskgrid.engine.staff import assignee_name, display_names
from taskgrid.schemas.columns import Column, ColumnType, SemanticRole
from taskgrid.schemas.filters import FilterSet, Grid
from taskgrid.schemas.records import ActivityEntry, Comment, Record
from taskgrid.schemas.state import StaffMember, WorkspaceDocument

log = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def mutation(success: Optional[str] = None) -> Callable[[F], F]:
    """
    Wrap a state-changing operation: validation failures become an error
    notice (state untouched), anything that took effect announces `changed`
    so the sync controller can schedule a push.
    """

    def deco(fn: F) -> F:
        @functools.wraps(fn)
        def wrapper(self: "Workspace", *args: Any, **kwargs: Any) -> Any:
            try:
                result = fn(self, *args, **kwargs)
            except MutationRejected as e:
                log.info("Rejected %s: %s", fn.__name__, e.message)
                self.notices.emit(Notice.error(e.message))
                return None
            if result is None or result is False:
                return result
            if success:
                self.notices.emit(Notice.success(success))
            self.changed.emit(fn.__name__)
            return result

        return wrapper  # type: ignore[return-value]

    return deco


class Workspace:
    """
    Explicit state of the selected workspace: schema, records + activity,
    grids/filters, advisory role and staff. Rendering code reads from it and
    mutates only through its methods.
    """

    def __init__(
        self,
        tenant_id: Optional[str] = None,
        workspace_id: Optional[str] = None,
        actor_email: Optional[str] = None,
        *,
        terminal_status_id: Optional[str] = None,
        clock: Clock = utcnow,
    ) -> None:
        self.tenant_id = tenant_id
        self.workspace_id = workspace_id
        self.actor_email = actor_email
        self.role: Optional[str] = None
        self.registry = SchemaRegistry(terminal_status_id=terminal_status_id)
        self.store = RecordStore(self.registry, clock=clock)
        self.grids = GridBook()
        self.staff: List[StaffMember] = []
        self._extras: Dict[str, Any] = {}

        self.changed: Signal[str] = Signal("changed")
        self.notices: Signal[Notice] = Signal("notices")

    # ---- Read side ----

    @property
    def records(self) -> List[Record]:
        return self.store.records

    @property
    def activity(self) -> List[ActivityEntry]:
        return self.store.activity

    @property
    def columns(self) -> List[Column]:
        return self.registry.get_columns()

    @property
    def filters(self) -> FilterSet:
        return self.grids.filters

    @property
    def staff_names(self) -> Dict[str, str]:
        return display_names(self.staff)

    @property
    def can_view_dashboard(self) -> bool:
        return can_view_dashboard(self.role)

    def get_filtered_and_grouped_records(
        self, filter_set: Optional[FilterSet] = None
    ) -> List[RecordGroup]:
        f = filter_set if filter_set is not None else self.grids.filters
        return filter_and_group(self.store.records, self.registry, f, self.staff_names)

    def activity_for(self, record_id: str) -> List[ActivityEntry]:
        return self.store.activity_for(record_id)

    def assignee_label(self, record: Record) -> str:
        return assignee_name(record.assignee_email, self.staff_names)

    def dashboard(self) -> DashboardData:
        return dashboard_counts(self.store.records)

    def set_staff(self, staff: Iterable[StaffMember]) -> None:
        self.staff = list(staff)

    # ---- Records ----

    @mutation()
    def mutate_field(
        self,
        record_id: str,
        column_id: str,
        value: Any,
        actor_email: Optional[str] = None,
    ) -> Optional[Record]:
        return self.store.apply_field(record_id, column_id, value, actor_email or self.actor_email)

    @mutation()
    def create_record(self, actor_email: Optional[str] = None) -> Optional[Record]:
        if not self.workspace_id:
            return None
        return self.store.create_record(actor_email or self.actor_email)

    @mutation()
    def delete_record(self, record_id: str) -> Optional[Record]:
        return self.store.delete_record(record_id)

    @mutation()
    def duplicate_record(self, record_id: str) -> Optional[Record]:
        return self.store.duplicate_record(record_id, self.actor_email)

    @mutation()
    def reorder_record(self, source_id: str, target_id: str) -> bool:
        return self.store.reorder_record(source_id, target_id)

    @mutation()
    def add_comment(self, record_id: str, text: str) -> Optional[Comment]:
        return self.store.add_comment(record_id, text, self.actor_email)

    def assign_to_self(self, record_id: str) -> Optional[Record]:
        if not self.actor_email:
            self.notices.emit(Notice.error("No user email found"))
            return None
        assignee = self.registry.column_for_role(SemanticRole.assignee)
        if assignee is None:
            return None
        return self.mutate_field(record_id, assignee.id, self.actor_email)

    # ---- Columns ----

    @mutation("Field added")
    def add_column(self, label: str, type: ColumnType | str = ColumnType.text) -> List[Column]:
        return self.registry.add_column(label, type)

    @mutation("Field inserted")
    def insert_column(self, anchor_id: str, side: str = "right") -> Optional[List[Column]]:
        return self.registry.insert_column(anchor_id, side)

    @mutation("Field renamed")
    def rename_column(self, column_id: str, label: str) -> Optional[List[Column]]:
        return self.registry.rename_column(column_id, label)

    @mutation("Field updated")
    def retype_column(self, column_id: str, new_type: ColumnType | str) -> Optional[List[Column]]:
        return self.registry.retype_column(column_id, new_type)

    @mutation("Options updated")
    def update_column_options(self, column_id: str, labels: Sequence[str]) -> Optional[List[Column]]:
        return self.registry.update_options(column_id, labels)

    @mutation("Field deleted")
    def delete_column(self, column_id: str) -> Optional[List[Column]]:
        return self.registry.delete_column(column_id, self.store.records)

    @mutation()
    def move_column(self, column_id: str, delta: int) -> Optional[List[Column]]:
        return self.registry.move_column(column_id, delta)

    @mutation()
    def reorder_column(self, source_id: str, target_id: str) -> Optional[List[Column]]:
        return self.registry.reorder_column(source_id, target_id)

    @mutation("Field duplicated")
    def duplicate_column(self, column_id: str) -> Optional[List[Column]]:
        return self.registry.duplicate_column(column_id)

    # ---- Grids & filters ----

    @mutation()
    def update_filters(self, **partial: Any) -> FilterSet:
        return self.grids.update_filters(self.workspace_id, **partial)

    @mutation()
    def save_grid(self, name: str, filter_set: Optional[FilterSet] = None) -> Grid:
        return self.grids.save(name, filter_set, self.workspace_id)

    @mutation()
    def select_grid(self, grid_id: str) -> Optional[Grid]:
        return self.grids.select(grid_id, self.workspace_id)

    @mutation()
    def rename_grid(self, grid_id: str, name: str) -> Optional[Grid]:
        return self.grids.rename(grid_id, name)

    @mutation()
    def delete_grid(self, grid_id: str) -> bool:
        return self.grids.delete(grid_id, self.workspace_id)

    # ---- Workspace switching & documents ----

    def select_workspace(self, workspace_id: Optional[str]) -> None:
        self.workspace_id = workspace_id
        self.role = None
        self._extras = {}
        self.registry.reset()
        self.store.replace_records([])
        self.store.replace_activity([])
        self.grids.reset(workspace_id)

    def snapshot(self) -> Dict[str, Any]:
        """Full persisted document of the current state (whole-state overwrite)."""
        doc = WorkspaceDocument(
            tasks=self.store.records,
            columns=self.registry.get_columns(),
            filters=self.grids.workspace_filters,
            activity=self.store.activity,
            grids=self.grids.grids,
            current_grid_id=self.grids.current_grid_id,
        )
        data = doc.to_document()
        for key, value in self._extras.items():
            data.setdefault(key, value)
        return data

    def apply_document(self, doc: Optional[WorkspaceDocument]) -> None:
        """
        Install a pulled document. A document with a task list replaces
        everything; one without only contributes the parts it carries.
        """
        if doc is not None and doc.model_extra:
            self._extras = dict(doc.model_extra)

        if doc is not None and doc.tasks is not None:
            self.store.replace_records(doc.tasks)
            self.registry.install(doc.columns)
            if doc.filters:
                self.grids.workspace_filters = dict(doc.filters)
            if doc.activity is not None:
                self.store.replace_activity(doc.activity)
            self.grids.install(doc.grids, doc.current_grid_id)
        else:
            if doc is not None and doc.columns:
                self.registry.install(doc.columns)
            else:
                self.registry.install(self.registry.stored_columns or None)
            if doc is not None and doc.activity is not None:
                self.store.replace_activity(doc.activity)
            if doc is not None and doc.grids is not None:
                self.grids.install(doc.grids, doc.current_grid_id)

        self.grids.filters = self.grids.saved_filters(self.workspace_id)
        self.grids.ensure_default_grid()

    def apply_echo(self, doc: WorkspaceDocument) -> None:
        """Records echoed back by a save replace the local ones (server-side normalisation)."""
        if doc.tasks is not None:
            self.store.replace_records(doc.tasks)

    @property
    def ui_role(self) -> str:
        return effective_role(self.role).value
