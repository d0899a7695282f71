# File: /taskgrid/engine/__init__.py | Version: 1.0 | Title: Client-side record engine
from taskgrid.engine.filtering import RecordGroup, filter_and_group, filter_records, group_records
from taskgrid.engine.grids import GridBook
from taskgrid.engine.record_store import RecordStore
from taskgrid.engine.schema_registry import SchemaRegistry
from taskgrid.engine.sync import SyncController, SyncStatus
from taskgrid.engine.workspace import Workspace

__all__ = [
    "GridBook",
    "RecordGroup",
    "RecordStore",
    "SchemaRegistry",
    "SyncController",
    "SyncStatus",
    "Workspace",
    "filter_and_group",
    "filter_records",
    "group_records",
]
