# File: /taskgrid/schemas/__init__.py | Version: 1.0
from taskgrid.schemas.columns import Column, ColumnOption, ColumnType, SemanticRole
from taskgrid.schemas.filters import Condition, FilterSet, Grid, Operator
from taskgrid.schemas.records import ActivityEntry, Comment, Record
from taskgrid.schemas.state import StaffMember, WorkspaceDocument

__all__ = [
    "ActivityEntry",
    "Column",
    "ColumnOption",
    "ColumnType",
    "Comment",
    "Condition",
    "FilterSet",
    "Grid",
    "Operator",
    "Record",
    "SemanticRole",
    "StaffMember",
    "WorkspaceDocument",
]
