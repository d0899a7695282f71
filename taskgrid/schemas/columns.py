# File: /taskgrid/schemas/columns.py | Version: 1.1 | Title: Column (field definition) schemas
from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import AliasChoices, Field, field_validator

from taskgrid.schemas._base import DocumentModel, drop_null_items


class ColumnType(str, Enum):
    text = "text"
    long_text = "long_text"
    checkbox = "checkbox"
    single_select = "single_select"
    multi_select = "multi_select"
    user = "user"
    date = "date"
    number = "number"
    attachment = "attachment"
    # derived / read-only kinds
    autonumber = "autonumber"
    created_time = "created_time"
    last_modified_time = "last_modified_time"
    created_by = "created_by"
    last_modified_by = "last_modified_by"
    formula = "formula"
    rollup = "rollup"
    count = "count"
    lookup = "lookup"
    button = "button"
    barcode = "barcode"


SELECT_TYPES = frozenset({ColumnType.single_select, ColumnType.multi_select})

READONLY_TYPES = frozenset(
    {
        ColumnType.autonumber,
        ColumnType.created_time,
        ColumnType.last_modified_time,
        ColumnType.created_by,
        ColumnType.last_modified_by,
        ColumnType.formula,
        ColumnType.rollup,
        ColumnType.count,
        ColumnType.lookup,
        ColumnType.button,
        ColumnType.barcode,
    }
)


class SemanticRole(str, Enum):
    title = "title"
    status = "status"
    assignee = "assignee"
    updated_at = "updated_at"


# Column ids used by documents written before roles were stored on the column
LEGACY_ROLE_IDS = {
    "title": SemanticRole.title,
    "status": SemanticRole.status,
    "assignee": SemanticRole.assignee,
    "updatedAt": SemanticRole.updated_at,
}


class ColumnOption(DocumentModel):
    id: str
    label: str = ""
    color_tag: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("colorTag", "color_tag", "color"),
        serialization_alias="colorTag",
    )


class Column(DocumentModel):
    id: str
    label: str = ""
    type: ColumnType = ColumnType.text
    options: Optional[List[ColumnOption]] = None
    locked: bool = False
    readonly: bool = False
    role: Optional[SemanticRole] = None

    @field_validator("options", mode="before")
    @classmethod
    def skip_null_options(cls, value: Any) -> Any:
        return drop_null_items(value)

    @property
    def is_select(self) -> bool:
        return self.type in SELECT_TYPES

    @property
    def is_readonly(self) -> bool:
        return (
            self.readonly
            or self.type in READONLY_TYPES
            or self.role is SemanticRole.updated_at
        )

    def option_label(self, option_id: str) -> Optional[str]:
        for opt in self.options or []:
            if opt.id == option_id:
                return opt.label
        return None
