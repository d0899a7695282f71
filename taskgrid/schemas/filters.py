# File: /taskgrid/schemas/filters.py | Version: 1.3 | Title: Filters, Conditions & Grid Schemas
from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import AliasChoices, Field, field_validator

from taskgrid.schemas._base import DocumentModel, drop_null_items


class Operator(str, Enum):
    contains = "contains"
    is_ = "is"
    is_not = "is_not"
    is_empty = "is_empty"
    not_empty = "not_empty"
    on = "on"
    before = "before"
    after = "after"


DATE_OPERATORS = frozenset({Operator.on, Operator.before, Operator.after})


class GroupBy(str, Enum):
    none = ""
    status = "status"
    assignee = "assignee"


FIELD_GROUP_PREFIX = "field:"


class Condition(DocumentModel):
    field: str = Field(
        default="",
        validation_alias=AliasChoices("field", "columnId"),
        serialization_alias="field",
    )
    # Unknown operators are kept as plain strings so an old grid still loads
    operator: Union[Operator, str] = Operator.contains
    value: Optional[Any] = None


class FilterSet(DocumentModel):
    assignee_email: str = ""
    status: str = ""
    text: str = ""
    date_from: str = ""
    date_to: str = ""
    group_by: str = ""
    conditions: List[Condition] = Field(default_factory=list)

    @field_validator("conditions", mode="before")
    @classmethod
    def skip_null_conditions(cls, value: Any) -> Any:
        return drop_null_items(value)

    @property
    def group_field_id(self) -> Optional[str]:
        if self.group_by.startswith(FIELD_GROUP_PREFIX):
            return self.group_by[len(FIELD_GROUP_PREFIX):] or None
        return None


class Grid(DocumentModel):
    id: str
    name: str = "Grid"
    filters: FilterSet = Field(default_factory=FilterSet)
