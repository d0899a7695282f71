# File: /taskgrid/schemas/_base.py | Version: 1.3 | Title: Pydantic Base Schema (camelCase wire names)
import secrets
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


class DocumentModel(BaseModel):
    """
    Base for everything stored in the workspace JSON document.
    Python attributes are snake_case; the persisted keys are camelCase.

    Other clients write explicit nulls for sub-objects they never filled in.
    A null on a field that has a default loads as that default, so one empty
    grid or filter block does not fail the whole document.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("*", mode="before")
    @classmethod
    def null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is not None or info.field_name is None:
            return value
        field = cls.model_fields.get(info.field_name)
        if field is None or field.is_required():
            return value
        return field.get_default(call_default_factory=True)

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


def drop_null_items(value: Any) -> Any:
    """Null entries inside a list or map carry nothing; skip them."""
    if isinstance(value, list):
        return [item for item in value if item is not None]
    if isinstance(value, dict):
        return {key: item for key, item in value.items() if item is not None}
    return value


def short_id(prefix: str, size: int = 6) -> str:
    return f"{prefix}_{secrets.token_hex(size // 2 + 1)[:size]}"
