# File: /taskgrid/engine/field_values.py | Version: 1.0 | Title: Typed field value accessors
"""
Record field values are stored as plain JSON, keyed by column id. Every read
and write goes through `coerce_value` with the kind implied by the column type,
so a value of the wrong shape degrades to the kind's default instead of
leaking into comparisons.
"""
from __future__ import annotations

import math
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from taskgrid.schemas.columns import ColumnType


class ValueKind(str, Enum):
    text = "text"
    number = "number"
    boolean = "boolean"
    string_list = "string_list"
    date = "date"
    readonly = "readonly"


_KIND_BY_TYPE = {
    ColumnType.text: ValueKind.text,
    ColumnType.long_text: ValueKind.text,
    ColumnType.single_select: ValueKind.text,
    ColumnType.user: ValueKind.text,
    ColumnType.checkbox: ValueKind.boolean,
    ColumnType.number: ValueKind.number,
    ColumnType.multi_select: ValueKind.string_list,
    ColumnType.attachment: ValueKind.string_list,
    ColumnType.date: ValueKind.date,
}

_DEFAULTS = {
    ValueKind.text: "",
    ValueKind.number: None,
    ValueKind.boolean: False,
    ValueKind.string_list: [],
    ValueKind.date: None,
    ValueKind.readonly: None,
}

_TRUE_STRINGS = {"1", "true", "yes", "y", "on", "checked"}


def kind_for(column_type: ColumnType | str) -> ValueKind:
    try:
        return _KIND_BY_TYPE.get(ColumnType(column_type), ValueKind.readonly)
    except ValueError:
        return ValueKind.text


def default_for(kind: ValueKind) -> Any:
    value = _DEFAULTS[kind]
    return list(value) if isinstance(value, list) else value


def coerce_value(kind: ValueKind, raw: Any) -> Any:
    """Return `raw` shaped for `kind`; None stays None (an unset value is not a mismatch)."""
    if raw is None:
        return None

    if kind is ValueKind.text:
        if isinstance(raw, str):
            return raw
        if isinstance(raw, bool) or isinstance(raw, (list, dict)):
            return default_for(kind)
        if isinstance(raw, (int, float)):
            return format_number(raw)
        return default_for(kind)

    if kind is ValueKind.number:
        if isinstance(raw, bool):
            return default_for(kind)
        if isinstance(raw, (int, float)):
            return None if isinstance(raw, float) and math.isnan(raw) else raw
        if isinstance(raw, str):
            s = raw.strip()
            if not s:
                return None
            try:
                num = float(s)
            except ValueError:
                return default_for(kind)
            return int(num) if num.is_integer() and "." not in s else num
        return default_for(kind)

    if kind is ValueKind.boolean:
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, str):
            return raw.strip().lower() in _TRUE_STRINGS
        if isinstance(raw, (int, float)):
            return raw != 0
        return default_for(kind)

    if kind is ValueKind.string_list:
        if isinstance(raw, (list, tuple)):
            return [str(v) for v in raw if v is not None and v != ""]
        if isinstance(raw, str):
            # attachments were once stored as newline/comma separated text
            parts = raw.replace("\n", ",").split(",")
            return [p.strip() for p in parts if p.strip()]
        return default_for(kind)

    if kind is ValueKind.date:
        if isinstance(raw, (date, datetime)):
            return raw.isoformat()
        if isinstance(raw, str):
            s = raw.strip()
            return s if s and parse_day(s) is not None else None
        return default_for(kind)

    return raw


def is_empty(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, (list, tuple)) and not value)


def format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def as_text(value: Any) -> str:
    """Plain-text rendering used by text search and string comparisons."""
    if value is None or value is False:
        return ""
    if value is True:
        return "true"
    if isinstance(value, (list, tuple)):
        return ", ".join(as_text(v) for v in value)
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def parse_day(value: Any) -> Optional[date]:
    """Calendar day of a date/datetime/ISO string; time of day is dropped."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    s = value.strip()
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None
