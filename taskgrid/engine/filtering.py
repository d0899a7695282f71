# File: /taskgrid/engine/filtering.py | Version: 2.0 | Title: Filter & Group engine (conditions, legacy filters, grouping)
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from taskgrid.engine.field_values import as_text, is_empty, parse_day
from taskgrid.engine.record_store import read_value
from taskgrid.engine.schema_registry import SchemaRegistry
from taskgrid.schemas.columns import Column, ColumnType
from taskgrid.schemas.filters import (
    DATE_OPERATORS,
    Condition,
    FilterSet,
    GroupBy,
    Operator,
)
from taskgrid.schemas.records import Record

NO_STATUS_KEY = "(none)"
UNASSIGNED_KEY = "__none"
NO_VALUE_KEY = "__none"
LIST_KEY_SEPARATOR = "|"

NO_STATUS_LABEL = "No status"
UNASSIGNED_LABEL = "Unassigned"
NO_VALUE_LABEL = "No value"
UNKNOWN_FIELD_LABEL = "Field"


class RecordGroup(NamedTuple):
    key: Optional[str]
    label: Optional[str]
    records: List[Record]


# ----------------------
# Legacy scalar filters
# ----------------------
def _searchable_text(record: Record) -> str:
    parts = [record.title or ""]
    parts += [as_text(v) for v in record.fields.values()]
    return " ".join(parts).lower()


def matches_legacy(record: Record, f: FilterSet) -> bool:
    """
    The four pre-condition-list filters, ANDed. Saved grids from before the
    condition list still carry them.
    """
    if f.assignee_email and (record.assignee_email or "") != f.assignee_email:
        return False
    if f.status and (record.status or "") != f.status:
        return False
    if f.text and f.text.lower() not in _searchable_text(record):
        return False
    if f.date_from or f.date_to:
        day = parse_day(record.updated_at or record.created_at)
        if day is None:
            return False
        start = parse_day(f.date_from)
        if f.date_from and start is not None and day < start:
            return False
        end = parse_day(f.date_to)
        if f.date_to and end is not None and day > end:
            return False
    return True


# ----------------------
# Conditions
# ----------------------
def _operator(op: Operator | str | None) -> Optional[Operator]:
    if isinstance(op, Operator):
        return op
    try:
        return Operator(op or Operator.contains)
    except ValueError:
        return None


def _is_date_column(column: Column) -> bool:
    return column.type in (
        ColumnType.date,
        ColumnType.created_time,
        ColumnType.last_modified_time,
    )


def _check(raw: Any, op: Operator, value: Any, column: Column) -> bool:
    if op is Operator.is_empty:
        return is_empty(raw)
    if op is Operator.not_empty:
        return not is_empty(raw)

    if value is None:
        value = ""

    if _is_date_column(column) and op in DATE_OPERATORS:
        lhs, rhs = parse_day(raw), parse_day(value)
        if lhs is None or rhs is None:
            return False
        if op is Operator.on:
            return lhs == rhs
        if op is Operator.before:
            return lhs <= rhs
        return lhs >= rhs

    if isinstance(raw, (list, tuple)):
        needle = as_text(value)
        items = [as_text(v) for v in raw]
        if op is Operator.contains:
            return any(needle.lower() in item.lower() for item in items)
        if op is Operator.is_:
            return needle in items
        if op is Operator.is_not:
            return needle not in items

    # Generic branch: anything else, including operators that do not fit the column type
    lhs = as_text(raw).lower()
    rhs = as_text(value).lower()
    if op is Operator.contains:
        return rhs in lhs
    if op is Operator.is_:
        return lhs == rhs
    if op is Operator.is_not:
        return lhs != rhs
    return False


def evaluate_condition(
    record: Record,
    condition: Condition,
    registry: SchemaRegistry,
    *,
    position: Optional[int] = None,
) -> bool:
    """
    Fail closed: a condition whose field no longer resolves, or whose operator
    is unknown, matches nothing.
    """
    column = registry.find_column(condition.field)
    if column is None:
        return False
    op = _operator(condition.operator)
    if op is None:
        return False
    raw = read_value(record, column, position)
    return _check(raw, op, condition.value, column)


def filter_records(
    records: Sequence[Record],
    registry: SchemaRegistry,
    filter_set: Optional[FilterSet],
) -> List[Record]:
    """Records passing the legacy filters and every condition, in their original order."""
    f = filter_set or FilterSet()
    out: List[Record] = []
    for position, record in enumerate(records, start=1):
        if not matches_legacy(record, f):
            continue
        if all(
            evaluate_condition(record, cond, registry, position=position)
            for cond in f.conditions
        ):
            out.append(record)
    return out


# ----------------------
# Grouping
# ----------------------
def _field_group(
    record: Record, field_id: str, registry: SchemaRegistry
) -> Tuple[str, str]:
    column = registry.find_column(field_id)
    base = column.label if column is not None else UNKNOWN_FIELD_LABEL
    raw = read_value(record, column) if column is not None else None

    if isinstance(raw, (list, tuple)):
        values = [as_text(v) for v in raw]
        if not values:
            return NO_VALUE_KEY, f"{base}: {NO_VALUE_LABEL}"
        shown = [column.option_label(v) or v for v in values] if column.is_select else values
        return LIST_KEY_SEPARATOR.join(values), f"{base}: {', '.join(shown)}"

    text = as_text(raw)
    if not text:
        return NO_VALUE_KEY, f"{base}: {NO_VALUE_LABEL}"
    shown = (column.option_label(text) or text) if column.is_select else text
    return text, f"{base}: {shown}"


def group_info(
    record: Record,
    group_by: str,
    registry: SchemaRegistry,
    staff: Optional[Mapping[str, str]] = None,
) -> Tuple[str, str]:
    """(bucket key, display label) of `record` under `group_by`."""
    if group_by == GroupBy.status.value:
        key = record.status or NO_STATUS_KEY
        labels = {opt.id: opt.label for opt in registry.status_options()}
        return key, labels.get(key) or NO_STATUS_LABEL

    if group_by == GroupBy.assignee.value:
        email = record.assignee_email or ""
        if not email:
            return UNASSIGNED_KEY, UNASSIGNED_LABEL
        name = (staff or {}).get(email)
        return email, name or UNASSIGNED_LABEL

    field_id = FilterSet(group_by=group_by).group_field_id
    if field_id:
        return _field_group(record, field_id, registry)

    return NO_VALUE_KEY, "(None)"


def group_records(
    records: Iterable[Record],
    group_by: Optional[str],
    registry: SchemaRegistry,
    staff: Optional[Mapping[str, str]] = None,
) -> List[RecordGroup]:
    """
    Groups appear in first-encountered order and members keep record order.
    No grouping yields one unlabeled group; no records yield no groups.
    """
    rows = list(records)
    if not rows:
        return []
    if not group_by:
        return [RecordGroup(None, None, rows)]

    buckets: Dict[str, RecordGroup] = {}
    for record in rows:
        key, label = group_info(record, group_by, registry, staff)
        if key not in buckets:
            buckets[key] = RecordGroup(key, label, [])
        buckets[key].records.append(record)
    return list(buckets.values())


def filter_and_group(
    records: Sequence[Record],
    registry: SchemaRegistry,
    filter_set: Optional[FilterSet],
    staff: Optional[Mapping[str, str]] = None,
) -> List[RecordGroup]:
    f = filter_set or FilterSet()
    return group_records(filter_records(records, registry, f), f.group_by, registry, staff)
