# File: tests/test_filtering.py | Version: 1.0 | Path: /tests/test_filtering.py
from datetime import UTC, datetime

import pytest

from taskgrid.engine.filtering import filter_and_group, filter_records, group_records
from taskgrid.engine.schema_registry import SchemaRegistry
from taskgrid.schemas.columns import ColumnOption, ColumnType
from taskgrid.schemas.filters import Condition, FilterSet
from taskgrid.schemas.records import Record


def _dt(day):
    return datetime(2024, 3, day, 12, 0, tzinfo=UTC)


@pytest.fixture()
def registry():
    reg = SchemaRegistry()
    reg.add_column(
        "Tags",
        ColumnType.multi_select,
        options=[ColumnOption(id="red", label="Red"), ColumnOption(id="blue", label="Blue")],
    )
    reg.add_column("Due", ColumnType.date)
    reg.add_column("Notes")
    return reg


def _col(reg, label):
    return next(c for c in reg.get_columns() if c.label == label)


@pytest.fixture()
def records(registry):
    tags, due, notes = _col(registry, "Tags"), _col(registry, "Due"), _col(registry, "Notes")
    return [
        Record(
            id="r1",
            title="Alpha launch",
            status="todo",
            assignee_email="a@x.com",
            fields={tags.id: ["red", "blue"], due.id: "2024-03-01", notes.id: "call vendor"},
            updated_at=_dt(2),
        ),
        Record(
            id="r2",
            title="Beta",
            status="done",
            assignee_email="b@x.com",
            fields={tags.id: ["blue"]},
            updated_at=_dt(4),
        ),
        Record(
            id="r3",
            title="Gamma",
            status="in_progress",
            assignee_email="a@x.com",
            fields={due.id: "2024-03-20"},
            updated_at=_dt(6),
        ),
        Record(id="r4", title="Delta", status="", assignee_email=None, updated_at=_dt(8)),
    ]


def _ids(rows):
    return [r.id for r in rows]


def test_empty_filter_returns_everything_ungrouped(records, registry):
    groups = filter_and_group(records, registry, FilterSet())
    assert len(groups) == 1
    assert groups[0].key is None and groups[0].label is None
    assert _ids(groups[0].records) == ["r1", "r2", "r3", "r4"]


def test_no_records_means_no_groups(registry):
    assert filter_and_group([], registry, FilterSet(group_by="status")) == []


def test_assignee_filter_grouped_by_status(records, registry):
    f = FilterSet(assignee_email="a@x.com", group_by="status")
    groups = filter_and_group(records, registry, f)
    assert [(g.key, g.label) for g in groups] == [
        ("todo", "To Do"),
        ("in_progress", "In Progress"),
    ]
    assert [_ids(g.records) for g in groups] == [["r1"], ["r3"]]


def test_status_and_assignee_fallback_groups(records, registry):
    by_status = group_records(records, "status", registry)
    assert (by_status[-1].key, by_status[-1].label) == ("(none)", "No status")

    staff = {"a@x.com": "Ann"}
    by_assignee = group_records(records, "assignee", registry, staff)
    assert [(g.key, g.label) for g in by_assignee] == [
        ("a@x.com", "Ann"),
        ("b@x.com", "Unassigned"),
        ("__none", "Unassigned"),
    ]


def test_group_by_multi_select_field(records, registry):
    tags = _col(registry, "Tags")
    groups = group_records(records, f"field:{tags.id}", registry)
    assert [(g.key, g.label) for g in groups] == [
        ("red|blue", "Tags: Red, Blue"),
        ("blue", "Tags: Blue"),
        ("__none", "Tags: No value"),
    ]
    assert _ids(groups[2].records) == ["r3", "r4"]


def test_legacy_text_filter_searches_title_and_fields(records, registry):
    assert _ids(filter_records(records, registry, FilterSet(text="VENDOR"))) == ["r1"]
    assert _ids(filter_records(records, registry, FilterSet(text="gam"))) == ["r3"]


def test_legacy_date_range_is_inclusive_by_day(records, registry):
    f = FilterSet(date_from="2024-03-04", date_to="2024-03-06")
    assert _ids(filter_records(records, registry, f)) == ["r2", "r3"]


def test_conditions(records, registry):
    notes, tags, due = _col(registry, "Notes"), _col(registry, "Tags"), _col(registry, "Due")

    def run(*conds):
        return _ids(filter_records(records, registry, FilterSet(conditions=list(conds))))

    assert run(Condition(field="title", operator="contains", value="ALPHA")) == ["r1"]
    assert run(Condition(field=notes.id, operator="is_empty")) == ["r2", "r3", "r4"]
    assert run(Condition(field=tags.id, operator="is", value="blue")) == ["r1", "r2"]
    assert run(Condition(field=tags.id, operator="is_not", value="red")) == ["r2", "r3", "r4"]
    assert run(Condition(field=due.id, operator="before", value="2024-03-10")) == ["r1"]
    assert run(Condition(field="status", operator="is", value="done")) == ["r2"]
    # ANDed
    assert run(
        Condition(field="assignee", operator="is", value="a@x.com"),
        Condition(field=due.id, operator="not_empty"),
    ) == ["r1", "r3"]


def test_conditions_fail_closed(records, registry):
    notes = _col(registry, "Notes")
    f = FilterSet(conditions=[Condition(field=notes.id, operator="contains", value="call")])
    assert _ids(filter_records(records, registry, f)) == ["r1"]

    registry.delete_column(notes.id, records)
    assert filter_records(records, registry, f) == []

    bogus = FilterSet(conditions=[Condition(field="title", operator="resembles", value="a")])
    assert filter_records(records, registry, bogus) == []


def test_assignee_condition_scenario(registry):
    rows = [
        Record(id="a", assignee_email="a@x.com"),
        Record(id="b", assignee_email="b@x.com"),
        Record(id="c", assignee_email=None),
    ]
    f = FilterSet(conditions=[Condition(field="assignee", operator="is", value="a@x.com")])
    assert _ids(filter_records(rows, registry, f)) == ["a"]


def test_saved_grid_survives_deleted_column(records, registry):
    from taskgrid.engine.grids import GridBook

    notes = _col(registry, "Notes")
    book = GridBook()
    grid = book.save(
        "Vendor calls",
        FilterSet(conditions=[Condition(field=notes.id, operator="not_empty")]),
        "w1",
    )
    registry.delete_column(notes.id, records)
    assert filter_and_group(records, registry, grid.filters) == []


def test_date_on_and_after_compare_calendar_days(records, registry):
    due = _col(registry, "Due")

    def run(*conds, rows=records):
        return _ids(filter_records(rows, registry, FilterSet(conditions=list(conds))))

    assert run(Condition(field=due.id, operator="on", value="2024-03-01")) == ["r1"]
    assert run(Condition(field=due.id, operator="on", value="2024-03-01T18:30:00Z")) == ["r1"]
    assert run(Condition(field=due.id, operator="on", value="2024-03-02")) == []
    # inclusive of the operand day
    assert run(Condition(field=due.id, operator="after", value="2024-03-01")) == ["r1", "r3"]
    assert run(Condition(field=due.id, operator="after", value="2024-03-02")) == ["r3"]
    assert run(Condition(field=due.id, operator="after", value="2024-03-20T23:59:00Z")) == ["r3"]
    assert run(Condition(field=due.id, operator="after", value="next week")) == []

    # stored datetime vs date-only operand on the same day
    stamped = Record(id="r5", title="Epsilon", fields={due.id: "2024-03-20T09:15:00+00:00"})
    rows = records + [stamped]
    assert run(Condition(field=due.id, operator="on", value="2024-03-20"), rows=rows) == ["r3", "r5"]
    assert run(Condition(field=due.id, operator="after", value="2024-03-20"), rows=rows) == ["r3", "r5"]
    assert run(Condition(field=due.id, operator="before", value="2024-03-20"), rows=rows) == [
        "r1",
        "r3",
        "r5",
    ]


def test_date_operators_on_audit_timestamps(records, registry):
    def run(op, value):
        cond = Condition(field="updatedAt", operator=op, value=value)
        return _ids(filter_records(records, registry, FilterSet(conditions=[cond])))

    assert run("on", "2024-03-04") == ["r2"]
    assert run("on", "2024-03-04T00:00:00Z") == ["r2"]
    assert run("after", "2024-03-06") == ["r3", "r4"]


def test_multi_select_contains(records, registry):
    tags = _col(registry, "Tags")

    def run(value):
        cond = Condition(field=tags.id, operator="contains", value=value)
        return _ids(filter_records(records, registry, FilterSet(conditions=[cond])))

    assert run("red") == ["r1"]
    assert run("blue") == ["r1", "r2"]
    assert run("BLU") == ["r1", "r2"]
    assert run("green") == []
