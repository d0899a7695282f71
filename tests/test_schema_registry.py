# File: tests/test_schema_registry.py | Version: 1.0 | Path: /tests/test_schema_registry.py
import pytest

from taskgrid.core.errors import MutationRejected
from taskgrid.engine.schema_registry import SchemaRegistry
from taskgrid.schemas.columns import Column, ColumnOption, ColumnType, SemanticRole
from taskgrid.schemas.records import Record


def _ids(cols):
    return [c.id for c in cols]


def test_empty_registry_behaves_like_default_schema():
    reg = SchemaRegistry()
    assert _ids(reg.get_columns()) == ["title", "status", "assignee", "updatedAt"]
    assert reg.stored_columns == []
    assert reg.column_for_role(SemanticRole.status).id == "status"
    assert reg.default_status_id() == "todo"
    assert reg.find_column("updatedAt").is_readonly


def test_add_column_requires_a_name_and_seeds_select_options():
    reg = SchemaRegistry()
    with pytest.raises(MutationRejected):
        reg.add_column("   ")
    assert reg.stored_columns == []

    cols = reg.add_column("Priority", "single_select")
    assert len(cols) == 5
    prio = cols[-1]
    assert prio.label == "Priority"
    assert [o.label for o in prio.options] == ["Option 1", "Option 2"]


def test_retype_adjusts_options_and_respects_lock():
    reg = SchemaRegistry()
    col = reg.add_column("Stage", ColumnType.single_select)[-1]
    reg.retype_column(col.id, ColumnType.checkbox)
    assert reg.find_column(col.id).options is None

    locked = SchemaRegistry([Column(id="x", label="X", locked=True)])
    with pytest.raises(MutationRejected):
        locked.retype_column("x", ColumnType.number)
    assert locked.find_column("x").type is ColumnType.text


def test_delete_column_strips_values_from_records():
    reg = SchemaRegistry()
    col = reg.add_column("Notes")[-1]
    records = [
        Record(id="r1", fields={col.id: "hello", "other": 1}),
        Record(id="r2"),
    ]
    cols = reg.delete_column(col.id, records)
    assert col.id not in _ids(cols)
    assert records[0].fields == {"other": 1}


def test_duplicate_column_drops_role_and_reissues_option_ids():
    reg = SchemaRegistry()
    cols = reg.duplicate_column("status")
    copy = cols[2]
    assert copy.label == "Status Copy"
    assert copy.role is None
    assert reg.column_for_role(SemanticRole.status).id == "status"
    original_ids = {o.id for o in cols[1].options}
    assert original_ids.isdisjoint({o.id for o in copy.options})


def test_move_insert_and_reorder():
    reg = SchemaRegistry()
    assert reg.move_column("title", -1) is None
    assert reg.stored_columns == []
    assert _ids(reg.move_column("title", 1))[:2] == ["status", "title"]
    assert _ids(reg.reorder_column("updatedAt", "status"))[0] == "updatedAt"

    cols = reg.insert_column("assignee", "left")
    idx = _ids(cols).index("assignee")
    assert cols[idx - 1].label == "New Field"
    cols = reg.insert_column("assignee", "right")
    assert cols[idx + 1].label == "New Field 2"


def test_update_options_skips_blank_labels():
    reg = SchemaRegistry()
    col = reg.add_column("Tags", "multi_select")[-1]
    reg.update_options(col.id, ["Red", "  ", "Blue"])
    assert [o.label for o in reg.find_column(col.id).options] == ["Red", "Blue"]


def test_install_unlocks_and_restores_legacy_roles():
    reg = SchemaRegistry()
    reg.install(
        [
            Column(id="title", label="Name", locked=True),
            Column(
                id="status",
                label="State",
                type="single_select",
                options=[ColumnOption(id="open", label="Open")],
            ),
        ]
    )
    title = reg.find_column("title")
    assert title.role is SemanticRole.title and title.locked is False
    assert reg.default_status_id() == "open"


def test_resolve_column_never_fails():
    reg = SchemaRegistry()
    ghost = reg.resolve_column("gone")
    assert ghost.label == "Field"
    assert ghost.is_readonly
    assert reg.find_column("gone") is None


def test_noop_mutations_return_none_and_keep_registry_empty():
    reg = SchemaRegistry()
    assert reg.rename_column("ghost", "Anything") is None
    assert reg.delete_column("ghost") is None
    assert reg.retype_column("ghost", ColumnType.number) is None
    assert reg.update_options("ghost", ["A"]) is None
    assert reg.duplicate_column("ghost") is None
    assert reg.insert_column("ghost") is None
    assert reg.reorder_column("title", "title") is None
    assert reg.reorder_column("title", "ghost") is None
    assert reg.move_column("title", 0) is None
    assert reg.rename_column("title", " Title ") is None
    assert reg.retype_column("status", ColumnType.single_select) is None
    assert reg.stored_columns == []

    assert _ids(reg.rename_column("title", "Name")) == ["title", "status", "assignee", "updatedAt"]
    assert reg.find_column("title").label == "Name"
