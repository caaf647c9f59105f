"""Unit tests for the AG Grid bridge (pure option builders only)."""

from __future__ import annotations

from nicecolumns.column_spec import ColumnSpec
from nicecolumns.grid import (
    column_defs,
    column_from_configurator_row,
    configurator_name_choices,
    configurator_row,
    grid_options,
    meta_column_defs,
)
from nicecolumns.resolver import ColumnResolver


def test_column_defs_from_resolved_columns(models, catalog, store):
    resolver = ColumnResolver("book_grid", models.Book, {"columns": ["id", "author_id", "digitized"]}, catalog=catalog, store=store)
    defs = column_defs(resolver.columns)

    assert [d["field"] for d in defs] == ["id", "author__name", "digitized"]

    id_def = defs[0]
    assert id_def["hide"] is True
    assert id_def["editable"] is False
    assert id_def[":cellEditor"] == "'agNumberCellEditor'"

    assert defs[1][":cellEditor"] == "'agSelectCellEditor'"
    assert defs[2]["width"] == 50
    assert defs[2][":cellEditor"] == "'agCheckboxCellEditor'"


def test_column_defs_skip_not_included_columns():
    cols = [ColumnSpec(name="a", included=True), ColumnSpec(name="b", included=False)]
    assert [d["field"] for d in column_defs(cols)] == ["a"]


def test_column_def_filters_and_hideable():
    col = ColumnSpec(name="a", header="A", filterable=True, with_filters=False, hideable=False, sortable=True)
    (col_def,) = column_defs([col])
    assert col_def["filter"] is False
    assert col_def["lockVisible"] is True
    assert col_def["sortable"] is True
    assert col_def["headerName"] == "A"


def test_grid_options_extra_last():
    opts = grid_options([ColumnSpec(name="a")], [{"a": 1}], extra_grid_options={"rowHeight": 40})
    assert opts["rowData"] == [{"a": 1}]
    assert opts["rowHeight"] == 40
    assert opts["columnDefs"][0]["headerName"] == "a"


def test_meta_column_defs():
    defs = meta_column_defs()
    assert len(defs) == 11
    by_field = {d["field"]: d for d in defs}
    assert by_field["included"]["headerName"] == "Incl"
    assert by_field["default_value"]["headerName"] == "Default value"
    assert by_field["width"]["hide"] is True
    assert by_field["width"]["cellDataType"] == "number"
    assert by_field["name"][":cellEditor"] == "'agSelectCellEditor'"
    assert by_field["name"]["cellEditorParams"] == {"values": []}
    assert "cellEditorParams" not in by_field["header"]


def test_meta_column_defs_offer_name_choices():
    by_field = {d["field"]: d for d in meta_column_defs(["id", "title"])}
    assert by_field["name"]["cellEditorParams"] == {"values": ["id", "title"]}


def test_configurator_name_choices(models, catalog, store):
    resolver = ColumnResolver("book_grid", models.Book, {"columns": ["title", "author_id", "shelf_label"]}, catalog=catalog, store=store)
    choices = configurator_name_choices(resolver)

    assert choices[:3] == ["id", "title", "exemplars"]
    assert "author_id" in choices
    assert choices[-2:] == ["author__name", "shelf_label"]
    assert len(choices) == len(set(choices))


def test_configurator_row_round_trip():
    col = ColumnSpec(name="title", header="Title", editable=False, editor="textfield", attr_type="string", width=120)
    row = configurator_row(col)
    assert row["read_only"] is True
    assert row["included"] is True
    assert row["with_filters"] is True

    row["header"] = "Book title"
    row["read_only"] = False
    edited = column_from_configurator_row(row, col)
    assert edited.header == "Book title"
    assert edited.editable is True
    assert edited.editor == "textfield"
    assert edited.attr_type == "string"
    assert edited.read_only is None
