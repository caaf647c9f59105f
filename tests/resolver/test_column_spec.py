"""Unit tests for ColumnSpec normalization and MetaColumn catalog."""

from __future__ import annotations

import logging

import pytest

from nicecolumns.column_spec import META_COLUMNS, ColumnSpec, meta_columns
from nicecolumns.errors import ColumnConfigError


def test_coerce_bare_name():
    assert ColumnSpec.coerce("title") == ColumnSpec(name="title")


def test_coerce_copies_column_spec():
    spec = ColumnSpec(name="title", width=100)
    copy = ColumnSpec.coerce(spec)
    assert copy == spec
    assert copy is not spec


def test_from_dict_accepts_camel_case_keys():
    spec = ColumnSpec.from_dict({"name": "notes", "readOnly": True, "withFilters": False, "defaultValue": "-"})
    assert spec.read_only is True
    assert spec.with_filters is False
    assert spec.default_value == "-"


def test_from_dict_ignores_unknown_keys_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="nicecolumns"):
        spec = ColumnSpec.from_dict({"name": "notes", "renderer": "bold"})
    assert spec == ColumnSpec(name="notes")
    assert "renderer" in caplog.text


def test_from_dict_requires_name():
    with pytest.raises(ColumnConfigError):
        ColumnSpec.from_dict({"name": ""})
    with pytest.raises(ColumnConfigError):
        ColumnSpec.coerce(3)


def test_from_dict_rejects_unknown_editor():
    with pytest.raises(ColumnConfigError, match="bogus"):
        ColumnSpec.from_dict({"name": "title", "editor": "bogus"})
    assert ColumnSpec.from_dict({"name": "title", "editor": "textarea"}).editor == "textarea"


def test_from_dict_casts_width():
    assert ColumnSpec.from_dict({"name": "x", "width": "120"}).width == 120


def test_merged_with_only_fills_unset_fields():
    authored = ColumnSpec(name="title", header="Book", hidden=False)
    default = ColumnSpec(name="title", header="Title", hidden=True, width=200, attr_type="string")
    merged = authored.merged_with(default)
    assert merged == ColumnSpec(name="title", header="Book", hidden=False, width=200, attr_type="string")
    assert authored.width is None


def test_to_dict_omits_unset_fields():
    assert ColumnSpec(name="title", sortable=False).to_dict() == {"name": "title", "sortable": False}


def test_to_client_dict_uses_camel_case_and_drops_input_only():
    spec = ColumnSpec(name="a", default_value="x", with_filters=True, read_only=True, excluded=False, label="A")
    assert spec.to_client_dict() == {"name": "a", "defaultValue": "x", "withFilters": True}


def test_meta_columns_catalog():
    metas = meta_columns()
    assert metas is META_COLUMNS
    assert len(metas) == 11
    assert [m.name for m in metas][:3] == ["included", "name", "header"]
    hidden = {m.name for m in metas if m.hidden}
    assert hidden == {"width", "hideable", "sortable", "filterable"}
    included = metas[0]
    assert included.header == "Incl"
    assert included.default_value is True
