# src/nicecolumns/grid.py
"""NiceGUI / AG Grid bridge for resolved columns.

``column_defs`` and ``grid_options`` are pure and build the AG Grid options
dictionary. ``resolved_aggrid`` and ``FieldConfigurator`` create NiceGUI
elements and must run inside a page context.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Optional

from nicegui import events, ui

from nicecolumns.column_spec import ColumnSpec, MetaColumn, meta_columns
from nicecolumns.resolver import ColumnResolver
from nicecolumns.utils.logging import get_logger

logger = get_logger(__name__)

RowDict = dict[str, Any]

# editor tag -> AG Grid cell editor
AGGRID_EDITORS: dict[str, str] = {
    "textfield": "agTextCellEditor",
    "numberfield": "agNumberCellEditor",
    "checkbox": "agCheckboxCellEditor",
    "datefield": "agDateStringCellEditor",
    "xdatetime": "agDateStringCellEditor",
    "textarea": "agLargeTextCellEditor",
    "combobox": "agSelectCellEditor",
}


def column_def(col: ColumnSpec) -> dict[str, Any]:
    """AG Grid column definition for one resolved column."""
    col_def: dict[str, Any] = {
        "headerName": col.header or col.name,
        "field": col.name,
        "editable": bool(col.editable),
        "sortable": bool(col.sortable),
        "filter": bool(col.filterable and col.with_filters is not False),
        "hide": bool(col.hidden),
    }
    if col.width is not None:
        col_def["width"] = col.width
    if col.hideable is False:
        col_def["lockVisible"] = True
    if col.editor in AGGRID_EDITORS:
        col_def[":cellEditor"] = f"'{AGGRID_EDITORS[col.editor]}'"
    if col.editor == "textarea":
        col_def["cellEditorPopup"] = True
    return col_def


def column_defs(columns: Sequence[ColumnSpec]) -> list[dict[str, Any]]:
    """AG Grid column definitions; columns with ``included=False`` are left out."""
    return [column_def(c) for c in columns if c.included is not False]


def grid_options(
    columns: Sequence[ColumnSpec],
    rows: Sequence[Mapping[str, Any]],
    *,
    extra_grid_options: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    opts: dict[str, Any] = {
        "columnDefs": column_defs(columns),
        "rowData": [dict(r) for r in rows],
        "defaultColDef": {"sortable": False, "filter": False, "resizable": True},
        "stopEditingWhenCellsLoseFocus": True,
    }
    # user extra options last (allows overriding)
    opts.update(extra_grid_options or {})
    return opts


def resolved_aggrid(resolver: ColumnResolver, rows: Sequence[Mapping[str, Any]], **kwargs: Any) -> ui.aggrid:
    """Create a ``ui.aggrid`` showing ``rows`` with the resolver's columns."""
    return ui.aggrid(grid_options(resolver.columns, rows, **kwargs)).classes("w-full h-full")


# ----------------------------------------------------------------------
# Field configurator
# ----------------------------------------------------------------------


def meta_column_def(meta: MetaColumn, choices: Optional[Sequence[str]] = None) -> dict[str, Any]:
    """Configurator column definition; ``choices`` fill a combobox editor."""
    col_def: dict[str, Any] = {
        "headerName": meta.header or meta.name.replace("_", " ").capitalize(),
        "field": meta.name,
        "editable": True,
        "hide": meta.hidden,
    }
    if meta.width is not None:
        col_def["width"] = meta.width
    if meta.attr_type == "boolean":
        col_def["cellDataType"] = "boolean"
    elif meta.attr_type == "integer":
        col_def["cellDataType"] = "number"
    if meta.editor in AGGRID_EDITORS:
        col_def[":cellEditor"] = f"'{AGGRID_EDITORS[meta.editor]}'"
    if meta.editor == "combobox":
        col_def["cellEditorParams"] = {"values": [str(v) for v in (choices or [])]}
    return col_def


def meta_column_defs(name_choices: Optional[Sequence[str]] = None) -> list[dict[str, Any]]:
    """Column definitions of the field configurator grid.

    ``name_choices`` are offered by the editor of the ``name`` column.
    """
    return [meta_column_def(m, name_choices if m.name == "name" else None) for m in meta_columns()]


def configurator_name_choices(resolver: ColumnResolver) -> list[str]:
    """Names a configured column may take: model attributes, then current columns."""
    names = [a.name for a in resolver.catalog.attributes_of(resolver.model)]
    names += [c.name for c in resolver.columns]
    return list(dict.fromkeys(names))


def configurator_row(col: ColumnSpec) -> RowDict:
    """One configurator row: the META_COLUMNS properties of ``col``.

    ``read_only`` is shown as the inverse of the resolved ``editable``.
    """
    row: RowDict = {}
    for meta in meta_columns():
        if meta.name == "read_only":
            value: Any = None if col.editable is None else not col.editable
        else:
            value = getattr(col, meta.name)
        row[meta.name] = meta.default_value if value is None else value
    return row


def column_from_configurator_row(row: Mapping[str, Any], original: Optional[ColumnSpec] = None) -> ColumnSpec:
    """ColumnSpec from an edited configurator row.

    Fields not shown in the configurator (editor, attr_type, ...) are kept
    from ``original``; ``read_only`` becomes ``editable`` again.
    """
    values = {k: v for k, v in row.items() if k != "read_only"}
    col = ColumnSpec.from_dict(values)
    if row.get("read_only") is not None:
        col.editable = not bool(row["read_only"])
    if original is not None:
        col = col.merged_with(original)
    return col


class FieldConfigurator:
    """Grid whose rows are the columns of another grid.

    Each row shows the META_COLUMNS properties of one resolved column. Edits
    are kept in memory until ``apply()``, which saves the layout through the
    resolver.
    """

    def __init__(self, resolver: ColumnResolver, parent: ui.element | None = None) -> None:
        self._resolver = resolver
        self._originals: list[ColumnSpec] = list(resolver.columns)
        self._rows: list[RowDict] = [configurator_row(c) for c in self._originals]

        self._container: ui.element = parent or ui.column()
        with self._container:
            self._grid = ui.aggrid(
                {
                    "columnDefs": meta_column_defs(configurator_name_choices(resolver)),
                    "rowData": self._rows,
                    "stopEditingWhenCellsLoseFocus": True,
                }
            ).classes("w-full h-full")
        self._grid.on("cellValueChanged", self._on_cell_value_changed)

    @property
    def grid(self) -> ui.aggrid:
        return self._grid

    @property
    def rows(self) -> list[RowDict]:
        return [r.copy() for r in self._rows]

    def edited_columns(self) -> list[ColumnSpec]:
        return [
            column_from_configurator_row(row, self._originals[i] if i < len(self._originals) else None)
            for i, row in enumerate(self._rows)
        ]

    def apply(self) -> None:
        """Save the edited columns as the widget's layout."""
        self._resolver.save_columns(self.edited_columns())
        logger.info(f"Field configurator saved {len(self._rows)} columns for '{self._resolver.widget_id}'")

    def _on_cell_value_changed(self, e: events.GenericEventArguments) -> None:
        args: dict[str, Any] = e.args or {}
        row_index = args.get("rowIndex")
        field = args.get("colId")
        if row_index is None or field is None:
            return

        i = int(row_index)
        if not (0 <= i < len(self._rows)):
            return
        self._rows[i][str(field)] = args.get("newValue")
        logger.debug(f"Configurator edit: row={i}, field={field}, new_value={args.get('newValue')!r}")
