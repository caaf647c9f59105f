# src/nicecolumns/resolver.py
"""Column resolution for grid widgets.

The effective columns of a widget come from, in order of priority:

1. a layout saved for this widget (``save_columns``), used as-is;
2. the columns given in the widget's configuration, each completed with the
   matching default column;
3. the default columns: a model-level field list if one was saved, else the
   attributes reported by the catalog.

Columns from (2) or (3) then go through association detection and default
inference (header, editor, width, hidden, editable, sortable, filterable).

One ``ColumnResolver`` belongs to one widget instance and caches its result.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from nicecolumns.catalog import Association, AttributeCatalog
from nicecolumns.column_spec import ColumnSpec
from nicecolumns.config import ResolverConfig
from nicecolumns.errors import AssociationResolutionError, ColumnConfigError, ModelIntrospectionError
from nicecolumns.stores import FieldListStore
from nicecolumns.utils.logging import get_logger

logger = get_logger(__name__)

ColumnLike = Union[str, Mapping[str, Any], ColumnSpec]
AuthoredConfig = Mapping[str, Any]


def humanize(name: str) -> str:
    """``"author_id"`` -> ``"Author"``, ``"published_on"`` -> ``"Published on"``."""
    if name.endswith("_id"):
        name = name[: -len("_id")]
    text = name.replace("_", " ").strip().lower()
    return text[:1].upper() + text[1:]


def _unique_by_name(columns: Iterable[ColumnSpec]) -> list[ColumnSpec]:
    """Drop repeated names; the last entry wins and keeps its own position."""
    by_name: dict[str, ColumnSpec] = {}
    for c in columns:
        if c.name in by_name:
            logger.warning(f"Duplicate column '{c.name}' in configuration, last one wins")
            del by_name[c.name]
        by_name[c.name] = c
    return list(by_name.values())


class ColumnResolver:
    """Resolution context of one widget instance.

    Args:
        widget_id: Global identity of the widget; key of its saved layout.
        model: Model reference understood by ``catalog``.
        authored_config: Widget configuration; its ``"columns"`` entry is a
            sequence of bare names, partial column maps or ColumnSpecs.
        catalog: Attribute catalog for ``model``.
        store: Field list persistence.
        config: Resolution settings.
    """

    def __init__(
        self,
        widget_id: str,
        model: Any,
        authored_config: Optional[AuthoredConfig] = None,
        *,
        catalog: AttributeCatalog,
        store: FieldListStore,
        config: Optional[ResolverConfig] = None,
    ) -> None:
        self.widget_id: str = widget_id
        self.model: Any = model
        self.authored_config: AuthoredConfig = authored_config or {}
        self.catalog: AttributeCatalog = catalog
        self.store: FieldListStore = store
        self.config: ResolverConfig = config or ResolverConfig()

        self._columns: Optional[list[ColumnSpec]] = None
        self._default_columns: Optional[list[ColumnSpec]] = None
        self._primary_key: Optional[str] = None
        self._associations: Optional[list[Association]] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def columns(self) -> list[ColumnSpec]:
        """Resolved columns, computed on first access."""
        if self._columns is None:
            self._columns = self.resolve()
        return self._columns

    def refresh(self) -> None:
        """Forget cached columns; the next access resolves again."""
        self._columns = None
        self._default_columns = None

    def resolve(self) -> list[ColumnSpec]:
        """Compute the columns without touching the cache."""
        if self.config.persistent_config_enabled:
            saved = self.store.read_list(self.widget_id)
            if saved is not None:
                logger.debug(f"'{self.widget_id}': using saved layout ({len(saved)} columns)")
                return [ColumnSpec.coerce(item) for item in saved]
        return self.initial_columns()

    def save_columns(self, columns: Optional[Sequence[ColumnLike]] = None) -> None:
        """Write columns (by default the current ones) as this widget's layout.

        Raises:
            ColumnConfigError: If two columns share a name.
        """
        items = [ColumnSpec.coerce(c) for c in (columns if columns is not None else self.columns)]
        save_columns(self.widget_id, items, store=self.store)
        self.refresh()

    def model_level_key(self) -> str:
        return f"{self.catalog.table_name_of(self.model)}{self.config.model_fields_suffix}"

    def save_model_level_columns(self, columns: Sequence[ColumnLike]) -> None:
        """Write default columns shared by every widget showing this model."""
        items = [ColumnSpec.coerce(c).to_dict() for c in columns]
        self.store.write_list(self.model_level_key(), items)
        self._default_columns = None

    def default_columns(self) -> list[ColumnSpec]:
        """Columns used when nothing is configured.

        A model-level field list if one was saved, else the catalog attributes.
        """
        if self._default_columns is None:
            model_level = self.store.read_list(self.model_level_key())
            if model_level is not None:
                self._default_columns = [ColumnSpec.coerce(item) for item in model_level]
            else:
                self._default_columns = self.catalog.attributes_of(self.model)
        return [replace(c) for c in self._default_columns]

    def columns_from_config(self) -> list[ColumnSpec]:
        """Configured columns, each completed with the default column of the same name."""
        configured = self.authored_config.get("columns")
        if not configured:
            return []

        defaults = {c.name: c for c in self.default_columns()}
        out: list[ColumnSpec] = []
        for item in _unique_by_name(ColumnSpec.coerce(c) for c in configured):
            default = defaults.get(item.name)
            out.append(item.merged_with(default) if default is not None else item)
        return out

    def initial_columns(self) -> list[ColumnSpec]:
        """Columns computed from configuration and defaults, with inference applied."""
        columns = self.columns_from_config() or self.default_columns()
        columns = [c for c in columns if not c.excluded]

        resolved = [self._resolve_column(c) for c in columns]
        logger.info(f"'{self.widget_id}': resolved {len(resolved)} columns")
        return resolved

    # ------------------------------------------------------------------
    # Per-column inference
    # ------------------------------------------------------------------

    @property
    def primary_key(self) -> str:
        if self._primary_key is None:
            self._primary_key = self.catalog.primary_key_of(self.model)
        return self._primary_key

    @property
    def associations(self) -> list[Association]:
        if self._associations is None:
            self._associations = self.catalog.associations_of(self.model)
        return self._associations

    def _resolve_column(self, c: ColumnSpec) -> ColumnSpec:
        c = replace(c)
        stored_type = self._detect_association(c)
        self._set_default_header(c)
        self._set_default_editor(c)
        self._set_default_width(c)
        self._set_default_hidden(c)
        self._set_default_editable(c)
        self._set_default_sortable_filterable(c, stored_type)

        if c.included is None:
            c.included = True
        if c.with_filters is None:
            c.with_filters = True
        if c.hideable is None:
            c.hideable = True
        c.excluded = None
        return c

    def _detect_association(self, c: ColumnSpec) -> Optional[str]:
        """Detect an association column and set its editor unless one was given.

        A foreign key column (``"author_id"``) is renamed into an association
        column (``"author__name"``); the display member is the first of
        ``config.association_display_members`` the target has, else its
        primary key. Polymorphic associations are only matched by the
        ``assoc__member`` form.

        Returns the stored type backing the column: the member type for
        association columns, the model's own column type otherwise.
        """
        assoc = next(
            (a for a in self.associations if a.foreign_key is not None and a.foreign_key == c.name),
            None,
        )

        member: Optional[str] = None
        if assoc is not None and not assoc.polymorphic:
            member = self._display_member(assoc)
            logger.debug(f"'{c.name}' is the foreign key of '{assoc.name}', renaming to '{assoc.name}__{member}'")
            c.name = f"{assoc.name}__{member}"
        elif assoc is None and "__" in c.name:
            assoc_name, member = c.name.split("__", 1)
            assoc = next((a for a in self.associations if a.name == assoc_name), None)

        if assoc is None or member is None:
            return self.catalog.column_type_of(self.model, c.name)

        member_type = self._member_type(assoc, member)
        if member_type is not None and c.editor is None:
            boolean_editor = self.config.editor_for_attr_type("boolean")
            c.editor = boolean_editor if member_type == "boolean" else self.config.association_editor
        return member_type

    def _display_member(self, assoc: Association) -> str:
        target = self._target(assoc)
        try:
            for m in self.config.association_display_members:
                if self.catalog.has_member(target, m) or self.catalog.column_type_of(target, m) is not None:
                    return m
            return self.catalog.primary_key_of(target)
        except ModelIntrospectionError as e:
            raise AssociationResolutionError(
                f"Association '{assoc.name}': cannot introspect target {target!r}"
            ) from e

    def _member_type(self, assoc: Association, member: str) -> Optional[str]:
        target = self._target(assoc)
        try:
            member_type = self.catalog.column_type_of(target, member)
            if member_type is None and not self.catalog.has_member(target, member):
                raise AssociationResolutionError(
                    f"Association '{assoc.name}': {target!r} has no member '{member}'"
                )
        except ModelIntrospectionError as e:
            raise AssociationResolutionError(
                f"Association '{assoc.name}': cannot introspect target {target!r}"
            ) from e
        return member_type

    def _target(self, assoc: Association) -> Any:
        if assoc.target_model is None:
            raise AssociationResolutionError(f"Association '{assoc.name}' has no single target model")
        return assoc.target_model

    def _set_default_header(self, c: ColumnSpec) -> None:
        if c.header is None:
            c.header = c.label if c.label is not None else humanize(c.name)
        c.label = None

    def _set_default_editor(self, c: ColumnSpec) -> None:
        if c.editor is None:
            c.editor = self.config.editor_for_attr_type(c.attr_type)

    def _set_default_width(self, c: ColumnSpec) -> None:
        if c.width is None:
            if c.attr_type == "boolean":
                c.width = self.config.boolean_width
            elif c.attr_type == "datetime":
                c.width = self.config.datetime_width

    def _set_default_hidden(self, c: ColumnSpec) -> None:
        if c.hidden is None and c.name == self.primary_key:
            c.hidden = True

    def _set_default_editable(self, c: ColumnSpec) -> None:
        c.editable = c.name != self.primary_key if c.read_only is None else not c.read_only
        c.read_only = None

    def _set_default_sortable_filterable(self, c: ColumnSpec, stored_type: Optional[str]) -> None:
        virtual = c.virtual if c.virtual is not None else stored_type is None
        if c.sortable is None:
            c.sortable = not virtual
        if c.filterable is None:
            c.filterable = not virtual


# ----------------------------------------------------------------------
# Function API
# ----------------------------------------------------------------------


def resolve_columns(
    widget_id: str,
    model: Any,
    authored_config: Optional[AuthoredConfig] = None,
    *,
    catalog: AttributeCatalog,
    store: FieldListStore,
    config: Optional[ResolverConfig] = None,
) -> list[ColumnSpec]:
    """Resolve the columns of one widget (see ``ColumnResolver``)."""
    resolver = ColumnResolver(widget_id, model, authored_config, catalog=catalog, store=store, config=config)
    return resolver.columns


def save_columns(widget_id: str, columns: Sequence[ColumnLike], *, store: FieldListStore) -> None:
    """Write a widget's layout wholesale.

    Only name uniqueness is checked; names are not validated against any model.

    Raises:
        ColumnConfigError: If two columns share a name.
    """
    items = [ColumnSpec.coerce(c) for c in columns]
    seen: set[str] = set()
    for c in items:
        if c.name in seen:
            raise ColumnConfigError(f"Duplicate column name '{c.name}' for widget '{widget_id}'")
        seen.add(c.name)
    store.write_list(widget_id, [c.to_dict() for c in items])
    logger.info(f"'{widget_id}': saved {len(items)} columns")
