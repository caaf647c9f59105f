"""
nicecolumns: column resolution for NiceGUI grid widgets.

Computes the ordered column definitions of a grid from a saved user layout,
the widget's configured columns and defaults inferred from the data model:

- ColumnResolver / resolve_columns / save_columns: the resolution engine
- SqlAlchemyCatalog, FrameCatalog: data model introspection
- MemoryFieldListStore, JsonFieldListStore, SqlFieldListStore: saved layouts
- nicecolumns.grid: AG Grid column definitions and the field configurator

For logging configuration in standalone scripts/demos:
    ```python
    from nicecolumns.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

import logging

from nicecolumns.utils.logging import configure_logging, get_logger

from nicecolumns.catalog import Association, AttributeCatalog, SqlAlchemyCatalog
from nicecolumns.column_spec import META_COLUMNS, ColumnSpec, MetaColumn, meta_columns
from nicecolumns.config import ResolverConfig
from nicecolumns.errors import (
    AssociationResolutionError,
    ColumnConfigError,
    FieldListStoreError,
    ModelIntrospectionError,
    NiceColumnsError,
)
from nicecolumns.frame_catalog import FrameCatalog
from nicecolumns.resolver import ColumnResolver, resolve_columns, save_columns
from nicecolumns.stores import FieldListStore, JsonFieldListStore, MemoryFieldListStore, SqlFieldListStore

# NullHandler so records don't reach root unless an application configured logging
_logger = logging.getLogger("nicecolumns")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "Association",
    "AssociationResolutionError",
    "AttributeCatalog",
    "ColumnConfigError",
    "ColumnResolver",
    "ColumnSpec",
    "FieldListStore",
    "FieldListStoreError",
    "FrameCatalog",
    "JsonFieldListStore",
    "META_COLUMNS",
    "MemoryFieldListStore",
    "MetaColumn",
    "ModelIntrospectionError",
    "NiceColumnsError",
    "ResolverConfig",
    "SqlAlchemyCatalog",
    "SqlFieldListStore",
    "configure_logging",
    "get_logger",
    "meta_columns",
    "resolve_columns",
    "save_columns",
]

__version__ = "0.1.0"
