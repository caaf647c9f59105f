# src/nicecolumns/frame_catalog.py
"""AttributeCatalog over named pandas / polars data frames.

Data frames carry column names and dtypes but no keys or relationships, so
primary keys and associations are declared by the caller:

    ```python
    catalog = FrameCatalog(
        {"books": books_df, "authors": authors_df},
        associations={"books": [Association("author", "authors", "author_id")]},
    )
    ```
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, TYPE_CHECKING

import pandas as pd

from nicecolumns.catalog import Association
from nicecolumns.column_spec import ColumnSpec
from nicecolumns.errors import ModelIntrospectionError

# Optional polars
try:  # pragma: no cover
    import polars as _pl  # type: ignore[import]
    HAS_POLARS = True
except Exception:  # pragma: no cover
    _pl = None  # type: ignore[assignment]
    HAS_POLARS = False

if TYPE_CHECKING:
    import polars as pl
else:
    pl = _pl  # type: ignore[assignment]


def attr_type_for_pandas_dtype(dtype: Any) -> str:
    if pd.api.types.is_bool_dtype(dtype):
        return "boolean"
    if pd.api.types.is_integer_dtype(dtype):
        return "integer"
    if pd.api.types.is_datetime64_any_dtype(dtype):
        return "datetime"
    if pd.api.types.is_float_dtype(dtype):
        return "float"
    return "string"


def attr_type_for_polars_dtype(dtype: Any) -> str:
    if dtype == pl.Boolean:
        return "boolean"
    if dtype.is_integer():
        return "integer"
    if dtype == pl.Datetime:
        return "datetime"
    if dtype == pl.Date:
        return "date"
    if dtype.is_float():
        return "float"
    return "string"


class FrameCatalog:
    """Catalog of named data frames; a model reference is the frame's name.

    Args:
        frames: Table name -> pandas or polars DataFrame.
        primary_keys: Table name -> primary key column. Defaults to ``"id"``.
        associations: Table name -> associations of that table. Association
            targets are table names of this catalog.
    """

    def __init__(
        self,
        frames: Mapping[str, Any],
        *,
        primary_keys: Optional[Mapping[str, str]] = None,
        associations: Optional[Mapping[str, Iterable[Association]]] = None,
    ) -> None:
        self._frames: dict[str, Any] = dict(frames)
        self._primary_keys: dict[str, str] = dict(primary_keys or {})
        self._associations: dict[str, list[Association]] = {
            k: list(v) for k, v in (associations or {}).items()
        }

    def _schema(self, model: Any) -> dict[str, str]:
        """Ordered column name -> attr type of one frame."""
        frame = self._frames.get(model) if isinstance(model, str) else None
        if frame is None:
            raise ModelIntrospectionError(f"Unknown table {model!r}")

        if isinstance(frame, pd.DataFrame):
            return {str(c): attr_type_for_pandas_dtype(t) for c, t in frame.dtypes.items()}

        if HAS_POLARS and pl is not None and isinstance(frame, pl.DataFrame):
            return {str(c): attr_type_for_polars_dtype(t) for c, t in frame.schema.items()}

        raise ModelIntrospectionError(
            f"Unsupported frame type for {model!r}: expected pandas.DataFrame or polars.DataFrame"
        )

    def attributes_of(self, model: Any) -> list[ColumnSpec]:
        return [ColumnSpec(name=name, attr_type=t) for name, t in self._schema(model).items()]

    def primary_key_of(self, model: Any) -> str:
        self._schema(model)
        return self._primary_keys.get(model, "id")

    def associations_of(self, model: Any) -> list[Association]:
        self._schema(model)
        return list(self._associations.get(model, []))

    def column_type_of(self, model: Any, field_name: str) -> Optional[str]:
        return self._schema(model).get(field_name)

    def has_member(self, model: Any, member: str) -> bool:
        return member in self._schema(model)

    def table_name_of(self, model: Any) -> str:
        self._schema(model)
        return str(model)
