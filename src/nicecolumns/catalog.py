# src/nicecolumns/catalog.py
"""Attribute catalog: read-only view over a data model.

The resolver never inspects models itself. It asks an ``AttributeCatalog``
for attributes, the primary key, associations and stored column types.
``SqlAlchemyCatalog`` is the implementation for SQLAlchemy declarative models;
``nicecolumns.frame_catalog.FrameCatalog`` covers pandas/polars data frames.
"""

from __future__ import annotations

from dataclasses import dataclass
from inspect import Parameter, isfunction, signature
from typing import Any, Optional, Protocol, runtime_checkable

from sqlalchemy import inspect
from sqlalchemy import types as sqltypes
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapper, RelationshipDirection

from nicecolumns.column_spec import ColumnSpec
from nicecolumns.errors import ModelIntrospectionError
from nicecolumns.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Association:
    """A named relationship from one model to another.

    Attributes:
        name: Association name (``"author"``).
        target_model: Associated model reference, None when the association
            has no single target.
        foreign_key: Local foreign key attribute (``"author_id"``), None for
            associations that do not own the key.
        polymorphic: True for polymorphic associations.
    """

    name: str
    target_model: Any
    foreign_key: Optional[str] = None
    polymorphic: bool = False


@runtime_checkable
class AttributeCatalog(Protocol):
    """Read-only introspection interface consumed by the resolver."""

    def attributes_of(self, model: Any) -> list[ColumnSpec]: ...

    def primary_key_of(self, model: Any) -> str: ...

    def associations_of(self, model: Any) -> list[Association]: ...

    def column_type_of(self, model: Any, field_name: str) -> Optional[str]: ...

    def has_member(self, model: Any, member: str) -> bool: ...

    def table_name_of(self, model: Any) -> str: ...


def attr_type_for_sql_type(sql_type: sqltypes.TypeEngine) -> str:
    """Map a SQLAlchemy column type to an attr type tag."""
    # Text subclasses String, DateTime does not subclass Date
    if isinstance(sql_type, sqltypes.Boolean):
        return "boolean"
    if isinstance(sql_type, sqltypes.Integer):
        return "integer"
    if isinstance(sql_type, sqltypes.DateTime):
        return "datetime"
    if isinstance(sql_type, sqltypes.Date):
        return "date"
    if isinstance(sql_type, sqltypes.Time):
        return "time"
    if isinstance(sql_type, sqltypes.Text):
        return "text"
    if isinstance(sql_type, sqltypes.String):
        return "string"
    if isinstance(sql_type, sqltypes.Float):
        return "float"
    if isinstance(sql_type, sqltypes.Numeric):
        return "decimal"
    return type(sql_type).__name__.lower()


class SqlAlchemyCatalog:
    """AttributeCatalog over SQLAlchemy declarative models.

    Args:
        registry_or_base: Optional declarative base or ``registry``. When
            given, models may also be referenced by class name (``"Book"``).
    """

    def __init__(self, registry_or_base: Any = None) -> None:
        registry = getattr(registry_or_base, "registry", registry_or_base)
        self._registry = registry

    # ------------------------------------------------------------------
    # Model lookup
    # ------------------------------------------------------------------

    def model_class(self, model: Any) -> type:
        """Resolve a model reference (class or class name) to a mapped class."""
        return self._mapper(model).class_

    def _mapper(self, model: Any) -> Mapper:
        if isinstance(model, str):
            if self._registry is None:
                raise ModelIntrospectionError(
                    f"Model {model!r} given by name but the catalog has no registry"
                )
            for mapper in self._registry.mappers:
                if mapper.class_.__name__ == model:
                    return mapper
            raise ModelIntrospectionError(f"Unknown model {model!r}")

        try:
            mapper = inspect(model)
        except NoInspectionAvailable as e:
            raise ModelIntrospectionError(f"Not a mapped model: {model!r}") from e
        if not isinstance(mapper, Mapper):
            raise ModelIntrospectionError(f"Not a mapped model class: {model!r}")
        return mapper

    # ------------------------------------------------------------------
    # AttributeCatalog
    # ------------------------------------------------------------------

    def attributes_of(self, model: Any) -> list[ColumnSpec]:
        mapper = self._mapper(model)
        attrs: list[ColumnSpec] = []
        for prop in mapper.column_attrs:
            column = prop.columns[0]
            attrs.append(ColumnSpec(name=prop.key, attr_type=attr_type_for_sql_type(column.type)))

        for key, descriptor in mapper.all_orm_descriptors.items():
            if isinstance(descriptor, hybrid_property):
                attrs.append(ColumnSpec(name=key, virtual=True))

        logger.debug(f"{mapper.class_.__name__}: {len(attrs)} attributes")
        return attrs

    def primary_key_of(self, model: Any) -> str:
        mapper = self._mapper(model)
        return mapper.get_property_by_column(mapper.primary_key[0]).key

    def associations_of(self, model: Any) -> list[Association]:
        mapper = self._mapper(model)
        out: list[Association] = []
        for rel in mapper.relationships:
            foreign_key: Optional[str] = None
            if rel.direction is RelationshipDirection.MANYTOONE:
                local = next(iter(rel.local_columns))
                foreign_key = mapper.get_property_by_column(local).key
            out.append(
                Association(
                    name=rel.key,
                    target_model=rel.mapper.class_,
                    foreign_key=foreign_key,
                    polymorphic=bool(rel.info.get("polymorphic", False)),
                )
            )
        return out

    def column_type_of(self, model: Any, field_name: str) -> Optional[str]:
        mapper = self._mapper(model)
        if field_name not in mapper.column_attrs:
            return None
        column = mapper.column_attrs[field_name].columns[0]
        return attr_type_for_sql_type(column.type)

    def has_member(self, model: Any, member: str) -> bool:
        """True for mapped attributes, hybrids, properties and plain methods
        callable without arguments (``def label(self)``).
        """
        mapper = self._mapper(model)
        if member in mapper.all_orm_descriptors:
            return True
        attr = getattr(mapper.class_, member, None)
        if isinstance(attr, property):
            return True
        if not isfunction(attr):
            return False
        required = [
            p
            for p in list(signature(attr).parameters.values())[1:]
            if p.default is Parameter.empty and p.kind not in (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD)
        ]
        return not required

    def table_name_of(self, model: Any) -> str:
        mapper = self._mapper(model)
        return str(mapper.local_table.name)
