# src/nicecolumns/errors.py
"""Exceptions raised while resolving grid columns."""

from __future__ import annotations


class NiceColumnsError(Exception):
    """Base class for all nicecolumns errors."""


class ModelIntrospectionError(NiceColumnsError, LookupError):
    """The referenced data model (or one of its fields) does not exist."""


class AssociationResolutionError(NiceColumnsError, LookupError):
    """A column name implies an association that cannot be resolved.

    Raised when the association's target model cannot be introspected, or
    when the target has no member with the referenced name.
    """


class ColumnConfigError(NiceColumnsError, ValueError):
    """A column definition is unusable (no name, duplicate names on save)."""


class FieldListStoreError(NiceColumnsError):
    """A persisted field list document could not be read."""
