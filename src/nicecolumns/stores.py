# src/nicecolumns/stores.py
"""
Field list persistence (saved column layouts).

A field list is an ordered list of JSON-friendly column maps stored under a
plain string key: a widget's global id for user-edited layouts, or
``"{table}_model_fields"`` for model-level defaults. Lists are always written
wholesale.

Stores:
- MemoryFieldListStore: process-local dict, for tests and single-page demos
- JsonFieldListStore: one JSON document in the per-user config dir (platformdirs)
- SqlFieldListStore: one row per key in a SQLAlchemy-managed table

Read and write errors propagate to the caller; no store falls back to
"nothing saved" on a corrupt document.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

from platformdirs import user_config_dir
from sqlalchemy import Column, Integer, String, Text, create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base

from nicecolumns.errors import FieldListStoreError
from nicecolumns.utils.logging import get_logger

logger = get_logger(__name__)

FieldMap = dict[str, Any]

# Increment when the on-disk JSON layout changes.
SCHEMA_VERSION: int = 1


@runtime_checkable
class FieldListStore(Protocol):
    """Get/set-by-key persistence for column lists."""

    def read_list(self, key: str) -> Optional[list[FieldMap]]: ...

    def write_list(self, key: str, items: list[FieldMap]) -> None: ...


class MemoryFieldListStore:
    """Dict-backed store. Lists are deep-copied on the way in and out."""

    def __init__(self, lists: Optional[dict[str, list[FieldMap]]] = None) -> None:
        self._lists: dict[str, list[FieldMap]] = copy.deepcopy(lists) if lists else {}

    def read_list(self, key: str) -> Optional[list[FieldMap]]:
        items = self._lists.get(key)
        return copy.deepcopy(items) if items is not None else None

    def write_list(self, key: str, items: list[FieldMap]) -> None:
        self._lists[key] = copy.deepcopy(list(items))

    def keys(self) -> list[str]:
        return list(self._lists)


class JsonFieldListStore:
    """
    All field lists in one JSON document:

        {"schema_version": 1, "lists": {"<key>": [{...}, ...]}}

    A missing file means nothing was saved yet. A file that is not valid JSON,
    or does not have the layout above, raises FieldListStoreError.
    """

    def __init__(
        self,
        path: Optional[Path] = None,
        *,
        app_name: str = "nicecolumns",
        filename: str = "field_lists.json",
        app_author: str | None = None,
    ) -> None:
        self.path = Path(path) if path is not None else self.default_path(app_name, filename, app_author)

    @staticmethod
    def default_path(
        app_name: str = "nicecolumns",
        filename: str = "field_lists.json",
        app_author: str | None = None,
    ) -> Path:
        """
        OS-appropriate per-user path.

        macOS:   ~/Library/Application Support/nicecolumns/field_lists.json
        Linux:   ~/.config/nicecolumns/field_lists.json
        Windows: %APPDATA%\\nicecolumns\\field_lists.json
        """
        return Path(user_config_dir(app_name, app_author)) / filename

    def _load(self) -> dict[str, list[FieldMap]]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug(f"Field list file not found at {self.path}")
            return {}

        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            raise FieldListStoreError(f"Field list file at {self.path} is not valid JSON: {e}") from e

        if not isinstance(parsed, dict) or not isinstance(parsed.get("lists", {}), dict):
            raise FieldListStoreError(f"Field list file at {self.path} has an unexpected layout")

        version = parsed.get("schema_version")
        if version != SCHEMA_VERSION:
            logger.warning(
                f"Field list schema version mismatch: loaded={version}, expected={SCHEMA_VERSION}"
            )
        return parsed.get("lists", {})

    def read_list(self, key: str) -> Optional[list[FieldMap]]:
        items = self._load().get(key)
        if items is not None and not isinstance(items, list):
            raise FieldListStoreError(f"Field list {key!r} in {self.path} is not a list")
        return items

    def write_list(self, key: str, items: list[FieldMap]) -> None:
        lists = self._load()
        lists[key] = list(items)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        json_str = json.dumps({"schema_version": SCHEMA_VERSION, "lists": lists}, indent=2)
        self.path.write_text(json_str, encoding="utf-8")
        logger.info(f"Saved field list '{key}' ({len(items)} columns) to {self.path}")


FieldListBase = declarative_base()


class FieldListRecord(FieldListBase):
    __tablename__ = "nicecolumns_field_lists"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String, nullable=False, index=True, unique=True)
    value = Column(Text, nullable=False)  # Stored as JSON string


class SqlFieldListStore:
    """Store backed by a ``nicecolumns_field_lists`` table.

    Args:
        engine: SQLAlchemy engine or database URL. The table is created if
            missing.
    """

    def __init__(self, engine: Engine | str) -> None:
        self.engine: Engine = create_engine(engine) if isinstance(engine, str) else engine
        FieldListBase.metadata.create_all(self.engine)

    def read_list(self, key: str) -> Optional[list[FieldMap]]:
        with Session(self.engine) as session:
            record = session.scalars(select(FieldListRecord).where(FieldListRecord.key == key)).first()
            if record is None:
                return None
            value = record.value
        try:
            items = json.loads(value)
        except json.JSONDecodeError as e:
            raise FieldListStoreError(f"Field list {key!r} is not valid JSON: {e}") from e
        if not isinstance(items, list):
            raise FieldListStoreError(f"Field list {key!r} is not a list")
        return items

    def write_list(self, key: str, items: list[FieldMap]) -> None:
        value = json.dumps(list(items))
        with Session(self.engine) as session, session.begin():
            record = session.scalars(select(FieldListRecord).where(FieldListRecord.key == key)).first()
            if record is None:
                session.add(FieldListRecord(key=key, value=value))
            else:
                record.value = value
        logger.info(f"Saved field list '{key}' ({len(items)} columns)")
