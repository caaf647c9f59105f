# tests/conftest.py
"""Shared fixtures: a small library schema mirrored from a book-keeping app."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest
from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import declarative_base, relationship


def pytest_configure() -> None:
    # Ensure nicecolumns package is importable when running tests from repo root.
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


Base = declarative_base()


class Author(Base):
    __tablename__ = "authors"

    id = Column(Integer, primary_key=True)
    name = Column(String)
    prolific = Column(Boolean, default=False)


class Genre(Base):
    __tablename__ = "genres"

    id = Column(Integer, primary_key=True)
    title = Column(String)


class Publisher(Base):
    __tablename__ = "publishers"

    id = Column(Integer, primary_key=True)
    code = Column(String)


class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True)
    title = Column(String)
    exemplars = Column(Integer)
    digitized = Column(Boolean)
    notes = Column(Text)
    published_on = Column(Date)
    last_read_at = Column(DateTime)
    author_id = Column(Integer, ForeignKey("authors.id"))
    genre_id = Column(Integer, ForeignKey("genres.id"))
    publisher_id = Column(Integer, ForeignKey("publishers.id"))
    owner_id = Column(Integer, ForeignKey("authors.id"))

    author = relationship(Author, foreign_keys=[author_id])
    genre = relationship(Genre)
    publisher = relationship(Publisher)
    owner = relationship(Author, foreign_keys=[owner_id], info={"polymorphic": True})

    @hybrid_property
    def display_title(self):
        return f"{self.title} ({self.exemplars})"


BOOK_ATTRIBUTES = [
    "id",
    "title",
    "exemplars",
    "digitized",
    "notes",
    "published_on",
    "last_read_at",
    "author_id",
    "genre_id",
    "publisher_id",
    "owner_id",
    "display_title",
]


@pytest.fixture
def models():
    """Namespace with the test models."""

    class _Models:
        pass

    ns = _Models()
    ns.Base = Base
    ns.Author = Author
    ns.Genre = Genre
    ns.Publisher = Publisher
    ns.Book = Book
    ns.book_attributes = list(BOOK_ATTRIBUTES)
    return ns


@pytest.fixture
def catalog():
    from nicecolumns.catalog import SqlAlchemyCatalog

    return SqlAlchemyCatalog(Base)


@pytest.fixture
def store():
    from nicecolumns.stores import MemoryFieldListStore

    return MemoryFieldListStore()
