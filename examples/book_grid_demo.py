"""Book grid with resolved columns and a field configurator.

Run with ``python examples/book_grid_demo.py`` and open the page. Edits made
in the configurator are saved to the per-user field list file and picked up
on reload.
"""

from nicegui import ui
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base, relationship

from nicecolumns import ColumnResolver, JsonFieldListStore, SqlAlchemyCatalog
from nicecolumns.grid import FieldConfigurator, resolved_aggrid
from nicecolumns.utils.logging import configure_logging

configure_logging(level="DEBUG")

Base = declarative_base()


class Author(Base):
    __tablename__ = "authors"

    id = Column(Integer, primary_key=True)
    name = Column(String)


class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True)
    title = Column(String)
    notes = Column(Text)
    exemplars = Column(Integer)
    digitized = Column(Boolean)
    added_at = Column(DateTime)
    author_id = Column(Integer, ForeignKey("authors.id"))

    author = relationship(Author)


rows = [
    {"id": 1, "title": "Dune", "notes": "", "exemplars": 3, "digitized": True, "author__name": "Herbert"},
    {"id": 2, "title": "Emma", "notes": "signed", "exemplars": 1, "digitized": False, "author__name": "Austen"},
]

catalog = SqlAlchemyCatalog(Base)
store = JsonFieldListStore(app_name="nicecolumns_demo")


@ui.page("/")
def index() -> None:
    resolver = ColumnResolver(
        "demo.book_grid",
        "Book",
        {"columns": ["id", "title", "author_id", "exemplars", "digitized", {"name": "notes", "read_only": True}]},
        catalog=catalog,
        store=store,
    )

    with ui.header().classes("py-2 px-4"):
        ui.label("nicecolumns demo")

    with ui.column().classes("w-full h-64"):
        resolved_aggrid(resolver, rows)

    with ui.column().classes("w-full h-64"):
        configurator = FieldConfigurator(resolver)
    ui.button("Save layout", on_click=lambda: (configurator.apply(), ui.navigate.reload()))


ui.run()
