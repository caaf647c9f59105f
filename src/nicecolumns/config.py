# src/nicecolumns/config.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from nicecolumns.column_spec import EditorType


def _default_attr_type_editors() -> dict[str, EditorType]:
    return {
        "integer": "numberfield",
        "boolean": "checkbox",
        "date": "datefield",
        "datetime": "xdatetime",
        "text": "textarea",
        "string": "textfield",
    }


@dataclass
class ResolverConfig:
    """Declarative configuration for column resolution.

    Attributes:
        persistent_config_enabled: If False, saved widget layouts are neither
            read nor consulted; columns are always recomputed.
        model_fields_suffix: Suffix appended to a model's table name to form
            the key of its model-level field list (``"books_model_fields"``).
        association_display_members: Members tried, in order, when a foreign
            key column is renamed into an association column. The target's
            primary key is used when none of them exists.
        attr_type_editors: Maps a stored attribute type to an editor tag.
            Types missing from the map get no editor.
        association_editor: Editor for association columns whose member is
            not boolean.
        boolean_width: Default width of boolean columns.
        datetime_width: Default width of datetime columns.
    """

    persistent_config_enabled: bool = True
    model_fields_suffix: str = "_model_fields"
    association_display_members: tuple[str, ...] = ("name", "title", "label")
    attr_type_editors: dict[str, EditorType] = field(default_factory=_default_attr_type_editors)
    association_editor: EditorType = "combobox"
    boolean_width: int = 50
    datetime_width: int = 150

    def editor_for_attr_type(self, attr_type: Optional[str]) -> Optional[EditorType]:
        if attr_type is None:
            return None
        return self.attr_type_editors.get(attr_type)
