"""Declarative description of a CRUD panel.

A panel is fully described by the table it reads, how it sorts, which
reference lists feed its dropdowns, which fields its create form has and
which columns its list shows. :class:`~behavior_tracker.panels.resource.ResourcePanel`
does the rest.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel


class FieldKind(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    DATE = "date"
    DATETIME = "datetime"
    HIDDEN = "hidden"


@dataclass(frozen=True)
class FieldSpec:
    """One input on the create form.

    ``options`` holds fixed ``(value, label)`` choices; ``reference`` names a
    :class:`ReferenceSpec` whose rows become the choices instead.
    """

    name: str
    label: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    default: Any = ""
    options: tuple[tuple[str, str], ...] = ()
    reference: Optional[str] = None
    placeholder: str = ""

    def is_blank(self, value: Any) -> bool:
        if self.kind == FieldKind.CHECKBOX:
            return False
        return value is None or (isinstance(value, str) and not value.strip())


@dataclass(frozen=True)
class ReferenceSpec:
    """A secondary read used only to populate a form select."""

    key: str
    table: str
    order_by: str
    label_field: str
    columns: str = "*"


@dataclass(frozen=True)
class ColumnSpec:
    """One value shown per row.

    ``path`` is a dotted attribute path into the row model, so embedded
    relations read as ``"students.full_name"``.
    """

    label: str
    path: str
    fallback: str = ""
    formatter: Optional[Callable[[Any], str]] = None

    def render(self, row: BaseModel) -> str:
        value: Any = row
        for part in self.path.split("."):
            value = getattr(value, part, None)
            if value is None:
                return self.fallback
        if self.formatter is not None:
            return self.formatter(value)
        if value == "":
            return self.fallback
        return str(value)


@dataclass(frozen=True)
class PanelSchema:
    """Everything a :class:`ResourcePanel` needs to know about one entity."""

    key: str
    title: str
    subtitle: str
    table: str
    model: type[BaseModel]
    order_by: str
    fields: tuple[FieldSpec, ...]
    columns: tuple[ColumnSpec, ...]
    empty_message: str
    create_label: str
    form_title: str
    select: str = "*"
    descending: bool = False
    references: tuple[ReferenceSpec, ...] = ()
    # Column stamped with the signed-in identity's id on insert
    attribution_field: Optional[str] = None
    # Single-field patches offered per row
    status_field: Optional[str] = None
    status_options: tuple[tuple[str, str], ...] = ()
    toggle_field: Optional[str] = None
    toggle_labels: tuple[str, str] = ("Off", "On")
    heading_path: Optional[str] = None
    details: tuple[ColumnSpec, ...] = ()

    def __post_init__(self) -> None:
        if self.heading_path and self.heading_column is None:
            raise ValueError(f"{self.key} heading {self.heading_path!r} is not one of its columns")

    @property
    def heading_column(self) -> Optional[ColumnSpec]:
        """The column rendered as each row's heading, if any."""
        if not self.heading_path:
            return None
        return next((column for column in self.columns if column.path == self.heading_path), None)

    def default_form(self) -> dict[str, Any]:
        return {spec.name: spec.default for spec in self.fields}

    def field_spec(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(f"{self.key} has no field {name!r}")

    def reference(self, key: str) -> ReferenceSpec:
        for spec in self.references:
            if spec.key == key:
                return spec
        raise KeyError(f"{self.key} has no reference list {key!r}")

    @property
    def status_values(self) -> tuple[str, ...]:
        return tuple(value for value, _label in self.status_options)
