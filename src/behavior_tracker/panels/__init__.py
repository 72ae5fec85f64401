"""CRUD panels: one generic controller, five declarative schemas."""

from .definitions import COUNSELING, DEVICE_USAGE, INCIDENTS, PANELS, PEER_MEDIATION, STUDENTS
from .resource import ALL_STATUSES, ResourcePanel
from .schema import ColumnSpec, FieldKind, FieldSpec, PanelSchema, ReferenceSpec

__all__ = [
    "ALL_STATUSES",
    "COUNSELING",
    "DEVICE_USAGE",
    "INCIDENTS",
    "PANELS",
    "PEER_MEDIATION",
    "STUDENTS",
    "ColumnSpec",
    "FieldKind",
    "FieldSpec",
    "PanelSchema",
    "ReferenceSpec",
    "ResourcePanel",
]
