"""Data models and schemas for the PrismaLens image editor."""

from .schemas import (
    EncodedImage,
    Preset,
    EditRequest,
    SessionState,
    EditTicket,
    EditSucceeded,
    EditFailed,
    EditOutcome,
    SliderGeometry,
    BoundingBox,
    ViewLayer,
    ViewLabel,
    ComparisonView,
)
from .enums import (
    StyleId,
    PresetIcon,
    SessionPhase,
    ErrorKind,
    ViewMode,
    LayerRole,
    PointerKind,
)

__all__ = [
    "EncodedImage",
    "Preset",
    "EditRequest",
    "SessionState",
    "EditTicket",
    "EditSucceeded",
    "EditFailed",
    "EditOutcome",
    "SliderGeometry",
    "BoundingBox",
    "ViewLayer",
    "ViewLabel",
    "ComparisonView",
    "StyleId",
    "PresetIcon",
    "SessionPhase",
    "ErrorKind",
    "ViewMode",
    "LayerRole",
    "PointerKind",
]
