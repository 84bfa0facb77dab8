"""Enumerations for the PrismaLens image editor."""

from enum import Enum


class StyleId(str, Enum):
    """Edit style: a catalog preset or a user-written prompt."""
    GHIBLI = "GHIBLI"
    QUALITY = "QUALITY"
    REFINE = "REFINE"
    BATMAN = "BATMAN"
    POTTER = "POTTER"
    CUSTOM = "CUSTOM"


class PresetIcon(str, Enum):
    """Icon shown next to an edit style."""
    SPARKLES = "sparkles"
    SUN = "sun"
    WAND = "wand"
    GHOST = "ghost"
    ZAP = "zap"
    MAGIC = "magic"


class SessionPhase(str, Enum):
    """Derived phase of an edit session."""
    EMPTY = "empty"
    READY = "ready"
    PENDING = "pending"
    READY_WITH_ERROR = "ready_with_error"


class ErrorKind(str, Enum):
    """Why an edit request failed."""
    MALFORMED_ENCODING = "malformed_encoding"
    EMPTY_PROMPT = "empty_prompt"
    PROVIDER_REQUEST = "provider_request"
    NO_IMAGE_PRODUCED = "no_image_produced"


class ViewMode(str, Enum):
    """What the comparison view currently shows."""
    ORIGINAL_ONLY = "original_only"
    PROCESSING = "processing"
    COMPARE = "compare"


class LayerRole(str, Enum):
    """Which image a rendered layer carries."""
    ORIGINAL = "original"
    PROCESSED = "processed"


class PointerKind(str, Enum):
    """Input device driving the reveal slider."""
    MOUSE = "mouse"
    TOUCH = "touch"
