"""Pydantic schemas for data validation."""

import base64
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, Field, field_serializer, model_validator

from .enums import (
    ErrorKind,
    LayerRole,
    PresetIcon,
    SessionPhase,
    StyleId,
    ViewMode,
)
from ..utils.errors import EmptyPromptError
from ..utils.images import check_image_payload


class EncodedImage(BaseModel):
    """Image payload paired with its declared media type."""
    media_type: str
    payload: bytes = Field(repr=False)

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_payload(self) -> "EncodedImage":
        # Raises MalformedEncodingError, which pydantic lets through unwrapped
        check_image_payload(self.payload, self.media_type)
        return self

    @field_serializer("payload", when_used="json")
    def _payload_as_base64(self, payload: bytes) -> str:
        return base64.b64encode(payload).decode("ascii")

    @property
    def size_bytes(self) -> int:
        return len(self.payload)


class Preset(BaseModel):
    """Catalog entry: a named, fixed prompt."""
    style_id: StyleId
    label: str
    description: str
    icon: PresetIcon
    accent: str
    prompt: str

    class Config:
        frozen = True


class EditRequest(BaseModel):
    """A style selection plus the user's prompt text."""
    style_id: StyleId
    prompt_text: str = ""

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_prompt(self) -> "EditRequest":
        if self.style_id == StyleId.CUSTOM and not self.prompt_text.strip():
            raise EmptyPromptError()
        return self


class SessionState(BaseModel):
    """Snapshot of one edit session. Replaced, never mutated."""
    original: Optional[EncodedImage] = None
    processed: Optional[EncodedImage] = None
    in_flight: bool = False
    error: Optional[str] = None
    active_style: Optional[StyleId] = None

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_invariants(self) -> "SessionState":
        if self.processed is not None and self.original is None:
            raise ValueError("processed image requires an original image")
        if self.in_flight and self.error is not None:
            raise ValueError("in_flight and error are mutually exclusive")
        return self

    @property
    def phase(self) -> SessionPhase:
        if self.original is None:
            return SessionPhase.EMPTY
        if self.in_flight:
            return SessionPhase.PENDING
        if self.error is not None:
            return SessionPhase.READY_WITH_ERROR
        return SessionPhase.READY


class EditTicket(BaseModel):
    """Identifies one submitted edit and the original it targeted."""
    sequence: int
    generation: int
    style_id: StyleId
    prompt: str

    class Config:
        frozen = True


class EditSucceeded(BaseModel):
    """Provider returned an image."""
    kind: Literal["success"] = "success"
    image: EncodedImage


class EditFailed(BaseModel):
    """Provider call failed or produced nothing."""
    kind: Literal["failure"] = "failure"
    error_kind: ErrorKind
    message: str


EditOutcome = Union[EditSucceeded, EditFailed]


class SliderGeometry(BaseModel):
    """Reveal slider position, 0 = far left, 100 = far right."""
    position_percent: float = Field(default=50.0, ge=0.0, le=100.0)


class BoundingBox(BaseModel):
    """On-screen box of the comparison component."""
    left: float
    width: float
    top: float = 0.0
    height: float = 0.0


class ViewLayer(BaseModel):
    """One stacked image in the comparison view, bottom layer first."""
    role: LayerRole
    image: EncodedImage
    # Percentage of the layer hidden from the right edge
    clip_right_percent: float = 0.0
    processing: bool = False


class ViewLabel(BaseModel):
    text: str
    side: Literal["left", "right"]


class ComparisonView(BaseModel):
    """Everything needed to draw the comparison component."""
    mode: ViewMode
    layers: List[ViewLayer]
    interactive: bool = False
    slider: Optional[SliderGeometry] = None
    labels: List[ViewLabel] = Field(default_factory=list)
