"""Edit session endpoints: upload, edit, compare, download."""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, Field

from ..core.controller import EditController
from ..core.presets import icon_for
from ..core.registry import SessionRegistry
from ..models.enums import LayerRole, PointerKind, PresetIcon, SessionPhase, StyleId, ViewMode
from ..models.schemas import BoundingBox, SessionState, SliderGeometry, ViewLabel
from ..utils import encoding
from ..utils.export import export_filename, save_result
from ..utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


# ============================================================================
# REQUEST / RESPONSE MODELS
# ============================================================================

class UploadBody(BaseModel):
    data_url: str


class EditBody(BaseModel):
    style_id: StyleId
    prompt: str = ""


class SliderBody(BaseModel):
    left: float
    width: float
    pointer: PointerKind = PointerKind.MOUSE
    x: Optional[float] = None
    touches: List[float] = Field(default_factory=list)


class SessionResponse(BaseModel):
    session_id: str
    phase: SessionPhase
    original: Optional[str] = None
    processed: Optional[str] = None
    in_flight: bool
    error: Optional[str] = None
    active_style: Optional[StyleId] = None
    active_icon: Optional[PresetIcon] = None
    can_submit: bool


class LayerResponse(BaseModel):
    role: LayerRole
    data_url: str
    clip_right_percent: float
    processing: bool


class ComparisonResponse(BaseModel):
    mode: ViewMode
    interactive: bool
    slider: Optional[SliderGeometry] = None
    labels: List[ViewLabel]
    layers: List[LayerResponse]


class ExportResponse(BaseModel):
    path: str
    filename: str


# ============================================================================
# HELPERS
# ============================================================================

def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


def get_controller(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> EditController:
    return registry.get(session_id)


def to_response(controller: EditController) -> SessionResponse:
    state: SessionState = controller.state
    return SessionResponse(
        session_id=controller.session.session_id,
        phase=state.phase,
        original=encoding.serialize(state.original) if state.original else None,
        processed=encoding.serialize(state.processed) if state.processed else None,
        in_flight=state.in_flight,
        error=state.error,
        active_style=state.active_style,
        active_icon=icon_for(state.active_style) if state.active_style else None,
        can_submit=controller.can_submit,
    )


# ============================================================================
# ROUTES
# ============================================================================

@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(registry: SessionRegistry = Depends(get_registry)):
    """Start a new, empty edit session."""
    return to_response(registry.create())


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(controller: EditController = Depends(get_controller)):
    return to_response(controller)


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    registry.remove(session_id)
    return Response(status_code=204)


@router.post("/{session_id}/upload", response_model=SessionResponse)
async def upload_image(body: UploadBody, controller: EditController = Depends(get_controller)):
    """Replace the session's image. Discards any previous edit or error."""
    controller.upload_data_url(body.data_url)
    return to_response(controller)


@router.post("/{session_id}/edits", response_model=SessionResponse)
async def submit_edit(body: EditBody, controller: EditController = Depends(get_controller)):
    """
    Run a preset or custom edit and wait for it to resolve.

    Provider failures are reported in the returned state's error field.
    """
    accepted = await controller.submit(body.style_id, body.prompt)
    if not accepted:
        if controller.state.in_flight:
            raise HTTPException(status_code=409, detail="An edit is already in progress")
        raise HTTPException(status_code=409, detail="Upload an image before requesting an edit")
    return to_response(controller)


@router.post("/{session_id}/reset", response_model=SessionResponse)
async def reset_session(controller: EditController = Depends(get_controller)):
    controller.reset()
    return to_response(controller)


@router.get("/{session_id}/comparison", response_model=ComparisonResponse)
async def get_comparison(controller: EditController = Depends(get_controller)):
    view = controller.renderer.render(controller.state)
    return ComparisonResponse(
        mode=view.mode,
        interactive=view.interactive,
        slider=view.slider,
        labels=view.labels,
        layers=[
            LayerResponse(
                role=layer.role,
                data_url=encoding.serialize(layer.image),
                clip_right_percent=layer.clip_right_percent,
                processing=layer.processing,
            )
            for layer in view.layers
        ],
    )


@router.post("/{session_id}/slider", response_model=SliderGeometry)
async def move_slider(body: SliderBody, controller: EditController = Depends(get_controller)):
    """Drag the reveal slider. Ignored unless both images are shown."""
    bounds = BoundingBox(left=body.left, width=body.width)
    if body.pointer == PointerKind.TOUCH:
        return controller.renderer.touch_move(controller.state, body.touches, bounds)
    if body.x is None:
        raise HTTPException(status_code=422, detail="x is required for mouse input")
    return controller.renderer.pointer_move(controller.state, body.x, bounds)


@router.get("/{session_id}/comparison.png")
async def get_comparison_frame(controller: EditController = Depends(get_controller)):
    frame = controller.renderer.render_frame(controller.state)
    return Response(content=frame.payload, media_type=frame.media_type)


@router.get("/{session_id}/download")
async def download_result(request: Request, controller: EditController = Depends(get_controller)):
    processed = controller.state.processed
    if processed is None:
        raise HTTPException(status_code=404, detail="No edited image to download")

    filename = export_filename(request.app.state.config.export_prefix, processed.media_type)
    return Response(
        content=processed.payload,
        media_type=processed.media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/{session_id}/export", response_model=ExportResponse)
async def export_result(request: Request, controller: EditController = Depends(get_controller)):
    """Save the edited image into the configured export directory."""
    processed = controller.state.processed
    if processed is None:
        raise HTTPException(status_code=404, detail="No edited image to export")

    config = request.app.state.config
    path = save_result(processed, config.export_dir, config.export_prefix)
    return ExportResponse(path=str(path), filename=path.name)
