"""Before/after comparison view with a draggable reveal slider."""

import math
from typing import Optional, Sequence, Tuple

from ..models.enums import LayerRole, ViewMode
from ..models.schemas import (
    BoundingBox,
    ComparisonView,
    EncodedImage,
    SessionState,
    SliderGeometry,
    ViewLabel,
    ViewLayer,
)
from ..utils.errors import NoOriginalImageError
from ..utils.images import compose_comparison_frame, compose_processing_frame
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_POSITION = 50.0

# Left of the slider is always the original, right is the edit
COMPARE_LABELS = [
    ViewLabel(text="Original", side="left"),
    ViewLabel(text="Edited", side="right"),
]


def position_from_pointer(x: float, bounds: BoundingBox) -> Optional[float]:
    """
    Map a horizontal pointer coordinate over bounds to [0, 100].

    Coordinates outside the box clamp to the nearest edge. Returns None
    when the box is empty or not finite, or when x is NaN.
    """
    if math.isnan(x) or not (math.isfinite(bounds.left) and math.isfinite(bounds.width)):
        return None
    if bounds.width <= 0:
        return None
    offset = min(max(x - bounds.left, 0.0), bounds.width)
    return offset / bounds.width * 100


class ComparisonRenderer:
    """
    Renders SessionState as a layered comparison view.

    The slider position is the only state kept here. It goes back to the
    middle whenever the (original, processed) pair changes.
    """

    def __init__(self):
        self._geometry = SliderGeometry(position_percent=DEFAULT_POSITION)
        self._pair: Tuple[Optional[EncodedImage], Optional[EncodedImage]] = (None, None)

    @property
    def geometry(self) -> SliderGeometry:
        return self._geometry

    @property
    def position(self) -> float:
        return self._geometry.position_percent

    def observe(self, state: SessionState):
        """Track the current pair; a new pair recenters the slider."""
        original, processed = self._pair
        if original is state.original and processed is state.processed:
            return

        self._pair = (state.original, state.processed)
        if self._geometry.position_percent != DEFAULT_POSITION:
            logger.debug("New comparison pair, slider recentered")
        self._geometry = SliderGeometry(position_percent=DEFAULT_POSITION)

    @staticmethod
    def mode_for(state: SessionState) -> ViewMode:
        if state.original is None:
            raise NoOriginalImageError("Nothing to compare without an original image")
        if state.in_flight:
            return ViewMode.PROCESSING
        if state.processed is None:
            return ViewMode.ORIGINAL_ONLY
        return ViewMode.COMPARE

    def render(self, state: SessionState) -> ComparisonView:
        """
        Build the view for a state.

        Raises:
            NoOriginalImageError: The state has no original image
        """
        self.observe(state)
        mode = self.mode_for(state)

        if mode == ViewMode.ORIGINAL_ONLY:
            return ComparisonView(
                mode=mode,
                layers=[ViewLayer(role=LayerRole.ORIGINAL, image=state.original)],
            )

        if mode == ViewMode.PROCESSING:
            if state.processed is not None:
                best = ViewLayer(role=LayerRole.PROCESSED, image=state.processed, processing=True)
            else:
                best = ViewLayer(role=LayerRole.ORIGINAL, image=state.original, processing=True)
            return ComparisonView(mode=mode, layers=[best])

        return ComparisonView(
            mode=mode,
            layers=[
                ViewLayer(role=LayerRole.PROCESSED, image=state.processed),
                ViewLayer(
                    role=LayerRole.ORIGINAL,
                    image=state.original,
                    clip_right_percent=100 - self.position,
                ),
            ],
            interactive=True,
            slider=self._geometry,
            labels=list(COMPARE_LABELS),
        )

    def _move_to(self, state: SessionState, position: Optional[float]) -> SliderGeometry:
        self.observe(state)
        if position is None or self.mode_for(state) != ViewMode.COMPARE:
            return self._geometry
        self._geometry = SliderGeometry(position_percent=position)
        return self._geometry

    def pointer_move(self, state: SessionState, x: float, bounds: BoundingBox) -> SliderGeometry:
        """Mouse/pen drag. Ignored unless the view is interactive."""
        return self._move_to(state, position_from_pointer(x, bounds))

    def touch_move(
        self,
        state: SessionState,
        touches: Sequence[float],
        bounds: BoundingBox,
    ) -> SliderGeometry:
        """Touch drag; the first touch point drives the slider."""
        if not touches:
            return self._move_to(state, None)
        return self._move_to(state, position_from_pointer(touches[0], bounds))

    def render_frame(self, state: SessionState) -> EncodedImage:
        """Rasterize the current view into a single PNG."""
        view = self.render(state)

        if view.mode == ViewMode.ORIGINAL_ONLY:
            return state.original

        if view.mode == ViewMode.PROCESSING:
            payload = compose_processing_frame(view.layers[0].image.payload)
        else:
            payload = compose_comparison_frame(
                state.original.payload,
                state.processed.payload,
                self.position,
            )

        return EncodedImage(media_type="image/png", payload=payload)
