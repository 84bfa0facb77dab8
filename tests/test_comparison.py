"""Tests for the comparison renderer and slider geometry."""

from io import BytesIO

import pytest
from PIL import Image

from prismalens.core.comparison import ComparisonRenderer, position_from_pointer
from prismalens.models.enums import LayerRole, ViewMode
from prismalens.models.schemas import BoundingBox, SessionState
from prismalens.utils.errors import NoOriginalImageError

from conftest import BLUE, RED, YELLOW, make_encoded

BOUNDS = BoundingBox(left=100, width=200)


@pytest.fixture
def renderer() -> ComparisonRenderer:
    return ComparisonRenderer()


@pytest.fixture
def compared(image_a, image_b) -> SessionState:
    return SessionState(original=image_a, processed=image_b)


def pixel(image_bytes: bytes, xy):
    return Image.open(BytesIO(image_bytes)).convert("RGB").getpixel(xy)


def test_original_only(renderer, image_a):
    view = renderer.render(SessionState(original=image_a))

    assert view.mode == ViewMode.ORIGINAL_ONLY
    assert [layer.role for layer in view.layers] == [LayerRole.ORIGINAL]
    assert view.interactive is False
    assert view.slider is None
    assert view.labels == []


def test_processing_without_previous_result_shows_original(renderer, image_a):
    view = renderer.render(SessionState(original=image_a, in_flight=True))

    assert view.mode == ViewMode.PROCESSING
    assert len(view.layers) == 1
    assert view.layers[0].image is image_a
    assert view.layers[0].processing is True
    assert view.interactive is False


def test_processing_prefers_previous_result(renderer, image_a, image_b):
    view = renderer.render(SessionState(original=image_a, processed=image_b, in_flight=True))

    assert view.layers[0].role == LayerRole.PROCESSED
    assert view.layers[0].image is image_b


def test_compare_layers_and_labels(renderer, compared, image_a, image_b):
    view = renderer.render(compared)

    assert view.mode == ViewMode.COMPARE
    assert view.interactive is True
    base, overlay = view.layers
    assert base.role == LayerRole.PROCESSED and base.image is image_b
    assert overlay.role == LayerRole.ORIGINAL and overlay.image is image_a
    assert overlay.clip_right_percent == 50
    assert view.slider.position_percent == 50
    assert [(label.side, label.text) for label in view.labels] == [
        ("left", "Original"),
        ("right", "Edited"),
    ]


def test_overlay_clip_follows_slider(renderer, compared):
    renderer.pointer_move(compared, 150, BOUNDS)

    view = renderer.render(compared)

    assert view.slider.position_percent == 25
    assert view.layers[1].clip_right_percent == 75


@pytest.mark.parametrize(
    "x,expected",
    [
        (100, 0),
        (150, 25),
        (200, 50),
        (300, 100),
        (-5000, 0),
        (99.9, 0),
        (300.1, 100),
        (10_000, 100),
    ],
)
def test_pointer_maps_linearly_and_clamps(renderer, compared, x, expected):
    geometry = renderer.pointer_move(compared, x, BOUNDS)

    assert geometry.position_percent == pytest.approx(expected)


def test_touch_uses_first_touch_point(renderer, compared):
    geometry = renderer.touch_move(compared, [250, 120], BOUNDS)

    assert geometry.position_percent == pytest.approx(75)


def test_touch_far_outside_clamps(renderer, compared):
    assert renderer.touch_move(compared, [-1e9], BOUNDS).position_percent == 0
    assert renderer.touch_move(compared, [1e9], BOUNDS).position_percent == 100


def test_empty_touch_list_is_ignored(renderer, compared):
    renderer.pointer_move(compared, 150, BOUNDS)

    assert renderer.touch_move(compared, [], BOUNDS).position_percent == 25


def test_zero_width_bounds_are_ignored(renderer, compared):
    assert position_from_pointer(10, BoundingBox(left=0, width=0)) is None
    assert renderer.pointer_move(compared, 10, BoundingBox(left=0, width=0)).position_percent == 50


@pytest.mark.parametrize(
    "x,bounds",
    [
        (float("nan"), BOUNDS),
        (150, BoundingBox(left=float("nan"), width=200)),
        (150, BoundingBox(left=0, width=float("inf"))),
    ],
)
def test_non_finite_input_is_ignored(renderer, compared, x, bounds):
    renderer.pointer_move(compared, 150, BOUNDS)

    assert position_from_pointer(x, bounds) is None
    assert renderer.pointer_move(compared, x, bounds).position_percent == 25
    assert renderer.touch_move(compared, [x], bounds).position_percent == 25


def test_infinite_pointer_clamps(renderer, compared):
    assert renderer.pointer_move(compared, float("inf"), BOUNDS).position_percent == 100
    assert renderer.pointer_move(compared, float("-inf"), BOUNDS).position_percent == 0


def test_slider_is_frozen_while_in_flight(renderer, image_a, image_b):
    pending = SessionState(original=image_a, processed=image_b, in_flight=True)

    geometry = renderer.pointer_move(pending, 100, BOUNDS)

    assert geometry.position_percent == 50


def test_slider_ignored_without_processed_image(renderer, image_a):
    geometry = renderer.pointer_move(SessionState(original=image_a), 100, BOUNDS)

    assert geometry.position_percent == 50


def test_new_processed_image_recenters_slider(renderer, compared, image_a):
    renderer.pointer_move(compared, 120, BOUNDS)
    newer = SessionState(original=image_a, processed=make_encoded(YELLOW))

    view = renderer.render(newer)

    assert view.slider.position_percent == 50


def test_same_pair_keeps_slider_position(renderer, compared, image_a, image_b):
    renderer.pointer_move(compared, 120, BOUNDS)

    # A failed follow-up edit keeps the same pair
    renderer.render(SessionState(original=image_a, processed=image_b, in_flight=True))
    view = renderer.render(SessionState(original=image_a, processed=image_b, error="refused"))

    assert view.slider.position_percent == pytest.approx(10)


def test_render_requires_original(renderer):
    with pytest.raises(NoOriginalImageError):
        renderer.render(SessionState())


def test_frame_for_original_only_is_the_original(renderer, image_a):
    assert renderer.render_frame(SessionState(original=image_a)) is image_a


def test_comparison_frame_splits_at_slider(renderer):
    state = SessionState(original=make_encoded(RED), processed=make_encoded(BLUE))
    renderer.pointer_move(state, 150, BOUNDS)  # 25% of a 40px wide image

    frame = renderer.render_frame(state)

    assert frame.media_type == "image/png"
    assert pixel(frame.payload, (2, 10)) == RED
    assert pixel(frame.payload, (30, 10)) == BLUE
    assert pixel(frame.payload, (10, 10)) == (255, 255, 255)


def test_comparison_frame_fits_differently_sized_original(renderer):
    state = SessionState(original=make_encoded(RED, size=(20, 20)), processed=make_encoded(BLUE))
    renderer.pointer_move(state, 300, BOUNDS)

    frame = renderer.render_frame(state)

    image = Image.open(BytesIO(frame.payload))
    assert image.size == (40, 20)
    # Letterboxed original, centered
    assert pixel(frame.payload, (1, 10)) == (0, 0, 0)
    assert pixel(frame.payload, (20, 10)) == RED


def test_processing_frame_is_dimmed(renderer, image_a):
    frame = renderer.render_frame(SessionState(original=image_a, in_flight=True))

    r, g, b = pixel(frame.payload, (20, 10))
    assert r < 200 and g == 0 and b == 0
