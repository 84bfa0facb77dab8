"""Pytest configuration and shared fixtures."""

import asyncio
from io import BytesIO
from typing import Callable, List, Optional, Tuple, Union

import pytest
from PIL import Image

from prismalens.models.schemas import EncodedImage

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
YELLOW = (255, 255, 0)


def make_image_bytes(
    color: Tuple[int, int, int],
    size: Tuple[int, int] = (40, 20),
    image_format: str = "PNG",
) -> bytes:
    """Solid-color image encoded with Pillow."""
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format=image_format)
    return buffer.getvalue()


def make_encoded(color: Tuple[int, int, int], size: Tuple[int, int] = (40, 20)) -> EncodedImage:
    return EncodedImage(media_type="image/png", payload=make_image_bytes(color, size))


ProviderResult = Union[EncodedImage, Exception, Callable[[EncodedImage, str], EncodedImage]]


class FakeProvider:
    """Stands in for the image provider; records every call."""

    def __init__(self, result: Optional[ProviderResult] = None):
        self.result = result
        self.calls: List[Tuple[EncodedImage, str]] = []
        # When set, calls wait here until the test releases them
        self.gate: Optional[asyncio.Event] = None

    def hold(self) -> asyncio.Event:
        self.gate = asyncio.Event()
        return self.gate

    async def request_edit(self, original: EncodedImage, prompt: str) -> EncodedImage:
        self.calls.append((original, prompt))
        if self.gate is not None:
            await self.gate.wait()
        if isinstance(self.result, Exception):
            raise self.result
        if callable(self.result):
            return self.result(original, prompt)
        return self.result


@pytest.fixture
def image_a() -> EncodedImage:
    """Original upload."""
    return make_encoded(RED)


@pytest.fixture
def image_b() -> EncodedImage:
    """Provider result."""
    return make_encoded(BLUE)


@pytest.fixture
def image_c() -> EncodedImage:
    """Second upload."""
    return make_encoded(GREEN)


@pytest.fixture
def fake_provider(image_b) -> FakeProvider:
    return FakeProvider(result=image_b)
