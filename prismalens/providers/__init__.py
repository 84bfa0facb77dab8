"""API provider clients for external services."""

from .base import BaseProvider, ImageEditProvider
from .gemini import GeminiImageClient

__all__ = [
    "BaseProvider",
    "ImageEditProvider",
    "GeminiImageClient",
]
