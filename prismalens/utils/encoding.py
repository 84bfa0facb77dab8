"""Data URL encoding for images: data:<mediaType>;base64,<payload>."""

import base64
import binascii
import re
from typing import Optional

from .errors import MalformedEncodingError
from .images import detect_media_type
from ..models.schemas import EncodedImage

DATA_URL_PATTERN = re.compile(r"data:([^;,\s]+);base64,(\S+)")


def parse(data_url: str) -> EncodedImage:
    """
    Parse a base64 data URL into an EncodedImage.

    Args:
        data_url: String of the form data:<mediaType>;base64,<payload>

    Returns:
        EncodedImage with the decoded payload

    Raises:
        MalformedEncodingError: If the string has the wrong shape, the
            payload is not canonical base64, or the bytes are not a valid
            image of the declared type
    """
    if not isinstance(data_url, str):
        raise MalformedEncodingError(f"Expected a data URL string, got {type(data_url).__name__}")

    match = DATA_URL_PATTERN.fullmatch(data_url)
    if match is None:
        raise MalformedEncodingError("Not a base64 data URL")

    media_type, encoded = match.groups()

    try:
        payload = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedEncodingError(f"Invalid base64 payload: {e}")

    # Only canonical base64 is accepted so that serialize() reproduces the input
    if base64.b64encode(payload).decode("ascii") != encoded:
        raise MalformedEncodingError("Base64 payload is not canonically encoded")

    return EncodedImage(media_type=media_type, payload=payload)


def serialize(image: EncodedImage) -> str:
    """Inverse of parse()."""
    encoded = base64.b64encode(image.payload).decode("ascii")
    return f"data:{image.media_type};base64,{encoded}"


def from_bytes(payload: bytes, media_type: Optional[str] = None) -> EncodedImage:
    """
    Build an EncodedImage from raw upload bytes.

    Args:
        payload: Raw image bytes
        media_type: Declared type; detected from the bytes when omitted

    Raises:
        MalformedEncodingError: If the bytes are not a valid image
    """
    if media_type is None:
        media_type = detect_media_type(payload)
    return EncodedImage(media_type=media_type, payload=payload)
