"""Image processing utilities."""

from io import BytesIO
from typing import Tuple
from PIL import Image, ImageDraw, ImageFilter

from .logger import get_logger
from .errors import MalformedEncodingError, ImageProcessingError

logger = get_logger(__name__)

DEFAULT_MEDIA_TYPE = "image/png"

# Declared type -> canonical type
MEDIA_TYPE_ALIASES = {
    "image/jpg": "image/jpeg",
    "image/pjpeg": "image/jpeg",
    "image/x-png": "image/png",
    "image/x-ms-bmp": "image/bmp",
    # Multi-picture JPEGs from phone cameras
    "image/mpo": "image/jpeg",
}

HANDLE_WIDTH = 3
PROCESSING_BLUR_RADIUS = 4
PROCESSING_DIM = 0.5


def normalize_media_type(media_type: str) -> str:
    """Lowercase, drop parameters and resolve aliases."""
    base = media_type.split(";", 1)[0].strip().lower()
    return MEDIA_TYPE_ALIASES.get(base, base)


def detect_media_type(image_bytes: bytes) -> str:
    """
    Identify the MIME type of raw image bytes.

    Args:
        image_bytes: Raw image bytes

    Returns:
        MIME type reported for the detected format (e.g. 'image/png')

    Raises:
        MalformedEncodingError: If the bytes are not a readable image
    """
    if not image_bytes:
        raise MalformedEncodingError("Image payload is empty")

    try:
        with Image.open(BytesIO(image_bytes)) as image:
            image_format = image.format
            image.verify()
    except Exception as e:
        raise MalformedEncodingError(f"Payload is not a valid image: {e}")

    if not image_format:
        raise MalformedEncodingError("Image format could not be determined")

    return Image.MIME.get(image_format, f"image/{image_format.lower()}")


def check_image_payload(image_bytes: bytes, media_type: str) -> str:
    """
    Ensure bytes decode as an image of the declared media type.

    Returns:
        The detected MIME type

    Raises:
        MalformedEncodingError: If decoding fails or the types disagree
    """
    if not media_type or not normalize_media_type(media_type).startswith("image/"):
        raise MalformedEncodingError(f"Not an image media type: {media_type!r}")

    detected = detect_media_type(image_bytes)

    if normalize_media_type(detected) != normalize_media_type(media_type):
        raise MalformedEncodingError(
            f"Declared media type {media_type} does not match payload ({detected})"
        )

    return detected


def _open_rgb(image_bytes: bytes) -> Image.Image:
    try:
        image = Image.open(BytesIO(image_bytes))
        image.load()
    except Exception as e:
        raise ImageProcessingError(f"Failed to decode image: {e}")
    return image.convert("RGB")


def fit_to_canvas(image: Image.Image, size: Tuple[int, int]) -> Image.Image:
    """Scale to fit inside size keeping aspect ratio, centered on black."""
    canvas = Image.new("RGB", size, (0, 0, 0))
    if image.size == size:
        canvas.paste(image, (0, 0))
        return canvas

    ratio = min(size[0] / image.width, size[1] / image.height)
    new_size = (max(1, round(image.width * ratio)), max(1, round(image.height * ratio)))
    resized = image.resize(new_size, Image.LANCZOS)

    offset = ((size[0] - new_size[0]) // 2, (size[1] - new_size[1]) // 2)
    canvas.paste(resized, offset)
    return canvas


def encode_png(image: Image.Image) -> bytes:
    """Serialize a Pillow image as PNG bytes."""
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def compose_processing_frame(image_bytes: bytes) -> bytes:
    """
    Render an image with the in-progress treatment (blurred, dimmed).

    Args:
        image_bytes: Best available image (processed if any, else original)

    Returns:
        PNG bytes
    """
    image = _open_rgb(image_bytes)
    blurred = image.filter(ImageFilter.GaussianBlur(PROCESSING_BLUR_RADIUS))
    black = Image.new("RGB", image.size, (0, 0, 0))
    return encode_png(Image.blend(blurred, black, PROCESSING_DIM))


def compose_comparison_frame(
    original_bytes: bytes,
    processed_bytes: bytes,
    position_percent: float,
) -> bytes:
    """
    Render the before/after split at a slider position.

    The processed image is the base layer; the original covers the region
    left of the slider. Both are fitted onto a canvas the size of the
    processed image.

    Args:
        original_bytes: Original image bytes
        processed_bytes: Processed image bytes
        position_percent: Slider position in [0, 100]

    Returns:
        PNG bytes
    """
    processed = _open_rgb(processed_bytes)
    size = processed.size
    frame = fit_to_canvas(processed, size)
    overlay = fit_to_canvas(_open_rgb(original_bytes), size)

    split_x = round(size[0] * position_percent / 100)
    if split_x > 0:
        frame.paste(overlay.crop((0, 0, split_x, size[1])), (0, 0))

    handle_left = min(max(split_x - HANDLE_WIDTH // 2, 0), max(size[0] - HANDLE_WIDTH, 0))
    draw = ImageDraw.Draw(frame)
    draw.rectangle(
        [handle_left, 0, handle_left + HANDLE_WIDTH - 1, size[1] - 1],
        fill=(255, 255, 255),
    )

    logger.debug(
        "Comparison frame composed",
        extra={"width": size[0], "height": size[1], "split_x": split_x},
    )

    return encode_png(frame)
