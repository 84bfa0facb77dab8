"""Gemini generateContent client for image edits."""

import base64
import binascii
from typing import Any, Dict, List, Optional
import httpx

from .base import BaseProvider
from ..models.schemas import EncodedImage
from ..utils.config import ProviderSettings
from ..utils.logger import get_logger
from ..utils.errors import (
    AuthenticationError,
    EmptyPromptError,
    MalformedEncodingError,
    NoImageProducedError,
    ProviderRequestError,
    RateLimitError,
)

logger = get_logger(__name__)

PROVIDER_NAME = "gemini"


class GeminiImageClient(BaseProvider):
    """Client for Gemini image editing (one request, one response, no retries)."""

    def __init__(
        self,
        settings: ProviderSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Gemini client.

        Args:
            settings: Provider settings built from configuration at startup
            transport: Optional httpx transport override
        """
        super().__init__(
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
            transport=transport,
        )
        self.model = settings.model
        self.default_media_type = settings.default_media_type

    def _get_default_headers(self) -> dict:
        """Get default headers for Gemini requests."""
        return {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def build_payload(self, original: EncodedImage, prompt: str) -> Dict[str, Any]:
        """Request body: the prompt text followed by the inline image."""
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"text": prompt},
                        {
                            "inlineData": {
                                "mimeType": original.media_type,
                                "data": base64.b64encode(original.payload).decode("ascii"),
                            }
                        },
                    ],
                }
            ],
        }

    async def request_edit(self, original: EncodedImage, prompt: str) -> EncodedImage:
        """
        Ask the model to edit an image.

        Args:
            original: Image to edit
            prompt: Edit instruction, non-empty after trimming

        Returns:
            The first image the model returned

        Raises:
            EmptyPromptError: Blank prompt
            MalformedEncodingError: original is not an EncodedImage
            ProviderRequestError: Transport, auth, HTTP or response-format failure
            NoImageProducedError: The response carried no image
        """
        if not isinstance(original, EncodedImage):
            raise MalformedEncodingError("Original must be an encoded image")
        if not isinstance(prompt, str) or not prompt.strip():
            raise EmptyPromptError()

        self._ensure_client()

        logger.info(
            f"Submitting edit to {self.model}",
            extra={
                "model": self.model,
                "prompt": prompt[:100],
                "media_type": original.media_type,
                "size_kb": original.size_bytes / 1024,
            }
        )

        try:
            response = await self.client.post(
                self.endpoint,
                json=self.build_payload(original, prompt),
            )
        except httpx.HTTPError as e:
            logger.error(
                f"Gemini transport error: {type(e).__name__}: {e}",
                extra={"model": self.model, "error": str(e)}
            )
            raise ProviderRequestError(PROVIDER_NAME, str(e) or type(e).__name__)

        self._handle_response_errors(response)

        try:
            data = response.json()
        except ValueError:
            raise ProviderRequestError(
                PROVIDER_NAME,
                "Malformed response: body is not JSON",
                response.status_code,
            )

        parts = self._extract_parts(data)
        image = self._select_first_image(parts)

        logger.info(
            "Edit image received",
            extra={
                "model": self.model,
                "parts": len(parts),
                "media_type": image.media_type,
                "size_kb": image.size_bytes / 1024,
            }
        )

        return image

    def _extract_parts(self, data: Any) -> List[Dict[str, Any]]:
        """Parts of the first candidate, in provider order."""
        if not isinstance(data, dict):
            raise ProviderRequestError(PROVIDER_NAME, "Malformed response: expected an object")

        candidates = data.get("candidates") or []
        if not isinstance(candidates, list):
            raise ProviderRequestError(PROVIDER_NAME, "Malformed response: candidates is not a list")

        if not candidates:
            feedback = data.get("promptFeedback")
            block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
            logger.warning(
                "Gemini returned no candidates",
                extra={"model": self.model, "block_reason": block_reason}
            )
            return []

        first = candidates[0]
        if not isinstance(first, dict):
            raise ProviderRequestError(PROVIDER_NAME, "Malformed response: candidate is not an object")

        content = first.get("content") or {}
        if not isinstance(content, dict):
            raise ProviderRequestError(PROVIDER_NAME, "Malformed response: candidate has no content")

        parts = content.get("parts") or []
        if not isinstance(parts, list):
            raise ProviderRequestError(PROVIDER_NAME, "Malformed response: parts is not a list")

        return [part for part in parts if isinstance(part, dict)]

    def _select_first_image(self, parts: List[Dict[str, Any]]) -> EncodedImage:
        """First part carrying image data wins; everything after it is ignored."""
        texts = []

        for index, part in enumerate(parts):
            inline = part.get("inlineData") or part.get("inline_data")
            if not isinstance(inline, dict) or not inline.get("data"):
                if isinstance(part.get("text"), str):
                    texts.append(part["text"])
                continue

            media_type = inline.get("mimeType") or inline.get("mime_type") or self.default_media_type

            try:
                payload = base64.b64decode(inline["data"], validate=True)
                image = EncodedImage(media_type=media_type, payload=payload)
            except (binascii.Error, TypeError, ValueError, MalformedEncodingError) as e:
                raise ProviderRequestError(
                    PROVIDER_NAME,
                    f"Malformed response: image part {index} could not be decoded ({e})",
                )

            if index + 1 < len(parts):
                logger.debug(
                    "Ignoring parts after first image",
                    extra={"selected_index": index, "ignored": len(parts) - index - 1}
                )

            return image

        logger.warning(
            "Gemini response contained no image",
            extra={"model": self.model, "parts": len(parts), "text": " ".join(texts)[:500]}
        )
        raise NoImageProducedError()

    def _handle_response_errors(self, response: httpx.Response):
        """Handle HTTP response errors."""
        if response.status_code in (401, 403):
            raise AuthenticationError(PROVIDER_NAME, response.status_code)
        elif response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                PROVIDER_NAME,
                int(retry_after) if retry_after and retry_after.isdigit() else None
            )
        elif response.status_code >= 400:
            try:
                error_data = response.json()
                error_message = error_data.get("error", {}).get("message") or response.text
            except (ValueError, AttributeError):
                error_message = response.text

            logger.error(
                f"Gemini HTTP {response.status_code}",
                extra={"status": response.status_code, "response": response.text[:500]}
            )

            raise ProviderRequestError(
                PROVIDER_NAME,
                error_message or f"HTTP {response.status_code}",
                response.status_code
            )
