"""Boundary between user actions and the edit session."""

from typing import Optional

from ..models.enums import StyleId
from ..models.schemas import EditRequest, EncodedImage, SessionState
from ..providers.base import ImageEditProvider
from ..utils import encoding
from ..utils.logger import get_logger
from .comparison import ComparisonRenderer
from .session import EditSession

logger = get_logger(__name__)


class EditController:
    """
    Drives one EditSession on behalf of a user.

    Enforces the one-edit-at-a-time rule the session itself leaves open:
    while a request is in flight, further submits are refused without
    touching state. Also keeps the renderer in step with every new state.
    """

    def __init__(
        self,
        session: EditSession,
        provider: ImageEditProvider,
        renderer: Optional[ComparisonRenderer] = None,
    ):
        self.session = session
        self.provider = provider
        self.renderer = renderer or ComparisonRenderer()
        self._unsubscribe = session.subscribe(self.renderer.observe)

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def can_submit(self) -> bool:
        """Whether edit controls should be enabled."""
        state = self.session.state
        return state.original is not None and not state.in_flight

    def upload(self, image: EncodedImage) -> SessionState:
        return self.session.upload(image)

    def upload_data_url(self, data_url: str) -> SessionState:
        """
        Raises:
            MalformedEncodingError: data_url is not a valid encoded image
        """
        return self.session.upload(encoding.parse(data_url))

    def upload_bytes(self, payload: bytes, media_type: Optional[str] = None) -> SessionState:
        return self.session.upload(encoding.from_bytes(payload, media_type))

    def reset(self) -> SessionState:
        return self.session.reset()

    @staticmethod
    def build_request(style_id: StyleId, prompt_text: str = "") -> EditRequest:
        """
        Validate a request before anything is sent.

        Raises:
            EmptyPromptError: Custom style with blank text
        """
        return EditRequest(style_id=StyleId(style_id), prompt_text=prompt_text or "")

    async def submit(self, style_id: StyleId, prompt_text: str = "") -> bool:
        """
        Submit an edit if the controls would allow it.

        Returns:
            False when refused (no image, or an edit already in flight)

        Raises:
            EmptyPromptError: Custom style with blank text; state is untouched
        """
        request = self.build_request(style_id, prompt_text)

        if not self.can_submit:
            logger.warning(
                "Edit refused",
                extra={
                    "session_id": self.session.session_id,
                    "reason": "in_flight" if self.session.state.in_flight else "no_image",
                }
            )
            return False

        await self.session.submit(request, self.provider)
        return True

    def close(self):
        self._unsubscribe()
