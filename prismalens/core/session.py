"""Edit session state machine: upload -> pending -> ready / ready with error."""

import asyncio
from typing import Callable, List, Optional
from uuid import uuid4

from ..models.enums import ErrorKind
from ..models.schemas import (
    EditFailed,
    EditOutcome,
    EditRequest,
    EditSucceeded,
    EditTicket,
    EncodedImage,
    SessionState,
)
from ..providers.base import ImageEditProvider
from ..utils.errors import (
    EmptyPromptError,
    MalformedEncodingError,
    NoImageProducedError,
    NoOriginalImageError,
    ProviderRequestError,
)
from ..utils.logger import get_logger
from .presets import resolve_prompt

logger = get_logger(__name__)

EMPTY_STATE = SessionState()

StateListener = Callable[[SessionState], None]


async def run_edit(
    provider: ImageEditProvider,
    original: EncodedImage,
    prompt: str,
) -> EditOutcome:
    """
    Await one provider call and fold its result into an EditOutcome.

    Never raises for provider failures; cancellation propagates.
    """
    try:
        image = await provider.request_edit(original, prompt)
        return EditSucceeded(image=image)
    except NoImageProducedError as e:
        return EditFailed(error_kind=ErrorKind.NO_IMAGE_PRODUCED, message=str(e))
    except ProviderRequestError as e:
        return EditFailed(error_kind=ErrorKind.PROVIDER_REQUEST, message=e.detail)
    except MalformedEncodingError:
        return EditFailed(error_kind=ErrorKind.MALFORMED_ENCODING, message=MalformedEncodingError.user_message)
    except EmptyPromptError as e:
        return EditFailed(error_kind=ErrorKind.EMPTY_PROMPT, message=str(e))
    except Exception as e:
        logger.error(
            f"Unexpected edit failure: {type(e).__name__}: {e}",
            extra={"error": str(e)},
            exc_info=True,
        )
        return EditFailed(
            error_kind=ErrorKind.PROVIDER_REQUEST,
            message=str(e) or "Failed to process image",
        )


class EditSession:
    """
    Owns one user's SessionState and mediates every transition.

    Each transition replaces the state object, so consumers can detect
    changes by identity. Outcomes are applied only if the original they
    targeted is still current; results for a replaced image are dropped.
    """

    def __init__(self, session_id: Optional[str] = None):
        self.session_id = session_id or uuid4().hex
        self._state: SessionState = EMPTY_STATE
        # Bumped on every upload/reset; identifies the current original
        self._generation = 0
        self._sequence = 0
        self._latest_ticket: Optional[EditTicket] = None
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call listener with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: SessionState):
        previous = self._state
        self._state = state

        logger.debug(
            f"Session {self.session_id}: {previous.phase.value} -> {state.phase.value}",
            extra={"session_id": self.session_id, "generation": self._generation},
        )

        for listener in list(self._listeners):
            listener(state)

    def _evolve(self, **changes) -> SessionState:
        values = {name: getattr(self._state, name) for name in SessionState.model_fields}
        values.update(changes)
        return SessionState(**values)

    def upload(self, image: EncodedImage) -> SessionState:
        """Start over with a new original. Valid from any state."""
        self._generation += 1
        self._latest_ticket = None
        self._set_state(SessionState(original=image))

        logger.info(
            "Image uploaded",
            extra={
                "session_id": self.session_id,
                "media_type": image.media_type,
                "size_kb": image.size_bytes / 1024,
            }
        )
        return self._state

    def reset(self) -> SessionState:
        """Back to the empty state. Valid from any state."""
        self._generation += 1
        self._latest_ticket = None
        self._set_state(EMPTY_STATE)

        logger.info("Session reset", extra={"session_id": self.session_id})
        return self._state

    def begin_submit(self, request: EditRequest) -> EditTicket:
        """
        Enter the in-flight state for a request.

        Does not check for an already running request; that is the caller's
        job (see EditController).

        Raises:
            NoOriginalImageError: Nothing has been uploaded
        """
        if self._state.original is None:
            raise NoOriginalImageError("Upload an image before requesting an edit")

        prompt = resolve_prompt(request)

        self._sequence += 1
        ticket = EditTicket(
            sequence=self._sequence,
            generation=self._generation,
            style_id=request.style_id,
            prompt=prompt,
        )
        self._latest_ticket = ticket

        self._set_state(self._evolve(in_flight=True, error=None, active_style=request.style_id))

        logger.info(
            f"Edit #{ticket.sequence} submitted ({request.style_id.value})",
            extra={"session_id": self.session_id, "sequence": ticket.sequence, "prompt": prompt[:100]}
        )
        return ticket

    def is_current(self, ticket: EditTicket) -> bool:
        return ticket == self._latest_ticket and ticket.generation == self._generation

    def apply(self, ticket: EditTicket, outcome: EditOutcome) -> bool:
        """
        Apply a resolved edit.

        Returns:
            False if the ticket is stale and the outcome was discarded
        """
        if not self.is_current(ticket):
            logger.info(
                f"Discarding stale result for edit #{ticket.sequence}",
                extra={
                    "session_id": self.session_id,
                    "ticket_generation": ticket.generation,
                    "current_generation": self._generation,
                }
            )
            return False

        self._latest_ticket = None

        if isinstance(outcome, EditSucceeded):
            self._set_state(self._evolve(processed=outcome.image, in_flight=False, error=None))
            logger.info(
                f"Edit #{ticket.sequence} applied",
                extra={"session_id": self.session_id, "media_type": outcome.image.media_type}
            )
        else:
            self._set_state(self._evolve(in_flight=False, error=outcome.message))
            logger.warning(
                f"Edit #{ticket.sequence} failed: {outcome.message}",
                extra={"session_id": self.session_id, "error_kind": outcome.error_kind.value}
            )

        return True

    async def submit(self, request: EditRequest, provider: ImageEditProvider) -> SessionState:
        """
        Run one edit end to end: enter in-flight, await the provider, apply.

        Provider failures end up in state.error; they are not raised.
        """
        original = self._state.original
        ticket = self.begin_submit(request)

        try:
            outcome = await run_edit(provider, original, ticket.prompt)
        except asyncio.CancelledError:
            self.apply(
                ticket,
                EditFailed(error_kind=ErrorKind.PROVIDER_REQUEST, message="Edit was cancelled"),
            )
            raise

        self.apply(ticket, outcome)
        return self._state
