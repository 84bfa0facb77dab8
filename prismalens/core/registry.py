"""In-memory registry of edit sessions, one per client."""

from collections import OrderedDict
from typing import Dict, List

from ..providers.base import ImageEditProvider
from ..utils.errors import SessionNotFoundError
from ..utils.logger import get_logger
from .controller import EditController
from .session import EditSession

logger = get_logger(__name__)


class SessionRegistry:
    """Creates and looks up EditControllers, evicting the oldest past capacity."""

    def __init__(self, provider: ImageEditProvider, max_sessions: int = 100):
        self.provider = provider
        self.max_sessions = max_sessions
        self._controllers: "OrderedDict[str, EditController]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._controllers)

    def create(self) -> EditController:
        controller = EditController(EditSession(), self.provider)
        self._controllers[controller.session.session_id] = controller
        self._evict()

        logger.info(
            "Session created",
            extra={"session_id": controller.session.session_id, "active_sessions": len(self)}
        )
        return controller

    def get(self, session_id: str) -> EditController:
        """
        Raises:
            SessionNotFoundError: Unknown or evicted session
        """
        try:
            controller = self._controllers[session_id]
        except KeyError:
            raise SessionNotFoundError(f"Session {session_id} not found")
        self._controllers.move_to_end(session_id)
        return controller

    def remove(self, session_id: str):
        controller = self._controllers.pop(session_id, None)
        if controller is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        controller.close()
        logger.info("Session removed", extra={"session_id": session_id})

    def _evict(self):
        evicted: List[str] = []
        while len(self._controllers) > self.max_sessions:
            # Never evict a session with an edit in flight
            victim = next(
                (sid for sid, c in self._controllers.items() if not c.state.in_flight),
                None,
            )
            if victim is None:
                break
            self._controllers.pop(victim).close()
            evicted.append(victim)

        if evicted:
            logger.info(
                f"Evicted {len(evicted)} idle sessions",
                extra={"evicted": evicted, "active_sessions": len(self)}
            )

    def snapshot(self) -> Dict[str, int]:
        in_flight = sum(1 for c in self._controllers.values() if c.state.in_flight)
        return {"sessions": len(self), "in_flight": in_flight}
