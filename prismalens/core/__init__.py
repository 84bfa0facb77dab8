"""Core business logic components."""

from .presets import list_presets, get_preset, resolve_prompt
from .session import EditSession, EMPTY_STATE, run_edit
from .comparison import ComparisonRenderer
from .controller import EditController
from .registry import SessionRegistry

__all__ = [
    "list_presets",
    "get_preset",
    "resolve_prompt",
    "EditSession",
    "EMPTY_STATE",
    "run_edit",
    "ComparisonRenderer",
    "EditController",
    "SessionRegistry",
]
