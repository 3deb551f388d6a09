"""
Named events exchanged between the map client and the interaction engine.

Each workspace owns its own set of ``blinker`` signals so two workspaces never
see each other's traffic. Payloads are passed as keyword arguments:

``pointer-down`` / ``pointer-move`` / ``pointer-up``
    ``point`` (MapPoint, projected coordinates), ``on_overlay`` (bool)
``feature-hover-enter`` / ``feature-hover-exit``
    ``feature_key`` (str)
``drawing-toggled``
    ``enabled`` (bool)
``cancel-requested``
    no payload (keyboard escape)
``zone-name-submitted``
    ``name`` (str)
``candidate-dismissed``
    no payload (naming dialog closed)
``surface-detached``
    no payload (map widget torn down)
``notice``
    ``message`` (str), emitted by the engine for the page chrome
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Final

from blinker import Signal

POINTER_DOWN: Final[str] = "pointer-down"
POINTER_MOVE: Final[str] = "pointer-move"
POINTER_UP: Final[str] = "pointer-up"
FEATURE_HOVER_ENTER: Final[str] = "feature-hover-enter"
FEATURE_HOVER_EXIT: Final[str] = "feature-hover-exit"
DRAWING_TOGGLED: Final[str] = "drawing-toggled"
CANCEL_REQUESTED: Final[str] = "cancel-requested"
ZONE_NAME_SUBMITTED: Final[str] = "zone-name-submitted"
CANDIDATE_DISMISSED: Final[str] = "candidate-dismissed"
SURFACE_DETACHED: Final[str] = "surface-detached"
NOTICE: Final[str] = "notice"

EVENT_NAMES: Final[tuple[str, ...]] = (
    POINTER_DOWN,
    POINTER_MOVE,
    POINTER_UP,
    FEATURE_HOVER_ENTER,
    FEATURE_HOVER_EXIT,
    DRAWING_TOGGLED,
    CANCEL_REQUESTED,
    ZONE_NAME_SUBMITTED,
    CANDIDATE_DISMISSED,
    SURFACE_DETACHED,
    NOTICE,
)


class UnknownEventError(KeyError):
    """Raised when an event name is not part of the bus."""


class EventBus:
    """A fixed set of named signals with explicit subscription."""

    def __init__(self) -> None:
        self._signals: Dict[str, Signal] = {name: Signal(name) for name in EVENT_NAMES}

    def signal(self, name: str) -> Signal:
        try:
            return self._signals[name]
        except KeyError:
            raise UnknownEventError(name) from None

    def connect(self, name: str, receiver: Callable[..., Any]) -> None:
        self.signal(name).connect(receiver, weak=False)

    def disconnect(self, name: str, receiver: Callable[..., Any]) -> None:
        self.signal(name).disconnect(receiver)

    def emit(self, name: str, sender: Any, /, **payload: Any) -> Any:
        """Deliver an event to its receivers; returns the first non-None result."""
        for _receiver, result in self.signal(name).send(sender, **payload):
            if result is not None:
                return result
        return None
