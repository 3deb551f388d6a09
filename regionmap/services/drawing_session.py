from __future__ import annotations

import logging
from contextlib import ExitStack, contextmanager
from enum import Enum
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from regionmap.domain.geometry import (
    DEFAULT_SIMPLIFY_EPSILON,
    MIN_POLYGON_POINTS,
    MapPoint,
    simplify,
)
from regionmap.domain.zones import Zone
from regionmap.rendering.protocols import RenderSurface
from regionmap.rendering.styles import CANDIDATE_STYLE, DRAWING_CURSOR, PREVIEW_LINE_STYLE
from regionmap.services.zone_repository import ZoneRepository

logger = logging.getLogger(__name__)

ZoneBuilder = Callable[[Sequence[MapPoint], str], Zone]


class DrawingState(str, Enum):
    IDLE = "idle"
    ARMED = "armed-for-capture"
    CAPTURING = "capturing"
    AWAITING_NAME = "awaiting-name"


@contextmanager
def exclusive_interactions(surface: RenderSurface) -> Iterator[RenderSurface]:
    """Hold the map's drag and double-click zoom disabled until exit."""
    surface.set_interactions(dragging=False, double_click_zoom=False)
    surface.set_cursor(DRAWING_CURSOR)
    try:
        yield surface
    finally:
        surface.set_interactions(dragging=True, double_click_zoom=True)
        surface.set_cursor("")


class DrawingSessionController:
    """
    Turns freehand pointer gestures into named zones.

    Drawing mode owns the map's interaction flags from ``enable`` until
    ``disable`` or ``close``; they are released on every exit path.
    """

    def __init__(
        self,
        surface: RenderSurface,
        repository: ZoneRepository,
        zone_builder: ZoneBuilder,
        epsilon: float = DEFAULT_SIMPLIFY_EPSILON,
    ) -> None:
        self._surface = surface
        self._repository = repository
        self._zone_builder = zone_builder
        self._epsilon = epsilon
        self._state = DrawingState.IDLE
        self._buffer: List[MapPoint] = []
        self._candidate: Optional[Tuple[MapPoint, ...]] = None
        self._preview_visible = False
        self._interactions = ExitStack()

    @property
    def state(self) -> DrawingState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is not DrawingState.IDLE

    @property
    def candidate(self) -> Optional[Tuple[MapPoint, ...]]:
        return self._candidate

    @property
    def buffer(self) -> Tuple[MapPoint, ...]:
        return tuple(self._buffer)

    def toggle(self, enabled: bool) -> None:
        if enabled:
            self.enable()
        else:
            self.disable()

    def enable(self) -> None:
        if self._state is not DrawingState.IDLE:
            return
        self._interactions.enter_context(exclusive_interactions(self._surface))
        self._state = DrawingState.ARMED
        logger.debug("Drawing mode enabled")

    def disable(self) -> None:
        if self._state is DrawingState.IDLE:
            return
        self._discard_gesture()
        self._discard_candidate()
        self._interactions.close()
        self._state = DrawingState.IDLE
        logger.debug("Drawing mode disabled")

    def close(self) -> None:
        """Release the map on teardown, whatever state the session is in."""
        try:
            self.disable()
        finally:
            self._interactions.close()
            self._state = DrawingState.IDLE

    def pointer_down(self, point: MapPoint, on_overlay: bool = False) -> None:
        if self._state is not DrawingState.ARMED or on_overlay:
            return
        self._buffer = [point]
        self._surface.draw_preview_line(self._buffer, dict(PREVIEW_LINE_STYLE))
        self._preview_visible = True
        self._state = DrawingState.CAPTURING

    def pointer_move(self, point: MapPoint) -> None:
        if self._state is not DrawingState.CAPTURING:
            return
        self._buffer.append(point)
        self._surface.extend_preview_line(point)

    def pointer_up(self, point: Optional[MapPoint] = None) -> Optional[Tuple[MapPoint, ...]]:
        """Finish the gesture; returns the candidate polygon, or None if discarded."""
        if self._state is not DrawingState.CAPTURING:
            return None
        if point is not None:
            self._buffer.append(point)

        raw = list(self._buffer)
        self._discard_gesture()

        if len(raw) < MIN_POLYGON_POINTS:
            self._state = DrawingState.ARMED
            logger.debug("Discarded gesture with %d point(s)", len(raw))
            return None

        simplified = simplify(raw, self._epsilon)
        polygon = simplified if len(simplified) >= MIN_POLYGON_POINTS else raw
        self._candidate = tuple(polygon)
        self._surface.draw_candidate(self._candidate, dict(CANDIDATE_STYLE))
        self._state = DrawingState.AWAITING_NAME
        logger.debug("Candidate polygon with %d of %d point(s)", len(polygon), len(raw))
        return self._candidate

    def confirm(self, name: str) -> Optional[Zone]:
        """
        Promote the candidate to a zone named ``name``.

        A blank name discards the candidate instead. If the repository cannot
        store the zone the candidate stays pending and the error propagates.
        """
        if self._state is not DrawingState.AWAITING_NAME or self._candidate is None:
            return None
        trimmed = (name or "").strip()
        if not trimmed:
            self.cancel_candidate()
            return None

        zone = self._zone_builder(self._candidate, trimmed)
        self._repository.add(zone)
        self._discard_candidate()
        self._state = DrawingState.ARMED
        return zone

    def cancel_candidate(self) -> bool:
        if self._state is not DrawingState.AWAITING_NAME:
            return False
        self._discard_candidate()
        self._state = DrawingState.ARMED
        return True

    def cancel(self) -> bool:
        """
        Handle an escape signal. Returns False when nothing was active.

        A pending candidate or gesture is discarded first; with neither, drawing
        mode itself is switched off.
        """
        if self._state is DrawingState.AWAITING_NAME:
            return self.cancel_candidate()
        if self._state is DrawingState.CAPTURING:
            self._discard_gesture()
            self._state = DrawingState.ARMED
            return True
        if self._state is DrawingState.ARMED:
            self.disable()
            return True
        return False

    def _discard_gesture(self) -> None:
        self._buffer = []
        if self._preview_visible:
            self._surface.remove_preview_line()
            self._preview_visible = False

    def _discard_candidate(self) -> None:
        if self._candidate is not None:
            self._surface.remove_candidate()
            self._candidate = None
