from __future__ import annotations

import logging
import threading
import time
from typing import Any, Dict, List, Optional, Sequence

from regionmap import events
from regionmap.domain.geometry import MapPoint, polygon_feature
from regionmap.domain.regions import (
    PRIMARY_NAME_PROPERTY,
    SECONDARY_NAME_PROPERTY,
    SubRegion,
    TOP_LEVEL_KEY,
    ViewContext,
    empty_collection,
    feature_properties,
    regions_in,
)
from regionmap.domain.zones import KIND_POLYGON, Zone, utc_timestamp, zone_color
from regionmap.events import EventBus
from regionmap.rendering.protocols import RenderSurface
from regionmap.services.drawing_session import DrawingSessionController
from regionmap.services.render_sync import RenderState, RenderSyncAdapter
from regionmap.services.selection_store import SelectionStore
from regionmap.services.spatial_cache import SpatialDataCache
from regionmap.services.zone_repository import ZoneRepository

logger = logging.getLogger(__name__)

POINTER_EVENTS = {
    "down": events.POINTER_DOWN,
    "move": events.POINTER_MOVE,
    "up": events.POINTER_UP,
}


class WorkspaceError(Exception):
    """Base exception raised for workspace navigation issues."""


class UnknownRegionError(WorkspaceError):
    """Raised when drilling into a region that is not loaded."""


class UnknownFeatureError(WorkspaceError):
    """Raised when a feature key does not belong to the current view."""


class MapWorkspace:
    """
    One user's map session: view context, selection, zones and drawing mode.

    Events are handled one at a time under a lock, in arrival order. Data
    loads run outside the lock; when a newer navigation has been requested by
    the time a load completes, its result is dropped.
    """

    def __init__(
        self,
        cache: SpatialDataCache,
        repository: ZoneRepository,
        surface: RenderSurface,
        epsilon: float,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.cache = cache
        self.zones = repository
        self.surface = surface
        self.selection = SelectionStore()
        self.render = RenderSyncAdapter(surface)
        self.drawing = DrawingSessionController(surface, repository, self._build_zone, epsilon)
        self.events = bus or EventBus()

        self._lock = threading.RLock()
        self._context = ViewContext()
        self._requested = ViewContext()
        self._collection: Dict[str, Any] = empty_collection()
        self._features: Dict[str, Dict[str, Any]] = {}
        self._hovered: Optional[str] = None
        self._notices: List[str] = []
        self._subscribe()

    @property
    def context(self) -> ViewContext:
        return self._context

    @property
    def hovered_key(self) -> Optional[str]:
        return self._hovered

    def emit(self, name: str, /, **payload: Any) -> Any:
        with self._lock:
            return self.events.emit(name, self, **payload)

    # Navigation

    async def start(self) -> bool:
        return await self.navigate(ViewContext())

    async def navigate(self, context: ViewContext) -> bool:
        with self._lock:
            self._requested = context
            if self.drawing.is_active:
                self.drawing.disable()
                self._sync()

        collection = await self.cache.load(context.level_key)

        with self._lock:
            if self._requested != context:
                logger.info("Ignoring stale load for %s", context.level_key)
                return False
            self._context = context
            self._collection = collection
            self._features = {}
            for feature in collection.get("features") or []:
                key = context.feature_key(feature)
                if key is not None:
                    self._features[key] = feature
            self._hovered = None
            self.render.render_view(self._render_state(), collection)
            self._render_zones()
            return True

    async def drill_into(self, region_id: str) -> bool:
        regions = regions_in(await self.cache.load(TOP_LEVEL_KEY))
        region = next((r for r in regions if r.id == str(region_id)), None)
        if region is None:
            raise UnknownRegionError(f"Region {region_id} is not available.")
        self._notify(f"Region {region.name_primary}")
        return await self.navigate(ViewContext(parent=region))

    async def go_back(self) -> bool:
        return await self.navigate(ViewContext())

    async def click(self, feature_key: str) -> bool:
        """Top level: drill into the region. Sub-level: toggle its selection."""
        with self._lock:
            if self.drawing.is_active:
                return False
            top_level = self._context.is_top_level
            if not top_level:
                self.toggle_subregion(feature_key)
                return True
        return await self.drill_into(feature_key)

    async def escape(self) -> bool:
        with self._lock:
            if self.emit(events.CANCEL_REQUESTED):
                return True
            top_level = self._context.is_top_level
        if top_level:
            return False
        return await self.go_back()

    # Selection

    def toggle_subregion(self, feature_key: str) -> bool:
        with self._lock:
            feature = self._features.get(feature_key)
            parent = self._context.parent
            if feature is None or parent is None:
                raise UnknownFeatureError(f"Feature {feature_key} is not in the current view.")
            sub = SubRegion.from_feature(feature, parent.id)
            selected = self.selection.toggle(parent.id, parent.name_primary, sub.name_primary, sub.name_secondary)
            self._notify(f"{sub.name_primary} {'selected' if selected else 'removed'}")
            self._sync()
            return selected

    def remove_selection(self, key: str) -> bool:
        with self._lock:
            record = self.selection.remove(key)
            if record is None:
                return False
            self._notify(f"{record.child_name_primary} removed")
            self._sync()
            return True

    def clear_selection(self) -> int:
        with self._lock:
            count = self.selection.clear()
            self._notify("All selections cleared")
            self._sync()
            return count

    # Zones

    def remove_zone(self, zone_id: str) -> Optional[Zone]:
        with self._lock:
            zone = self.zones.remove_by_id(zone_id)
            if zone is not None:
                self._notify(f"Zone «{zone.name}» removed")
                self._render_zones()
            return zone

    def clear_zones(self) -> int:
        with self._lock:
            count = self.zones.clear()
            self._notify("All custom zones cleared")
            self._render_zones()
            return count

    # Drawing

    def set_drawing_mode(self, enabled: bool) -> None:
        self.emit(events.DRAWING_TOGGLED, enabled=enabled)

    def pointer(self, phase: str, point: Optional[MapPoint], on_overlay: bool = False) -> None:
        self.emit(POINTER_EVENTS[phase], point=point, on_overlay=on_overlay)

    def submit_zone_name(self, name: str) -> Optional[Zone]:
        return self.emit(events.ZONE_NAME_SUBMITTED, name=name)

    def dismiss_candidate(self) -> bool:
        return bool(self.emit(events.CANDIDATE_DISMISSED))

    def hover(self, feature_key: str, entered: bool) -> None:
        name = events.FEATURE_HOVER_ENTER if entered else events.FEATURE_HOVER_EXIT
        self.emit(name, feature_key=feature_key)

    def close(self) -> None:
        self.emit(events.SURFACE_DETACHED)

    # State

    def drain_notices(self) -> List[str]:
        with self._lock:
            notices, self._notices = self._notices, []
            return notices

    def describe(self) -> Dict[str, Any]:
        with self._lock:
            candidate = self.drawing.candidate
            parent_id = self._context.parent_id
            return {
                "view": self._context.to_frontend_json(),
                "loading": self._requested != self._context,
                "drawing": {
                    "state": self.drawing.state.value,
                    "candidate": [p.to_json() for p in candidate] if candidate else None,
                },
                "selection": {
                    "count": len(self.selection),
                    "countInView": self.selection.count_for_parent(parent_id) if parent_id else 0,
                },
                "zoneCount": len(self.zones),
                "hover": self._hover_info(),
            }

    # Event receivers

    def _subscribe(self) -> None:
        bus = self.events
        bus.connect(events.POINTER_DOWN, self._on_pointer_down)
        bus.connect(events.POINTER_MOVE, self._on_pointer_move)
        bus.connect(events.POINTER_UP, self._on_pointer_up)
        bus.connect(events.FEATURE_HOVER_ENTER, self._on_hover_enter)
        bus.connect(events.FEATURE_HOVER_EXIT, self._on_hover_exit)
        bus.connect(events.DRAWING_TOGGLED, self._on_drawing_toggled)
        bus.connect(events.CANCEL_REQUESTED, self._on_cancel)
        bus.connect(events.ZONE_NAME_SUBMITTED, self._on_zone_name)
        bus.connect(events.CANDIDATE_DISMISSED, self._on_candidate_dismissed)
        bus.connect(events.SURFACE_DETACHED, self._on_surface_detached)
        bus.connect(events.NOTICE, self._on_notice)

    def _on_pointer_down(self, sender, point: MapPoint, on_overlay: bool = False):
        self.drawing.pointer_down(point, on_overlay=on_overlay)

    def _on_pointer_move(self, sender, point: MapPoint, on_overlay: bool = False):
        self.drawing.pointer_move(point)

    def _on_pointer_up(self, sender, point: Optional[MapPoint] = None, on_overlay: bool = False):
        return self.drawing.pointer_up(point)

    def _on_hover_enter(self, sender, feature_key: str):
        if feature_key not in self._features:
            return
        self._hovered = feature_key
        self._sync()

    def _on_hover_exit(self, sender, feature_key: str):
        if self._hovered == feature_key:
            self._hovered = None
            self._sync()

    def _on_drawing_toggled(self, sender, enabled: bool):
        self.drawing.toggle(enabled)
        self._sync()

    def _on_cancel(self, sender):
        handled = self.drawing.cancel()
        if handled:
            self._sync()
        return handled or None

    def _on_zone_name(self, sender, name: str):
        zone = self.drawing.confirm(name)
        if zone is not None:
            self._notify(f"Zone «{zone.name}» added")
            self._render_zones()
        return zone

    def _on_candidate_dismissed(self, sender):
        return self.drawing.cancel_candidate() or None

    def _on_surface_detached(self, sender):
        self.drawing.close()

    def _on_notice(self, sender, message: str):
        self._notices.append(message)

    # Helpers

    def _notify(self, message: str) -> None:
        self.events.emit(events.NOTICE, self, message=message)

    def _render_state(self) -> RenderState:
        return RenderState(
            context=self._context,
            feature_keys=tuple(self._features),
            selection=self.selection.snapshot,
            hovered_key=self._hovered,
            has_preview=bool(self.drawing.buffer),
            has_candidate=self.drawing.candidate is not None,
        )

    def _sync(self) -> None:
        self.render.sync(self._render_state())

    def _render_zones(self) -> None:
        # The map shows every zone; per-region filtering is only for listings.
        self.render.render_zones(self.zones.all())

    def _hover_info(self) -> Optional[Dict[str, str]]:
        if self._hovered is None or self.drawing.is_active:
            return None
        props = feature_properties(self._features.get(self._hovered, {}))
        return {
            "title": props.get(PRIMARY_NAME_PROPERTY, ""),
            "sub": props.get(SECONDARY_NAME_PROPERTY) or "",
        }

    def _next_zone_id(self) -> str:
        stamp = int(time.time() * 1000)
        while self.zones.get(f"zone-{stamp}") is not None:
            stamp += 1
        return f"zone-{stamp}"

    def _build_zone(self, points: Sequence[MapPoint], name: str) -> Zone:
        parent = self._context.parent
        return Zone(
            id=self._next_zone_id(),
            name=name,
            kind=KIND_POLYGON,
            color=zone_color(len(self.zones)),
            geometry=polygon_feature(points),
            parent_id=parent.id if parent else None,
            parent_name=parent.name_primary if parent else None,
            created_at=utc_timestamp(),
        )
