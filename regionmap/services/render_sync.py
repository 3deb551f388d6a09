from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from regionmap.domain.geometry import collection_bounds
from regionmap.domain.regions import ViewContext
from regionmap.domain.selection import SelectionSnapshot
from regionmap.domain.zones import Zone
from regionmap.rendering.protocols import RenderSurface
from regionmap.rendering.styles import StyleClass, style_for, zone_style

logger = logging.getLogger(__name__)

PREVIEW_KEY = "__drawing_preview__"
CANDIDATE_KEY = "__drawing_candidate__"

TOP_LEVEL_PADDING = 20
SUBREGION_PADDING = 30


@dataclass(frozen=True)
class RenderState:
    """Everything that decides how the visible features look."""

    context: ViewContext
    feature_keys: Tuple[str, ...] = ()
    selection: SelectionSnapshot = field(default_factory=SelectionSnapshot)
    hovered_key: Optional[str] = None
    has_preview: bool = False
    has_candidate: bool = False


def derive_styles(state: RenderState) -> Dict[str, StyleClass]:
    """
    Compute the style class of every visible feature from scratch.

    Selected wins over hovered. Hover styling is independent of drawing mode.
    The drawing preview line and candidate polygon appear under their own keys.
    """
    styles: Dict[str, StyleClass] = {}
    for key in state.feature_keys:
        if not state.context.is_top_level and key in state.selection:
            styles[key] = StyleClass.SELECTED
        elif key == state.hovered_key:
            styles[key] = StyleClass.HOVERED
        else:
            styles[key] = StyleClass.DEFAULT

    if state.has_preview:
        styles[PREVIEW_KEY] = StyleClass.DRAWING_PREVIEW
    if state.has_candidate:
        styles[CANDIDATE_KEY] = StyleClass.DRAWING_PREVIEW
    return styles


class RenderSyncAdapter:
    """
    Keeps feature styling on the render surface consistent with engine state.

    Styles are always re-derived in full; only features whose class differs from
    what was last applied are re-styled on the surface.
    """

    def __init__(self, surface: RenderSurface) -> None:
        self._surface = surface
        self._applied: Dict[str, StyleClass] = {}

    @property
    def applied(self) -> Dict[str, StyleClass]:
        return dict(self._applied)

    def render_view(self, state: RenderState, collection: Dict[str, Any]) -> None:
        """Replace the visible features with ``collection`` and style them."""
        features: List[Dict[str, Any]] = list(collection.get("features") or [])
        self._surface.clear_features()
        self._applied = {}
        self._surface.show_features(state.context.level, features)
        self.sync(state)

        bounds = collection_bounds(features)
        if bounds is not None:
            padding = TOP_LEVEL_PADDING if state.context.is_top_level else SUBREGION_PADDING
            self._surface.fit_bounds(bounds, padding)
        else:
            logger.debug("Nothing to fit for %s", state.context.level_key)

    def sync(self, state: RenderState) -> int:
        """Re-derive styles and push the changed ones. Returns how many were applied."""
        derived = derive_styles(state)
        applied = 0
        for key, style_class in derived.items():
            if key in (PREVIEW_KEY, CANDIDATE_KEY):
                continue
            if self._applied.get(key) is style_class:
                continue
            self._surface.apply_style(key, style_class.value, style_for(state.context.level, style_class))
            applied += 1
        self._applied = {k: v for k, v in derived.items() if k not in (PREVIEW_KEY, CANDIDATE_KEY)}
        return applied

    def render_zones(self, zones: Iterable[Zone]) -> None:
        payload = []
        for zone in zones:
            entry = zone.to_frontend_json()
            entry["style"] = zone_style(zone.color)
            payload.append(entry)
        self._surface.show_zones(payload)

    def reset(self) -> None:
        self._applied = {}
        self._surface.clear_features()
