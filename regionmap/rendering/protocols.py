from __future__ import annotations

from typing import Any, Dict, List, Protocol, Sequence, Tuple

from regionmap.domain.geometry import MapPoint


class RenderSurface(Protocol):
    """Calls the interaction engine issues against the map widget."""

    def show_features(self, level: str, features: List[Dict[str, Any]]) -> None:
        ...

    def clear_features(self) -> None:
        ...

    def apply_style(self, feature_key: str, style_class: str, style: Dict[str, Any]) -> None:
        ...

    def fit_bounds(self, bounds: Tuple[float, float, float, float], padding: int) -> None:
        ...

    def draw_preview_line(self, points: Sequence[MapPoint], style: Dict[str, Any]) -> None:
        ...

    def extend_preview_line(self, point: MapPoint) -> None:
        ...

    def remove_preview_line(self) -> None:
        ...

    def draw_candidate(self, points: Sequence[MapPoint], style: Dict[str, Any]) -> None:
        ...

    def remove_candidate(self) -> None:
        ...

    def show_zones(self, zones: List[Dict[str, Any]]) -> None:
        ...

    def set_interactions(self, dragging: bool, double_click_zoom: bool) -> None:
        ...

    def set_cursor(self, cursor: str) -> None:
        ...
