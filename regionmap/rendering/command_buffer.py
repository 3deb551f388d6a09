from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from regionmap.domain.geometry import MapPoint
from regionmap.rendering.protocols import RenderSurface


class CommandBufferSurface(RenderSurface):
    """
    Records render calls as JSON commands for a remote map client.

    The client replays the drained commands in order against its map widget.
    The surface also mirrors the resulting widget state (interaction flags,
    cursor, preview and candidate presence) so it can be inspected.
    """

    def __init__(self) -> None:
        self._commands: List[Dict[str, Any]] = []
        self.dragging_enabled = True
        self.double_click_zoom_enabled = True
        self.cursor = ""
        self.preview_points: Optional[List[MapPoint]] = None
        self.candidate_points: Optional[List[MapPoint]] = None
        self.styles: Dict[str, str] = {}

    def drain(self) -> List[Dict[str, Any]]:
        """Return and forget the commands recorded so far."""
        commands, self._commands = self._commands, []
        return commands

    def peek(self) -> List[Dict[str, Any]]:
        return list(self._commands)

    def show_features(self, level: str, features: List[Dict[str, Any]]) -> None:
        self.styles = {}
        self._record("show_features", level=level, features=features)

    def clear_features(self) -> None:
        self.styles = {}
        self._record("clear_features")

    def apply_style(self, feature_key: str, style_class: str, style: Dict[str, Any]) -> None:
        self.styles[feature_key] = style_class
        self._record("apply_style", featureKey=feature_key, styleClass=style_class, style=style)

    def fit_bounds(self, bounds: Tuple[float, float, float, float], padding: int) -> None:
        self._record("fit_bounds", bounds=list(bounds), padding=padding)

    def draw_preview_line(self, points: Sequence[MapPoint], style: Dict[str, Any]) -> None:
        self.preview_points = list(points)
        self._record("draw_preview_line", points=[p.to_json() for p in points], style=style)

    def extend_preview_line(self, point: MapPoint) -> None:
        if self.preview_points is not None:
            self.preview_points.append(point)
        self._record("extend_preview_line", point=point.to_json())

    def remove_preview_line(self) -> None:
        self.preview_points = None
        self._record("remove_preview_line")

    def draw_candidate(self, points: Sequence[MapPoint], style: Dict[str, Any]) -> None:
        self.candidate_points = list(points)
        self._record("draw_candidate", points=[p.to_json() for p in points], style=style)

    def remove_candidate(self) -> None:
        self.candidate_points = None
        self._record("remove_candidate")

    def show_zones(self, zones: List[Dict[str, Any]]) -> None:
        self._record("show_zones", zones=zones)

    def set_interactions(self, dragging: bool, double_click_zoom: bool) -> None:
        self.dragging_enabled = dragging
        self.double_click_zoom_enabled = double_click_zoom
        self._record("set_interactions", dragging=dragging, doubleClickZoom=double_click_zoom)

    def set_cursor(self, cursor: str) -> None:
        self.cursor = cursor
        self._record("set_cursor", cursor=cursor)

    def _record(self, op: str, **payload: Any) -> None:
        self._commands.append({"op": op, **payload})
