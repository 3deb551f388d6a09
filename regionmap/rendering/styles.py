from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Final

from regionmap.domain.regions import LEVEL_REGIONS, LEVEL_SUBREGIONS


class StyleClass(str, Enum):
    DEFAULT = "default"
    HOVERED = "hovered"
    SELECTED = "selected"
    DRAWING_PREVIEW = "drawing-preview"


REGION_STYLE: Final[Dict[str, Any]] = {"color": "#1b4f72", "weight": 2, "fillColor": "#2e86c1", "fillOpacity": 0.12}
REGION_HOVER: Final[Dict[str, Any]] = {"color": "#e74c3c", "weight": 3, "fillColor": "#e74c3c", "fillOpacity": 0.22}
SUBREGION_STYLE: Final[Dict[str, Any]] = {"color": "#5d6d7e", "weight": 1.5, "fillColor": "#85929e", "fillOpacity": 0.08}
SUBREGION_HOVER: Final[Dict[str, Any]] = {"color": "#2980b9", "weight": 2.5, "fillColor": "#2980b9", "fillOpacity": 0.22}
SUBREGION_SELECTED: Final[Dict[str, Any]] = {"color": "#1e8449", "weight": 3, "fillColor": "#27ae60", "fillOpacity": 0.32}

PREVIEW_LINE_STYLE: Final[Dict[str, Any]] = {"color": "#e74c3c", "weight": 3, "dashArray": "6, 4", "fillOpacity": 0}
CANDIDATE_STYLE: Final[Dict[str, Any]] = {"color": "#e74c3c", "weight": 2, "fillColor": "#e74c3c", "fillOpacity": 0.2}

DRAWING_CURSOR: Final[str] = "crosshair"

_PALETTE: Final[Dict[str, Dict[StyleClass, Dict[str, Any]]]] = {
    LEVEL_REGIONS: {
        StyleClass.DEFAULT: REGION_STYLE,
        StyleClass.HOVERED: REGION_HOVER,
        # Regions are never selected, only drilled into.
        StyleClass.SELECTED: REGION_STYLE,
    },
    LEVEL_SUBREGIONS: {
        StyleClass.DEFAULT: SUBREGION_STYLE,
        StyleClass.HOVERED: SUBREGION_HOVER,
        StyleClass.SELECTED: SUBREGION_SELECTED,
    },
}


def style_for(level: str, style_class: StyleClass) -> Dict[str, Any]:
    """Concrete style properties for a class at a view level (always a copy)."""
    return dict(_PALETTE[level][style_class])


def zone_style(color: str) -> Dict[str, Any]:
    return {"color": color, "weight": 2, "fillColor": color, "fillOpacity": 0.2}
