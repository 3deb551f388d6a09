from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

PRIMARY_NAME_PROPERTY = "name_fa"
SECONDARY_NAME_PROPERTY = "name_en"
ID_PROPERTY = "id"

TOP_LEVEL_KEY = "__top__"

LEVEL_REGIONS = "regions"
LEVEL_SUBREGIONS = "subregions"

KEY_SEPARATOR = "::"


def subregion_key(parent_id: str, child_name: str) -> str:
    """Composite identity of a sub-region within its parent region."""
    return f"{parent_id}{KEY_SEPARATOR}{child_name}"


def feature_properties(feature: Dict[str, Any]) -> Dict[str, Any]:
    props = feature.get("properties")
    return props if isinstance(props, dict) else {}


def feature_name(feature: Dict[str, Any]) -> Optional[str]:
    name = feature_properties(feature).get(PRIMARY_NAME_PROPERTY)
    return name or None


def empty_collection() -> Dict[str, Any]:
    return {"type": "FeatureCollection", "features": []}


def filter_named_features(collection: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``collection`` keeping only features with a primary name."""
    features = [
        feature for feature in collection.get("features") or []
        if isinstance(feature, dict) and feature_name(feature)
    ]
    return {**collection, "type": "FeatureCollection", "features": features}


@dataclass(frozen=True)
class Region:
    """Top level of the browsing hierarchy."""

    id: str
    name_primary: str
    name_secondary: str = ""

    @classmethod
    def from_feature(cls, feature: Dict[str, Any]) -> Optional["Region"]:
        props = feature_properties(feature)
        name = props.get(PRIMARY_NAME_PROPERTY)
        region_id = props.get(ID_PROPERTY)
        if not name or region_id is None:
            return None
        return cls(
            id=str(region_id),
            name_primary=name,
            name_secondary=props.get(SECONDARY_NAME_PROPERTY) or "",
        )

    def to_frontend_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "namePrimary": self.name_primary,
            "nameSecondary": self.name_secondary,
        }


@dataclass(frozen=True)
class SubRegion:
    """Second level of the hierarchy, identified by ``parent_id::name_primary``."""

    name_primary: str
    name_secondary: str
    parent_id: str

    @property
    def key(self) -> str:
        return subregion_key(self.parent_id, self.name_primary)

    @classmethod
    def from_feature(cls, feature: Dict[str, Any], parent_id: str) -> Optional["SubRegion"]:
        props = feature_properties(feature)
        name = props.get(PRIMARY_NAME_PROPERTY)
        if not name:
            return None
        return cls(
            name_primary=name,
            name_secondary=props.get(SECONDARY_NAME_PROPERTY) or "",
            parent_id=parent_id,
        )


@dataclass(frozen=True)
class ViewContext:
    """
    The level being browsed and, below the top level, the parent region.

    Passed explicitly to the data cache and the render adapter instead of
    living in ambient state.
    """

    parent: Optional[Region] = None

    @property
    def level(self) -> str:
        return LEVEL_REGIONS if self.parent is None else LEVEL_SUBREGIONS

    @property
    def level_key(self) -> str:
        return TOP_LEVEL_KEY if self.parent is None else self.parent.id

    @property
    def parent_id(self) -> Optional[str]:
        return self.parent.id if self.parent else None

    @property
    def is_top_level(self) -> bool:
        return self.parent is None

    def feature_key(self, feature: Dict[str, Any]) -> Optional[str]:
        """Identity used by the rendering layer for ``feature`` in this view."""
        if self.parent is None:
            region = Region.from_feature(feature)
            return region.id if region else None
        name = feature_name(feature)
        return subregion_key(self.parent.id, name) if name else None

    def to_frontend_json(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "parent": self.parent.to_frontend_json() if self.parent else None,
        }


def regions_in(collection: Dict[str, Any]) -> List[Region]:
    regions = []
    for feature in collection.get("features") or []:
        region = Region.from_feature(feature)
        if region is not None:
            regions.append(region)
    return regions
