"""
Domain model for user-authored zones.

Zones are stored in the same record layout the browser client historically
kept in local storage (``type``/``geoJson``/``provinceId`` keys), so snapshots
written by older clients load unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Final, Optional, Tuple

KIND_POLYGON: Final[str] = "polygon"
KIND_LEGACY_CIRCLE: Final[str] = "legacy-circle"

ZONE_KINDS: Final[Tuple[str, ...]] = (KIND_POLYGON, KIND_LEGACY_CIRCLE)

# Storage "type" values for each kind
_STORAGE_TYPES: Final[Dict[str, str]] = {
    KIND_POLYGON: "polygon",
    KIND_LEGACY_CIRCLE: "circle",
}
_KINDS_BY_STORAGE_TYPE: Final[Dict[str, str]] = {v: k for k, v in _STORAGE_TYPES.items()}

_AREA_GEOMETRY_TYPES: Final[set[str]] = {
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
}

ZONE_COLORS: Final[Tuple[str, ...]] = (
    "#e74c3c",
    "#3498db",
    "#2ecc71",
    "#9b59b6",
    "#f39c12",
    "#1abc9c",
    "#e67e22",
    "#34495e",
)


class ZoneFormatError(ValueError):
    """Raised when a zone record does not describe a valid zone."""


def zone_color(existing_count: int) -> str:
    """Pick the palette color for the next zone, round-robin."""
    return ZONE_COLORS[existing_count % len(ZONE_COLORS)]


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Zone:
    """A named, colored shape persisted independently of the region hierarchy."""

    id: str
    name: str
    kind: str
    color: str
    geometry: Dict[str, Any]
    parent_id: Optional[str] = None
    parent_name: Optional[str] = None
    created_at: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise ZoneFormatError("Zone id must be a non-empty string.")
        if not isinstance(self.name, str) or not self.name.strip():
            raise ZoneFormatError("Zone name must not be blank.")
        if self.name != self.name.strip():
            object.__setattr__(self, "name", self.name.strip())
        if not isinstance(self.color, str) or not self.color:
            raise ZoneFormatError("Zone color must be a non-empty string.")
        if self.kind not in ZONE_KINDS:
            raise ZoneFormatError(f"Unknown zone kind: {self.kind!r}")
        if not isinstance(self.geometry, dict):
            raise ZoneFormatError("Zone geometry must be a mapping.")
        if self.parent_name is not None and not isinstance(self.parent_name, str):
            raise ZoneFormatError("Zone parent name must be a string.")
        if not isinstance(self.created_at, str):
            raise ZoneFormatError("Zone timestamp must be a string.")

        if self.kind == KIND_LEGACY_CIRCLE:
            center = self.geometry.get("center")
            radius = self.geometry.get("radius")
            if not isinstance(center, (list, tuple)) or len(center) != 2:
                raise ZoneFormatError("Circle zones need a [lat, lng] center.")
            if not isinstance(radius, (int, float)):
                raise ZoneFormatError("Circle zones need a numeric radius.")
        else:
            inner = self.geometry.get("geometry")
            inner_type = inner.get("type") if isinstance(inner, dict) else None
            if not isinstance(inner_type, str) or inner_type not in _AREA_GEOMETRY_TYPES:
                raise ZoneFormatError("Polygon zones need a polygon or multi-geometry.")

    @property
    def is_legacy_circle(self) -> bool:
        return self.kind == KIND_LEGACY_CIRCLE

    def to_storage_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": _STORAGE_TYPES[self.kind],
            "color": self.color,
            "geoJson": self.geometry,
            "provinceId": self.parent_id,
            "provinceName": self.parent_name,
            "createdAt": self.created_at,
        }

    def to_frontend_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind,
            "color": self.color,
            "geometry": self.geometry,
            "parentId": self.parent_id,
            "parentName": self.parent_name,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_storage_json(cls, data: Dict[str, Any]) -> "Zone":
        if not isinstance(data, dict):
            raise ZoneFormatError("Zone record must be an object.")

        storage_type = data.get("type", "polygon")
        if not isinstance(storage_type, str):
            raise ZoneFormatError(f"Zone type must be a string, got {storage_type!r}")
        kind = _KINDS_BY_STORAGE_TYPE.get(storage_type)
        if kind is None:
            raise ZoneFormatError(f"Unknown zone type: {storage_type!r}")

        parent_id = data.get("provinceId")
        try:
            return cls(
                id=data["id"],
                name=data["name"],
                kind=kind,
                color=data.get("color") or ZONE_COLORS[0],
                geometry=data.get("geoJson"),
                parent_id=str(parent_id) if parent_id is not None else None,
                parent_name=data.get("provinceName"),
                created_at=data.get("createdAt") or "",
            )
        except KeyError as exc:
            raise ZoneFormatError(f"Zone record is missing {exc.args[0]!r}") from exc
