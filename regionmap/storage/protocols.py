from __future__ import annotations

from typing import Any, Dict, Optional, Protocol


class SlotStorageGateway(Protocol):
    """Durable key/value storage holding one serialized payload per named slot."""

    def read_slot(self, name: str) -> Optional[str]:
        ...

    def write_slot(self, name: str, payload: str) -> None:
        ...


class FeatureSource(Protocol):
    """Asynchronous source of GeoJSON feature collections keyed by level."""

    async def fetch(self, level_key: str) -> Dict[str, Any]:
        ...
