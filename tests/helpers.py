from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from regionmap.domain.regions import TOP_LEVEL_KEY
from regionmap.storage.features import FeatureSourceError
from regionmap.storage.local import SlotStorageError

FARS = {"id": 7, "name_fa": "فارس", "name_en": "Fars"}
TEHRAN = {"id": 23, "name_fa": "تهران", "name_en": "Tehran"}

SHIRAZ = {"name_fa": "شیراز", "name_en": "Shiraz"}
MARVDASHT = {"name_fa": "مرودشت", "name_en": "Marvdasht"}
TEHRAN_COUNTY = {"name_fa": "تهران", "name_en": "Tehran"}
REY = {"name_fa": "ری", "name_en": "Rey"}


def square_feature(x0: float, y0: float, size: float = 1.0, **properties: Any) -> Dict[str, Any]:
    ring = [[x0, y0], [x0 + size, y0], [x0 + size, y0 + size], [x0, y0 + size], [x0, y0]]
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": "Polygon", "coordinates": [ring]},
    }


def collection(*features: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "FeatureCollection", "features": list(features)}


def sample_collections() -> Dict[str, Dict[str, Any]]:
    return {
        TOP_LEVEL_KEY: collection(
            square_feature(52.0, 29.0, 2.0, **FARS),
            square_feature(51.0, 35.0, 1.0, **TEHRAN),
            square_feature(60.0, 30.0, 1.0, id=99),
        ),
        "7": collection(
            square_feature(52.0, 29.0, 0.5, **SHIRAZ),
            square_feature(52.5, 29.5, 0.5, **MARVDASHT),
            square_feature(53.0, 30.0, 0.5, name_en="Nameless"),
        ),
        "23": collection(
            square_feature(51.0, 35.0, 0.5, **TEHRAN_COUNTY),
            square_feature(51.5, 35.0, 0.5, **REY),
        ),
    }


def write_dataset(root: Path) -> Path:
    """Write the sample collections as provinces.geojson and counties/<id>.geojson."""
    data = sample_collections()
    (root / "counties").mkdir(parents=True, exist_ok=True)
    with open(root / "provinces.geojson", "w", encoding="utf-8") as f:
        json.dump(data[TOP_LEVEL_KEY], f, ensure_ascii=False)
    for key, value in data.items():
        if key == TOP_LEVEL_KEY:
            continue
        with open(root / "counties" / f"{key}.geojson", "w", encoding="utf-8") as f:
            json.dump(value, f, ensure_ascii=False)
    return root


class MemorySlotStorage:
    """In-memory slot storage with switchable failures."""

    def __init__(self, slots: Optional[Dict[str, str]] = None) -> None:
        self.slots: Dict[str, str] = dict(slots or {})
        self.writes: List[str] = []
        self.fail_reads = False
        self.fail_writes = False

    def read_slot(self, name: str) -> Optional[str]:
        if self.fail_reads:
            raise SlotStorageError("read failed")
        return self.slots.get(name)

    def write_slot(self, name: str, payload: str) -> None:
        if self.fail_writes:
            raise SlotStorageError("disk full")
        self.slots[name] = payload
        self.writes.append(name)


class FakeFeatureSource:
    """Feature source backed by a dict, counting fetches per key."""

    def __init__(self, collections: Optional[Dict[str, Dict[str, Any]]] = None) -> None:
        self.collections = collections if collections is not None else sample_collections()
        self.calls: Dict[str, int] = {}
        self.gates: Dict[str, asyncio.Event] = {}
        self.failing: set[str] = set()
        self.errors: Dict[str, Exception] = {}

    def gate(self, level_key: str) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[level_key] = event
        return event

    async def fetch(self, level_key: str) -> Dict[str, Any]:
        self.calls[level_key] = self.calls.get(level_key, 0) + 1
        gate = self.gates.get(level_key)
        if gate is not None:
            await gate.wait()
        if level_key in self.errors:
            raise self.errors[level_key]
        if level_key in self.failing:
            raise FeatureSourceError(f"cannot load {level_key}")
        try:
            return json.loads(json.dumps(self.collections[level_key]))
        except KeyError:
            raise FeatureSourceError(f"no data for {level_key}") from None
