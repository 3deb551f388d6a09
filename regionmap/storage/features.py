from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Dict

from regionmap.domain.regions import TOP_LEVEL_KEY
from regionmap.storage.protocols import FeatureSource


class FeatureSourceError(Exception):
    """Raised when a feature collection cannot be loaded."""


class FileFeatureSource(FeatureSource):
    """
    Reads GeoJSON feature collections from a data directory.

    The top level lives in ``<root>/<regions_filename>``; the children of a
    region live in ``<root>/<subregions_dirname>/<region id>.geojson``.
    """

    def __init__(
        self,
        root: Path,
        regions_filename: str = "provinces.geojson",
        subregions_dirname: str = "counties",
    ) -> None:
        self._root = root
        self._regions_filename = regions_filename
        self._subregions_dirname = subregions_dirname

    def path_for(self, level_key: str) -> Path:
        if level_key == TOP_LEVEL_KEY:
            return self._root / self._regions_filename
        if not level_key or Path(level_key).name != level_key:
            raise FeatureSourceError(f"Invalid region id: {level_key!r}")
        return self._root / self._subregions_dirname / f"{level_key}.geojson"

    async def fetch(self, level_key: str) -> Dict[str, Any]:
        path = self.path_for(level_key)
        return await asyncio.to_thread(self._read_collection, path)

    @staticmethod
    def _read_collection(path: Path) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as exc:
            raise FeatureSourceError(f"No feature data at {path}") from exc
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
            raise FeatureSourceError(f"Failed to read features from {path}: {exc}") from exc

        if not isinstance(data, dict) or not isinstance(data.get("features"), list):
            raise FeatureSourceError(f"{path} is not a GeoJSON FeatureCollection.")
        return data
