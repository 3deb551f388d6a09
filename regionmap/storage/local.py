from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from regionmap.storage.protocols import SlotStorageGateway


class SlotStorageError(Exception):
    """Raised when a storage slot cannot be read or written."""


class LocalSlotStorage(SlotStorageGateway):
    """Stores each slot as ``<root>/<name>.json`` on the local filesystem."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._root.mkdir(parents=True, exist_ok=True)

    def read_slot(self, name: str) -> Optional[str]:
        target = self._resolve(name)
        if not target.exists():
            return None
        try:
            return target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SlotStorageError(f"Unable to read slot {name!r} from {target}") from exc

    def write_slot(self, name: str, payload: str) -> None:
        target = self._resolve(name)
        scratch = target.with_suffix(".json.tmp")
        try:
            with open(scratch, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            scratch.replace(target)
        except OSError as exc:
            raise SlotStorageError(f"Unable to write slot {name!r} to {target}") from exc

    def _resolve(self, name: str) -> Path:
        if not name or Path(name).name != name:
            raise SlotStorageError(f"Invalid slot name: {name!r}")
        return self._root / f"{name}.json"
