from __future__ import annotations

import logging
from typing import Dict, List, Optional

from regionmap.domain.regions import subregion_key
from regionmap.domain.selection import SelectionRecord, SelectionSnapshot

logger = logging.getLogger(__name__)


class SelectionStore:
    """
    Tracks the selected sub-regions under ``parent_id::child_name`` keys.

    Every mutation publishes a fresh ``SelectionSnapshot``; snapshots handed out
    earlier never change, so readers holding one always see a consistent view.
    """

    def __init__(self) -> None:
        self._snapshot = SelectionSnapshot()

    @property
    def snapshot(self) -> SelectionSnapshot:
        return self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot)

    def has(self, key: str) -> bool:
        return key in self._snapshot

    def get(self, key: str) -> Optional[SelectionRecord]:
        return self._snapshot.get(key)

    def records(self) -> List[SelectionRecord]:
        return list(self._snapshot.values())

    def toggle(
        self,
        parent_id: str,
        parent_name: str,
        child_name_primary: str,
        child_name_secondary: str = "",
    ) -> bool:
        """Select the sub-region if absent, deselect it if present. Returns the new state."""
        key = subregion_key(parent_id, child_name_primary)
        records = dict(self._snapshot)
        if key in records:
            del records[key]
            selected = False
        else:
            records[key] = SelectionRecord(
                parent_id=parent_id,
                parent_name_primary=parent_name,
                child_name_primary=child_name_primary,
                child_name_secondary=child_name_secondary,
            )
            selected = True
        self._publish(records)
        logger.debug("Toggled %s -> %s", key, "selected" if selected else "cleared")
        return selected

    def remove(self, key: str) -> Optional[SelectionRecord]:
        record = self._snapshot.get(key)
        if record is None:
            return None
        records = dict(self._snapshot)
        del records[key]
        self._publish(records)
        return record

    def clear(self) -> int:
        count = len(self._snapshot)
        if count:
            self._publish({})
        return count

    def count_for_parent(self, parent_id: str) -> int:
        return sum(1 for record in self._snapshot.values() if record.parent_id == parent_id)

    def grouped_by_parent_name(self) -> Dict[str, List[SelectionRecord]]:
        """
        Group records by the parent's display name, in selection order.

        Two parents sharing a display name end up in the same group; summary
        views accept that.
        """
        groups: Dict[str, List[SelectionRecord]] = {}
        for record in self._snapshot.values():
            groups.setdefault(record.parent_name_primary, []).append(record)
        return groups

    def _publish(self, records: Dict[str, SelectionRecord]) -> None:
        self._snapshot = SelectionSnapshot(records)
