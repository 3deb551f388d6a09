from __future__ import annotations

import json
import logging
from typing import Iterable, List, Optional, Tuple

from regionmap.domain.zones import Zone, ZoneFormatError
from regionmap.storage.local import SlotStorageError
from regionmap.storage.protocols import SlotStorageGateway

logger = logging.getLogger(__name__)

DEFAULT_ZONES_SLOT = "custom-zones"


class ZoneRepositoryError(Exception):
    """Base exception raised for zone persistence issues."""


class DuplicateZoneError(ZoneRepositoryError):
    """Raised when a zone id is already present."""


class ZoneRepository:
    """
    Owns the user's zones and keeps the storage slot in step with them.

    Each mutation writes the whole collection to the slot before the in-memory
    snapshot is replaced, so a failed write leaves both unchanged.
    """

    def __init__(
        self,
        storage: SlotStorageGateway,
        slot_name: str = DEFAULT_ZONES_SLOT,
        zones: Iterable[Zone] = (),
    ) -> None:
        self._storage = storage
        self._slot_name = slot_name
        self._zones: Tuple[Zone, ...] = tuple(zones)

    @classmethod
    def load(cls, storage: SlotStorageGateway, slot_name: str = DEFAULT_ZONES_SLOT) -> "ZoneRepository":
        """Read the stored snapshot; unreadable or malformed content loads as no zones."""
        try:
            payload = storage.read_slot(slot_name)
        except SlotStorageError as exc:
            logger.warning("Zone storage unreadable, starting empty: %s", exc)
            payload = None

        zones: Tuple[Zone, ...] = ()
        if payload:
            zones = cls.deserialize(payload)
        logger.info("Loaded %d zone(s) from slot %r", len(zones), slot_name)
        return cls(storage, slot_name, zones)

    def all(self) -> Tuple[Zone, ...]:
        return self._zones

    def __len__(self) -> int:
        return len(self._zones)

    def get(self, zone_id: str) -> Optional[Zone]:
        for zone in self._zones:
            if zone.id == zone_id:
                return zone
        return None

    def for_parent(self, parent_id: str) -> Tuple[Zone, ...]:
        return tuple(zone for zone in self._zones if zone.parent_id == parent_id)

    def add(self, zone: Zone) -> Zone:
        if self.get(zone.id) is not None:
            raise DuplicateZoneError(f"Zone with id {zone.id} already exists.")
        self._commit(self._zones + (zone,))
        logger.info("Added zone %s (%s)", zone.id, zone.name)
        return zone

    def remove_by_id(self, zone_id: str) -> Optional[Zone]:
        zone = self.get(zone_id)
        if zone is None:
            return None
        self._commit(tuple(z for z in self._zones if z.id != zone_id))
        logger.info("Removed zone %s", zone_id)
        return zone

    def clear(self) -> int:
        count = len(self._zones)
        self._commit(())
        return count

    def serialize(self) -> str:
        return self._dump(self._zones)

    @staticmethod
    def deserialize(payload: str) -> Tuple[Zone, ...]:
        try:
            records = json.loads(payload)
        except (json.JSONDecodeError, TypeError) as exc:
            logger.warning("Stored zones are not valid JSON, ignoring them: %s", exc)
            return ()
        if not isinstance(records, list):
            logger.warning("Stored zones are not a list, ignoring them.")
            return ()

        zones: List[Zone] = []
        seen = set()
        for record in records:
            try:
                zone = Zone.from_storage_json(record)
            except ZoneFormatError as exc:
                logger.warning("Skipping malformed zone record: %s", exc)
                continue
            if zone.id in seen:
                logger.warning("Skipping duplicate zone id %s", zone.id)
                continue
            seen.add(zone.id)
            zones.append(zone)
        return tuple(zones)

    def _commit(self, zones: Tuple[Zone, ...]) -> None:
        try:
            self._storage.write_slot(self._slot_name, self._dump(zones))
        except SlotStorageError as exc:
            logger.error("Failed to persist zones: %s", exc, exc_info=True)
            raise ZoneRepositoryError(f"Failed to save zones: {exc}") from exc
        self._zones = zones

    @staticmethod
    def _dump(zones: Iterable[Zone]) -> str:
        return json.dumps([zone.to_storage_json() for zone in zones], indent=2, ensure_ascii=False)
