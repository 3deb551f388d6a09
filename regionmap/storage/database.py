from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from regionmap.extensions import db
from regionmap.storage.local import SlotStorageError
from regionmap.storage.protocols import SlotStorageGateway


class StorageSlot(db.Model):
    """One named slot holding a serialized snapshot."""

    __tablename__ = "storage_slots"

    name = db.Column(db.String(100), primary_key=True)
    payload = db.Column(db.Text, nullable=False)
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


class DatabaseSlotStorage(SlotStorageGateway):
    """Slot storage backed by the application database. Needs an app context."""

    def read_slot(self, name: str) -> Optional[str]:
        try:
            slot = db.session.get(StorageSlot, name)
        except SQLAlchemyError as exc:
            raise SlotStorageError(f"Unable to read slot {name!r}") from exc
        return slot.payload if slot else None

    def write_slot(self, name: str, payload: str) -> None:
        try:
            slot = db.session.get(StorageSlot, name)
            if slot is None:
                slot = StorageSlot(name=name, payload=payload)
                db.session.add(slot)
            else:
                slot.payload = payload
                slot.updated_at = datetime.now(timezone.utc)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise SlotStorageError(f"Unable to write slot {name!r}") from exc
