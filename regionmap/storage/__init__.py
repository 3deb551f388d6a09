from regionmap.storage.features import FeatureSourceError, FileFeatureSource
from regionmap.storage.local import LocalSlotStorage, SlotStorageError
from regionmap.storage.protocols import FeatureSource, SlotStorageGateway

__all__ = [
    "FeatureSource",
    "FeatureSourceError",
    "FileFeatureSource",
    "LocalSlotStorage",
    "SlotStorageError",
    "SlotStorageGateway",
]
