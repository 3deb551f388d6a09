from __future__ import annotations

from pathlib import Path

from flask import current_app

from regionmap.rendering import CommandBufferSurface
from regionmap.services import MapWorkspace, SpatialDataCache, ZoneRepository
from regionmap.storage import FileFeatureSource, LocalSlotStorage
from regionmap.storage.protocols import SlotStorageGateway

WORKSPACE_KEY = "map_workspace"


def register_services(app) -> None:
    """Pre-instantiate the map workspace and store it on the application."""
    with app.app_context():
        workspace = build_workspace()
        app.extensions[WORKSPACE_KEY] = workspace


def build_workspace() -> MapWorkspace:
    """Create a workspace from the current app configuration."""
    config = current_app.config
    source = FileFeatureSource(
        Path(config["DATA_DIR"]).resolve(),
        regions_filename=config["REGIONS_FILENAME"],
        subregions_dirname=config["SUBREGIONS_DIRNAME"],
    )
    repository = ZoneRepository.load(_build_slot_storage(), config["ZONES_SLOT"])
    return MapWorkspace(
        cache=SpatialDataCache(source),
        repository=repository,
        surface=CommandBufferSurface(),
        epsilon=float(config["SIMPLIFY_EPSILON"]),
    )


def _build_slot_storage() -> SlotStorageGateway:
    backend = current_app.config.get("ZONE_STORAGE", "file")
    if backend == "database":
        from regionmap.extensions import db
        from regionmap.storage.database import DatabaseSlotStorage

        db.create_all()
        return DatabaseSlotStorage()

    return LocalSlotStorage(Path(current_app.config["ZONE_STORAGE_DIR"]).resolve())


def get_workspace() -> MapWorkspace:
    """Return the shared workspace instance."""
    workspace = current_app.extensions.get(WORKSPACE_KEY)
    if workspace is None:
        workspace = build_workspace()
        current_app.extensions[WORKSPACE_KEY] = workspace
    return workspace
