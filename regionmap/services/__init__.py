from regionmap.services.drawing_session import DrawingSessionController, DrawingState
from regionmap.services.render_sync import RenderSyncAdapter
from regionmap.services.selection_store import SelectionStore
from regionmap.services.spatial_cache import SpatialDataCache
from regionmap.services.workspace import MapWorkspace, UnknownFeatureError, UnknownRegionError, WorkspaceError
from regionmap.services.zone_repository import DuplicateZoneError, ZoneRepository, ZoneRepositoryError

__all__ = [
    "DrawingSessionController",
    "DrawingState",
    "DuplicateZoneError",
    "MapWorkspace",
    "RenderSyncAdapter",
    "SelectionStore",
    "SpatialDataCache",
    "UnknownFeatureError",
    "UnknownRegionError",
    "WorkspaceError",
    "ZoneRepository",
    "ZoneRepositoryError",
]
