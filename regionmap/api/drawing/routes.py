from __future__ import annotations

from flask import Blueprint, current_app, request

from regionmap.api.responses import error_response, workspace_response
from regionmap.app.container import get_workspace
from regionmap.domain.geometry import MapPoint
from regionmap.services import ZoneRepositoryError
from regionmap.services.workspace import POINTER_EVENTS

drawing_bp = Blueprint("drawing", __name__)


@drawing_bp.post("/api/drawing/mode")
def set_drawing_mode():
    """Switch freehand drawing mode on or off."""
    data = request.get_json(silent=True) or {}
    enabled = data.get("enabled")
    if not isinstance(enabled, bool):
        return error_response("enabled must be a boolean", 400)

    workspace = get_workspace()
    workspace.set_drawing_mode(enabled)
    return workspace_response(workspace)


@drawing_bp.post("/api/drawing/pointer")
def pointer_event():
    """Forward a pointer event in projected map coordinates."""
    data = request.get_json(silent=True) or {}
    phase = data.get("phase")
    if phase not in POINTER_EVENTS:
        return error_response("phase must be one of: down, move, up", 400)

    point = None
    if phase != "up" or "x" in data or "y" in data:
        try:
            point = MapPoint.from_json(data)
        except (KeyError, ValueError, TypeError) as e:
            return error_response(f"Invalid coordinates: {e}", 400)

    workspace = get_workspace()
    workspace.pointer(phase, point, on_overlay=bool(data.get("on_overlay", False)))
    return workspace_response(workspace)


@drawing_bp.post("/api/drawing/confirm")
def confirm_zone():
    """Name the pending candidate polygon and save it as a zone."""
    data = request.get_json(silent=True) or {}
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        return error_response("A non-empty zone name is required.", 400)

    workspace = get_workspace()
    try:
        zone = workspace.submit_zone_name(name)
    except ZoneRepositoryError as e:
        current_app.logger.error(f"Error saving zone: {e}", exc_info=True)
        return error_response(str(e), 500)
    if zone is None:
        return error_response("No candidate polygon is awaiting a name.", 409)

    current_app.logger.info(f"Zone {zone.id} saved as {zone.name!r}")
    return workspace_response(workspace, 201, zone=zone.to_frontend_json())


@drawing_bp.post("/api/drawing/cancel")
def cancel_candidate():
    """Close the naming dialog and discard the candidate polygon."""
    workspace = get_workspace()
    handled = workspace.dismiss_candidate()
    return workspace_response(workspace, handled=handled)


@drawing_bp.post("/api/drawing/detach")
def detach_surface():
    """The client map went away: drop any gesture or candidate and release the map."""
    workspace = get_workspace()
    workspace.close()
    current_app.logger.info("Map surface detached, drawing mode released")
    return workspace_response(workspace)
