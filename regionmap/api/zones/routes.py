from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from regionmap.api.responses import error_response, workspace_response
from regionmap.app.container import get_workspace
from regionmap.services import ZoneRepositoryError

zones_bp = Blueprint("zones", __name__)


@zones_bp.get("/api/zones")
def list_zones():
    """List zones, optionally only those drawn inside one region."""
    repository = get_workspace().zones
    parent_id = request.args.get("parent_id")
    zones = repository.for_parent(parent_id) if parent_id else repository.all()
    return jsonify({"zones": [zone.to_frontend_json() for zone in zones]}), 200


@zones_bp.delete("/api/zones/<zone_id>")
def delete_zone(zone_id: str):
    workspace = get_workspace()
    try:
        zone = workspace.remove_zone(zone_id)
    except ZoneRepositoryError as e:
        current_app.logger.error(f"Error deleting zone {zone_id}: {e}", exc_info=True)
        return error_response(str(e), 500)
    if zone is None:
        return error_response(f"Zone {zone_id} not found.", 404)
    return workspace_response(workspace)


@zones_bp.delete("/api/zones")
def clear_zones():
    workspace = get_workspace()
    try:
        cleared = workspace.clear_zones()
    except ZoneRepositoryError as e:
        current_app.logger.error(f"Error clearing zones: {e}", exc_info=True)
        return error_response(str(e), 500)
    return workspace_response(workspace, cleared=cleared)
