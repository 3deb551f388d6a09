from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from regionmap.api.responses import error_response, workspace_response
from regionmap.app.container import get_workspace
from regionmap.services import UnknownFeatureError, UnknownRegionError

view_bp = Blueprint("view", __name__)


@view_bp.get("/api/view")
def get_view():
    """Current engine state, without draining pending render commands."""
    workspace = get_workspace()
    return jsonify({"state": workspace.describe()}), 200


@view_bp.post("/api/view/start")
async def start_view():
    """Load and render the top level."""
    workspace = get_workspace()
    try:
        applied = await workspace.start()
        return workspace_response(workspace, applied=applied)
    except Exception as e:
        current_app.logger.error(f"Error loading top level: {e}", exc_info=True)
        return error_response(f"Internal server error: {str(e)}", 500)


@view_bp.post("/api/view/drill")
async def drill_into():
    """Drill into a region and render its sub-regions."""
    data = request.get_json(silent=True) or {}
    region_id = data.get("region_id")
    if region_id is None or str(region_id) == "":
        return error_response("region_id is required", 400)

    workspace = get_workspace()
    try:
        applied = await workspace.drill_into(str(region_id))
        return workspace_response(workspace, applied=applied)
    except UnknownRegionError as e:
        return error_response(str(e), 404)
    except Exception as e:
        current_app.logger.error(f"Error drilling into region {region_id}: {e}", exc_info=True)
        return error_response(f"Internal server error: {str(e)}", 500)


@view_bp.post("/api/view/back")
async def go_back():
    """Return to the top level."""
    workspace = get_workspace()
    try:
        applied = await workspace.go_back()
        return workspace_response(workspace, applied=applied)
    except Exception as e:
        current_app.logger.error(f"Error returning to top level: {e}", exc_info=True)
        return error_response(f"Internal server error: {str(e)}", 500)


@view_bp.post("/api/view/click")
async def click_feature():
    """Click on a rendered feature: drill in at the top level, toggle below it."""
    data = request.get_json(silent=True) or {}
    feature_key = data.get("feature_key")
    if not feature_key:
        return error_response("feature_key is required", 400)

    workspace = get_workspace()
    try:
        handled = await workspace.click(str(feature_key))
        return workspace_response(workspace, handled=handled)
    except (UnknownRegionError, UnknownFeatureError) as e:
        return error_response(str(e), 404)
    except Exception as e:
        current_app.logger.error(f"Error handling click on {feature_key}: {e}", exc_info=True)
        return error_response(f"Internal server error: {str(e)}", 500)


@view_bp.post("/api/view/hover")
def hover_feature():
    """Pointer entered or left a rendered feature."""
    data = request.get_json(silent=True) or {}
    feature_key = data.get("feature_key")
    if not feature_key:
        return error_response("feature_key is required", 400)

    workspace = get_workspace()
    workspace.hover(str(feature_key), entered=bool(data.get("entered", True)))
    return workspace_response(workspace)


@view_bp.post("/api/view/escape")
async def escape():
    """Keyboard escape: cancel drawing work, otherwise go back one level."""
    workspace = get_workspace()
    try:
        handled = await workspace.escape()
        return workspace_response(workspace, handled=handled)
    except Exception as e:
        current_app.logger.error(f"Error handling escape: {e}", exc_info=True)
        return error_response(f"Internal server error: {str(e)}", 500)
