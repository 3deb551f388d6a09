from __future__ import annotations

from flask import Blueprint, jsonify

from regionmap.api.responses import error_response, workspace_response
from regionmap.app.container import get_workspace

selection_bp = Blueprint("selection", __name__)


@selection_bp.get("/api/selection")
def list_selection():
    """Selected sub-regions, flat and grouped by parent name."""
    store = get_workspace().selection
    groups = [
        {"parentName": parent_name, "records": [r.to_frontend_json() for r in records]}
        for parent_name, records in store.grouped_by_parent_name().items()
    ]
    return jsonify({
        "records": [r.to_frontend_json() for r in store.records()],
        "groups": groups,
    }), 200


@selection_bp.delete("/api/selection/<path:key>")
def remove_selection(key: str):
    workspace = get_workspace()
    if not workspace.remove_selection(key):
        return error_response(f"Selection {key} not found.", 404)
    return workspace_response(workspace)


@selection_bp.delete("/api/selection")
def clear_selection():
    workspace = get_workspace()
    cleared = workspace.clear_selection()
    return workspace_response(workspace, cleared=cleared)
