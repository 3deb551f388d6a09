from __future__ import annotations

from typing import Any

from flask import jsonify

from regionmap.services import MapWorkspace


def workspace_response(workspace: MapWorkspace, status: int = 200, **extra: Any):
    """Engine state plus the render commands and notices produced so far."""
    body = {
        "state": workspace.describe(),
        "commands": workspace.surface.drain(),
        "notices": workspace.drain_notices(),
        **extra,
    }
    return jsonify(body), status


def error_response(message: str, status: int):
    return jsonify({"message": message}), status
