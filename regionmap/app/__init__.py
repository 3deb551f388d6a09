from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask

from regionmap.config import resolve_config
from regionmap.extensions import init_extensions
from regionmap.app.container import register_services


def create_app(config_name: str | None = None, config_overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """Application factory."""
    project_root = Path(__file__).resolve().parents[2]
    app = Flask(
        __name__,
        instance_relative_config=True,
        instance_path=str(project_root / "instance"),
    )

    config_class = resolve_config(config_name or os.getenv("FLASK_ENV"))
    app.config.from_object(config_class)
    if config_overrides:
        app.config.update(config_overrides)
    _configure_logging(app)
    _ensure_instance_dir(app)

    init_extensions(app)
    register_services(app)
    _register_blueprints(app)
    return app


def _register_blueprints(app: Flask) -> None:
    from regionmap.api.view.routes import view_bp
    from regionmap.api.drawing.routes import drawing_bp
    from regionmap.api.selection.routes import selection_bp
    from regionmap.api.zones.routes import zones_bp

    app.register_blueprint(view_bp)
    app.register_blueprint(drawing_bp)
    app.register_blueprint(selection_bp)
    app.register_blueprint(zones_bp)


def _configure_logging(app: Flask) -> None:
    level = app.config.get("LOG_LEVEL", "INFO")
    app.logger.setLevel(level)
    logging.getLogger("regionmap").setLevel(level)


def _ensure_instance_dir(app: Flask) -> None:
    Path(app.instance_path).mkdir(parents=True, exist_ok=True)
