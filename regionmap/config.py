from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Type


class Config:
    """Base application configuration."""

    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me")
    SQLALCHEMY_DATABASE_URI: str = os.getenv(
        "DATABASE_URL",
        os.getenv(
            "SQLALCHEMY_DATABASE_URI",
            "sqlite:///regionmap.db",
        ),
    )
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False

    # Geographic datasets
    DATA_DIR: Path = Path(os.getenv("REGIONMAP_DATA_DIR", "data"))
    REGIONS_FILENAME: str = os.getenv("REGIONMAP_REGIONS_FILENAME", "provinces.geojson")
    SUBREGIONS_DIRNAME: str = os.getenv("REGIONMAP_SUBREGIONS_DIRNAME", "counties")

    # Zone persistence: "file" or "database"
    ZONE_STORAGE: str = os.getenv("REGIONMAP_ZONE_STORAGE", "file")
    ZONE_STORAGE_DIR: Path = Path(os.getenv("REGIONMAP_ZONE_STORAGE_DIR", "instance/storage"))
    ZONES_SLOT: str = os.getenv("REGIONMAP_ZONES_SLOT", "custom-zones")

    SIMPLIFY_EPSILON: float = float(os.getenv("REGIONMAP_SIMPLIFY_EPSILON", "0.001"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


class DevelopmentConfig(Config):
    DEBUG: bool = True
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG")


class ProductionConfig(Config):
    DEBUG: bool = False


class TestingConfig(Config):
    TESTING: bool = True
    SQLALCHEMY_DATABASE_URI: str = "sqlite://"
    LOG_LEVEL: str = "WARNING"


CONFIG_MAP: Dict[str, Type[Config]] = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": Config,
}


def resolve_config(config_name: str | None) -> Type[Config]:
    """Return the configuration class for the given name."""
    if not config_name:
        return CONFIG_MAP["default"]
    return CONFIG_MAP.get(config_name, CONFIG_MAP["default"])
