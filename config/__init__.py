"""Settings modules, one per APP_ENV, all built on ``config.base``."""

import importlib
import os
from types import ModuleType
from typing import Optional

_ENVIRONMENTS = {
    "dev": "development",
    "development": "development",
    "prod": "production",
    "production": "production",
    "test": "testing",
    "testing": "testing",
}


def get_settings_module(env: Optional[str] = None) -> str:
    """Dotted path of the settings module for ``env`` (or APP_ENV).

    Unrecognised names fall back to development.
    """

    name = (env or os.getenv("APP_ENV") or "development").strip().lower()
    return f"config.{_ENVIRONMENTS.get(name, 'development')}"


def load_settings(module: Optional[str] = None) -> ModuleType:
    return importlib.import_module(module or get_settings_module())
