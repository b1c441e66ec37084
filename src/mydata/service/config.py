# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Service configuration read from environment variables.

Routes and the repository factory receive a :class:`Settings` instance
instead of reading ``os.environ`` directly.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel

DEFAULT_CORS = "GET,POST,PUT,DELETE"


class Settings(BaseModel):
    """Typed view of the service environment.

    Attributes:
        repository: Repository backend name ("filesystem", "document", "memory")
        host: Public host name, used to build ``Location`` headers
        port: Service port
        config_path: Directory holding auxiliary config files (``cors`` etc.)
        fs_location: Directory of the filesystem backend ("default" = ./data)
        document_url: Document database endpoint (``sqlite:///<dir>``)
        db_name: Document database name
        load_timeout: Seconds to wait for a namespace load (None = no limit)
        log_level: Level applied to the ``mydata`` logger
    """

    repository: str = "filesystem"
    host: str = "localhost"
    port: int = 4242
    config_path: str = "/etc/config"
    fs_location: str = "default"
    document_url: str = "sqlite:///data"
    db_name: str = "MyData"
    load_timeout: float | None = None
    log_level: str = "INFO"

    def cors_methods(self) -> str:
        """Return allowed CORS methods from ``<config_path>/cors`` if present."""
        cors_file = Path(self.config_path) / "cors"
        if cors_file.is_file():
            methods = cors_file.read_text(encoding="utf-8")
            return ",".join(m.strip() for m in methods.split(",") if m.strip())
        return DEFAULT_CORS


@lru_cache
def load_settings() -> Settings:
    """Read the current environment and build a Settings instance."""

    def _int(value: str | None, default: int) -> int:
        try:
            return int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return default

    def _float(value: str | None) -> float | None:
        try:
            return float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None

    return Settings(
        repository=os.getenv("REPOSITORY", "filesystem"),
        host=os.getenv("HOST", "localhost"),
        port=_int(os.getenv("PORT"), 4242),
        config_path=os.getenv("CONFIG_PATH", "/etc/config"),
        fs_location=os.getenv("FS_LOCATION", "default"),
        document_url=os.getenv("DOCUMENT_URL", "sqlite:///data"),
        db_name=os.getenv("DB_NAME", "MyData"),
        load_timeout=_float(os.getenv("LOAD_TIMEOUT")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
