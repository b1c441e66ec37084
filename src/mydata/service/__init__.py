# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Service submodule wiring configuration, repository selection and HTTP routes.

Exports:
    create_app: Builds the FastAPI application around a repository
    RepositoryFactory: Creates the configured repository backend
    Settings: Typed service configuration
    load_settings: Reads Settings from environment variables
"""

from .app import create_app
from .config import Settings, load_settings
from .factory import RepositoryFactory, RepositoryFactoryError

__all__ = [
    "RepositoryFactory",
    "RepositoryFactoryError",
    "Settings",
    "create_app",
    "load_settings",
]
