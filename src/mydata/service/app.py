# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""HTTP routes exposing a repository as a REST service.

Routes:
    GET    /config                      service configuration
    GET    /etc/config/{name}           comma-separated config file as a list
    GET    /{namespace}/dataset         all records of a namespace
    POST   /{namespace}/data            create a record (201 + Location)
    PUT    /{namespace}/data/{data_id}  create (201) or replace (200) a record
    DELETE /{namespace}/data/{data_id}  delete a record (200, or 404)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from mydata.exceptions import InvalidNamespaceError, NotReadyError, StorageError
from mydata.repositories import ID_FIELD, Repository
from mydata.repositories.base import validate_namespace

from .config import Settings, load_settings
from .factory import RepositoryFactory

logger = logging.getLogger(__name__)

_ALLOWED_HEADERS = ["content-type", "access-control-allow-origin"]


async def _json_body(request: Request) -> dict[str, Any]:
    """Return the request's JSON object body or reject the request with 400."""
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type != "application/json" and not content_type.endswith("+json"):
        raise HTTPException(status_code=400, detail="Expecting JSON content type")
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Malformed JSON body") from None
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Expecting a JSON object")
    return body


def create_app(
    repository: Repository | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the service application.

    Args:
        repository: Repository to serve.  When omitted it is created from
                    *settings* and closed on application shutdown.
        settings: Service settings.  Defaults to :func:`load_settings`.
    """
    settings = settings or load_settings()
    logging.getLogger("mydata").setLevel(settings.log_level)

    repo = repository or RepositoryFactory.create(settings)
    owns_repository = repository is None

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "MyData service starting with repository '%s' on port %d",
            settings.repository,
            settings.port,
        )
        yield
        if owns_repository:
            await repo.close()

    app = FastAPI(title="MyData Service", lifespan=lifespan)
    app.state.repository = repo
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=settings.cors_methods().split(","),
        allow_headers=_ALLOWED_HEADERS,
    )

    # ── error mapping ────────────────────────────────────────

    @app.exception_handler(InvalidNamespaceError)
    async def invalid_namespace(request: Request, exc: InvalidNamespaceError) -> Response:
        return PlainTextResponse(str(exc), status_code=400)

    @app.exception_handler(NotReadyError)
    async def not_ready(request: Request, exc: NotReadyError) -> Response:
        return PlainTextResponse(str(exc), status_code=503)

    @app.exception_handler(StorageError)
    async def storage_failed(request: Request, exc: StorageError) -> Response:
        return PlainTextResponse(str(exc), status_code=500)

    # ── configuration ────────────────────────────────────────

    @app.get("/config")
    async def get_config() -> dict[str, Any]:
        return settings.model_dump()

    @app.get("/etc/config/{name}")
    async def get_config_file(name: str) -> dict[str, list[str]]:
        validate_namespace(name)
        config_file = Path(settings.config_path) / name
        try:
            content = await asyncio.to_thread(config_file.read_text, encoding="utf-8")
        except FileNotFoundError:
            raise HTTPException(status_code=404, detail=f"Config '{name}' not found") from None
        return {name: content.split(",")}

    # ── data ─────────────────────────────────────────────────

    @app.get("/{namespace}/dataset")
    async def get_dataset(namespace: str) -> list[dict[str, Any]]:
        logger.info("Getting all data objects %s...", namespace)
        return await repo.read(namespace)

    @app.post("/{namespace}/data", status_code=201)
    async def post_data(namespace: str, request: Request) -> Response:
        data = await _json_body(request)
        logger.info("Creating new data object within dataset %s...", namespace)
        identifier = await repo.create(namespace, data)
        return JSONResponse(
            {ID_FIELD: identifier},
            status_code=201,
            headers={"Location": f"http://{settings.host}/{namespace}/data/{identifier}"},
        )

    @app.put("/{namespace}/data/{data_id}")
    async def put_data(namespace: str, data_id: str, request: Request) -> Response:
        data = await _json_body(request)
        logger.info("Updating the %s dataset...", namespace)
        created = await repo.update(namespace, data_id, data)
        return Response(status_code=201 if created else 200)

    @app.delete("/{namespace}/data/{data_id}")
    async def delete_data(namespace: str, data_id: str) -> Response:
        logger.info("Delete data object with id:%s in dataset %s", data_id, namespace)
        if not await repo.delete(namespace, data_id):
            return PlainTextResponse(f"Object '{data_id}' not found", status_code=404)
        return Response(status_code=200)

    return app
