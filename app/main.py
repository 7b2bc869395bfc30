from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from packmap.errors import MissingEntryError
from packmap.logging_utils import maybe_enable_json_logging, set_request_id
from packmap.manifest import ManifestCache
from packmap.metrics import export_prometheus
from packmap.settings import PackSettings, get_settings


logger = logging.getLogger("packmap.app")


def get_manifest(request: Request) -> ManifestCache:
    """FastAPI dependency returning the manifest owned by the running app."""
    return request.app.state.manifest


def register_exception_handlers(target: FastAPI) -> None:
    async def missing_entry_handler(request: Request, exc: MissingEntryError):
        logger.error("Missing manifest entry %s", exc.key)
        return JSONResponse(
            status_code=500,
            content={
                "ok": False,
                "error": "missing_manifest_entry",
                "key": exc.key,
                "manifest_path": str(exc.manifest_path),
                "detail": str(exc),
                "request_id": request.headers.get("x-request-id") or "",
            },
        )

    target.add_exception_handler(MissingEntryError, missing_entry_handler)


def create_app(
    settings: Optional[PackSettings] = None,
    manifest: Optional[ManifestCache] = None,
) -> FastAPI:
    maybe_enable_json_logging()

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        owned = manifest is None
        instance = manifest or ManifestCache(settings or get_settings())
        application.state.manifest = instance
        logger.info("Manifest %s (%s)", instance.manifest_path, instance.policy.value)
        try:
            yield
        finally:
            if owned:
                instance.close()

    application = FastAPI(title="Pack Manifest", lifespan=lifespan)
    register_exception_handlers(application)

    @application.middleware("http")
    async def request_id_middleware(request, call_next):
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        set_request_id(rid)
        resp = await call_next(request)
        resp.headers["X-Request-ID"] = rid
        return resp

    @application.get("/metrics", include_in_schema=False)
    def metrics():
        return PlainTextResponse(export_prometheus(), media_type="text/plain; version=0.0.4")

    return application
