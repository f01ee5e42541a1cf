from __future__ import annotations

import json
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Dict, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, Response

from config import settings
from core.lookup import ArchiveLookupService, create_lookup_service
from core.rendering import render_error, render_success
from core.validation import normalize_target
from monitoring.telemetry import configure_logging, generate_request_id

logger = structlog.get_logger(__name__)

lookup_service: Optional[ArchiveLookupService] = None


def get_lookup_service() -> ArchiveLookupService:
    """Return the process-wide lookup service, creating it on first use."""
    global lookup_service
    if lookup_service is None:
        lookup_service = create_lookup_service(settings)
    return lookup_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level, settings.log_format)
    get_lookup_service()
    logger.info("listening", host=settings.host, port=settings.port)
    try:
        yield
    finally:
        if lookup_service is not None:
            await lookup_service.close()


app = FastAPI(title="waybackinator", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=generate_request_id())
    start = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "request_handled",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        ms=int((time.perf_counter() - start) * 1000),
    )
    return response


def _request_target(request: Request) -> str:
    """Return the request target as sent, path and query string."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        path = raw_path.decode("latin-1").split("?", 1)[0]
    else:
        path = request.url.path
    query = request.scope.get("query_string", b"").decode("latin-1")
    return f"{path}?{query}" if query else path


def _format_added(inserted_at: float) -> str:
    added = datetime.fromtimestamp(inserted_at, tz=timezone.utc)
    return added.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@app.get("/health")
async def health() -> Dict[str, str]:
    """Basic health check for service availability."""
    return {"status": "ok"}


@app.get("/stats")
async def stats() -> Dict[str, object]:
    """Return cache statistics and lookup counters."""
    service = get_lookup_service()
    return {
        "cache": service.cache.stats(),
        "lookups": service.metrics.summary(),
    }


async def _lookup_page(request: Request) -> HTMLResponse:
    resolution = await get_lookup_service().lookup(_request_target(request))
    if not resolution.ok:
        return HTMLResponse(render_error(resolution.error), status_code=404)
    return HTMLResponse(render_success(resolution.archive_url))


@app.get("/cache")
async def cache_dump(request: Request) -> Response:
    """Return every resident cache entry, expired or not."""
    if normalize_target(_request_target(request)) != "cache":
        # ``/cache?x=1`` is an ordinary (implausible) lookup.
        return await _lookup_page(request)
    entries = get_lookup_service().cache.dump()
    body = {
        key: {"url": entry["value"], "added": _format_added(entry["inserted_at"])}
        for key, entry in entries.items()
    }
    return Response(content=json.dumps(body, indent=2), media_type="application/json")


@app.get("/{target:path}", response_class=HTMLResponse)
async def archive_lookup(target: str, request: Request) -> HTMLResponse:
    # ``target`` is decoded and loses the query string; the raw target is the key.
    return await _lookup_page(request)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
