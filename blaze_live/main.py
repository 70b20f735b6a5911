# blaze_live/main.py
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from blaze_live.core import config, db
from blaze_live.core.persist import ensure_schema
from blaze_live.routers import live_routes

# ------------ Logging ------------
logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger("blaze_live")


# ------------ Startup / shutdown ------------
@asynccontextmanager
async def lifespan(_: FastAPI):
    if await db.init_engine():
        try:
            await ensure_schema()
        except Exception:
            logger.exception("snapshot schema setup failed; persistence disabled")
            await db.close_engine()
    yield
    await db.close_engine()


# ------------ App ------------
app = FastAPI(
    title="Blaze Live Sports API",
    version="2.0.0",
    docs_url="/docs",
    redoc_url=None,
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


# ------------ Access log middleware ------------
class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        t0 = time.perf_counter()
        try:
            response = await call_next(request)
            status = response.status_code
        except Exception:
            status = 500
            raise
        finally:
            dt = (time.perf_counter() - t0) * 1000
            logger.info(
                "ACCESS %s %s q=%s -> %s in %.1fms",
                request.method,
                request.url.path,
                request.url.query,
                status,
                dt,
            )
        return response


# ------------ Preflight ------------
class PreflightMiddleware(BaseHTTPMiddleware):
    """Answer every OPTIONS with 204 + CORS headers; nothing to route."""

    async def dispatch(self, request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=config.CORS_HEADERS)
        return await call_next(request)


app.add_middleware(AccessLogMiddleware)

# ------------ CORS (open) ------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type"],
    expose_headers=["X-Response-Time", "X-Data-Sources"],
)

# outermost, so browser preflights get 204 before CORSMiddleware sees them
app.add_middleware(PreflightMiddleware)


# ------------ Global error handler ------------
@app.exception_handler(Exception)
async def _unhandled(request: Request, exc: Exception):
    logger.exception("UNHANDLED ERROR: %s %s", request.method, request.url)
    return JSONResponse(status_code=500, content={"error": "internal_error"}, headers=config.CORS_HEADERS)


# ------------ Health & status ------------
@app.get("/health")
async def health():
    return {"ok": True}


@app.get("/status")
async def status():
    agg = live_routes.get_aggregator()
    cache = agg.cache
    return {
        "ok": True,
        "teams": sorted(agg.teams),
        "cacheTtlMs": cache.ttl_ms,
        "cache": cache.stats(),
        "retryAttempts": config.RETRY_ATTEMPTS,
        "httpTimeout": config.HTTP_TIMEOUT,
        "batchDeadline": config.BATCH_DEADLINE_SECONDS,
        "persistence": db.is_enabled(),
    }


# ------------ Mount routers ------------
app.include_router(live_routes.router, prefix="/api")
