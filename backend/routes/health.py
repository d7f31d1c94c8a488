"""Health and readiness check routes."""

import logging

from fastapi import APIRouter, Request

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/ready")
async def ready(request: Request) -> dict:
    """Lightweight readiness check, no external calls."""
    return {"status": "ok", "service": "finance-tracker-api", "commit": request.app.state.config.git_sha}


@router.get("/health")
async def health(request: Request) -> dict:
    """Backend wiring plus cache diagnostics."""
    state = request.app.state
    cache = state.cache
    return {
        "status": "ok",
        "service": "finance-tracker-api",
        "commit": state.config.git_sha,
        "store": state.store.name,
        "identity": state.identity.name,
        "cache": {
            "entries": len(cache),
            "ttl_seconds": cache.ttl_seconds,
            "last_fetch": cache.last_fetch,
        },
    }
