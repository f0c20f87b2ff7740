"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

FastAPI debug endpoints for inspecting and clearing price caches.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from ..cache.registry import CacheRegistry

logger = logging.getLogger("pricekit.debug")


class DebugAppError(RuntimeError):
    """Raised for invalid debug app setup."""


def _stats_payload(registry: CacheRegistry) -> dict[str, Any]:
    return {name: stats.to_dict() for name, stats in registry.stats().items()}


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_debug_app(registry: CacheRegistry, *, title: str = "pricekit-debug"):
    """Create a FastAPI app exposing cache stats and an emergency clear."""
    try:
        from fastapi import FastAPI
        from fastapi.responses import JSONResponse
    except Exception as exc:  # pragma: no cover - optional runtime path
        raise DebugAppError("FastAPI is required to host debug endpoints") from exc

    app = FastAPI(title=title)

    @app.get("/debug/clear-cache")
    async def clear_cache() -> Any:
        try:
            before = _stats_payload(registry)
            registry.clear_all()
            after = _stats_payload(registry)
        except Exception as exc:
            logger.exception("Error clearing caches")
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "error": "Failed to clear caches",
                    "message": str(exc),
                },
            )
        logger.info("Cleared caches: %s", ", ".join(registry.names()))
        return {
            "success": True,
            "message": "All caches cleared successfully",
            "before": before,
            "after": after,
            "timestamp": _timestamp(),
        }

    @app.post("/debug/clear-cache")
    async def cache_stats() -> Any:
        try:
            stats = _stats_payload(registry)
        except Exception as exc:
            logger.exception("Error getting cache stats")
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "error": "Failed to get cache stats",
                    "message": str(exc),
                },
            )
        return {"success": True, "stats": stats, "timestamp": _timestamp()}

    return app
