# app.py - builds the FastAPI app around a WebAC store and fails loudly on bad config

import logging
import sys
from typing import Optional

from fastapi import FastAPI

from api.webac import router as webac_router
from config import Settings, get_settings
from core.cache import RoleMapCache
from core.webac import configure_provider

logger = logging.getLogger(__name__)


def create_app(store, settings: Optional[Settings] = None) -> FastAPI:
    """
    Create the API app.

    Args:
        store: Object with a ``session()`` method returning a StoreSession
        settings: Overrides environment settings

    Returns:
        Configured FastAPI app
    """
    if settings is None:
        try:
            settings = get_settings()
        except Exception as e:
            print("=" * 80, file=sys.stderr)
            print("FATAL: Failed to load WebAC configuration", file=sys.stderr)
            print(f"Error: {e}", file=sys.stderr)
            print("=" * 80, file=sys.stderr)
            raise

    cache = None
    if settings.WEBAC_CACHE_ENABLED:
        cache = RoleMapCache(ttl_seconds=settings.WEBAC_CACHE_TTL_SECONDS)

    configure_provider(repository_prefixes=settings.repository_prefixes, cache=cache)

    app = FastAPI(
        title="WebAC Roles",
        version="0.1.0",
        description="Resolves WebAC roles for a hierarchical resource store.",
    )
    app.state.webac_store = store
    app.state.webac_cache = cache
    app.include_router(webac_router)

    @app.get("/health")
    def health():
        return {"ok": True, "cache_enabled": cache is not None}

    logger.info(f"WebAC app ready (cache={'on' if cache else 'off'})")
    return app
