from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import FileResponse

from app.utils.errors import NotFoundError
from app.utils.logging import logger

API_PREFIX = "/api"


def mount_frontend(app: FastAPI, dist_dir: str) -> bool:
    """Serve the prebuilt bundle with an index.html fallback for client-side routes.

    Must be called after every API route is registered: the catch-all matches
    any GET path. Returns False (and registers nothing) when the bundle is missing.
    """
    root = Path(dist_dir).resolve()
    index = root / "index.html"
    if not index.is_file():
        logger.warning(f"Front-end bundle not found at {root}; static fallback disabled")
        return False

    # plain def: path resolution hits the filesystem, so it runs in the threadpool
    @app.get("/{full_path:path}", include_in_schema=False)
    def spa_fallback(full_path: str):
        # Don't intercept API routes
        if f"/{full_path}".startswith(API_PREFIX):
            raise NotFoundError("API endpoint not found")
        if full_path:
            candidate = (root / full_path).resolve()
            if candidate.is_file() and root in candidate.parents:
                return FileResponse(candidate)
        return FileResponse(index)

    logger.info(f"Serving front-end bundle from {root}")
    return True
