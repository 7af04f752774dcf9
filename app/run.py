"""Programmatic uvicorn entry point.

Usage:
    python -m app.run        # binds 0.0.0.0:$PORT (5001 by default)
    chatty-api               # via pyproject.toml [project.scripts]
"""

import uvicorn

from app.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
