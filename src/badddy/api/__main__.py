"""
badddy.api.__main__

Entrypoint for running the backend via `python -m badddy.api` (or `badddy-api`).

Responsibilities:
- Load settings.
- Create the app (refuses to start on missing configuration).
- Start uvicorn with structlog-compatible logging config.
"""

from __future__ import annotations

import uvicorn

from badddy.api.app import create_app
from badddy.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
