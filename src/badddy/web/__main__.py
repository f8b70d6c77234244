"""
badddy.web.__main__

Entrypoint for running the web service via `python -m badddy.web` (or `badddy-web`).
"""

from __future__ import annotations

import uvicorn

from badddy.settings import get_settings
from badddy.web.app import create_web_app


def main() -> None:
    settings = get_settings()
    app = create_web_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.web_host,
        port=settings.web_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
