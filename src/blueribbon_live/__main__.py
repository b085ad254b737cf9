"""Run the API server: ``python -m blueribbon_live``."""

from __future__ import annotations

import uvicorn

from blueribbon_live.config.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "blueribbon_live.api.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
