"""
Run the API under uvicorn.

    passreset-serve
    python -m passreset.serve
"""

from __future__ import annotations

import uvicorn

from passreset.settings import Settings, get_settings


def main(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    uvicorn.run(
        "passreset.main:app",
        host=settings.http_host,
        port=settings.http_port,
        log_level=settings.log_level.lower(),
        # passreset.logging owns the handlers
        log_config=None,
    )


if __name__ == "__main__":
    main()
