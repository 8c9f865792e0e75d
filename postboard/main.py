"""
Postboard - Main entry point.

Runs the HTTP API with uvicorn:

    postboard
    # or
    uvicorn postboard.api.app:app --reload
"""

from __future__ import annotations

import uvicorn

from postboard.config import get_settings


def main():
    """Main entry point."""
    settings = get_settings()
    uvicorn.run(
        "postboard.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug and not settings.is_production,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
