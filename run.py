"""
Development server for the sync service.

Usage:
    python run.py

Reads HOST, PORT and DEBUG from the environment or .env (see config.py).
Auto-reload is only enabled in debug mode.
"""

import uvicorn

from devonboard.config import get_settings


def main():
    settings = get_settings()
    log_level = "debug" if settings.debug else "info"

    print(f"Starting {settings.app_name} on http://{settings.host}:{settings.port}")
    print(f"GitHub webhook: http://{settings.host}:{settings.port}/api/webhook/github")

    uvicorn.run(
        "devonboard.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=log_level,
    )


if __name__ == "__main__":
    main()
