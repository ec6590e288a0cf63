#!/usr/bin/env python3
"""
Start script - runs the API (and the Gate.io rate stream) under uvicorn.

Honours the PORT environment variable, falling back to APP_PORT.
"""
import os

from core.config import settings

if __name__ == "__main__":
    port = int(os.getenv("PORT", settings.app_port))

    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.app_host,
        port=port,
        log_level=settings.log_level.lower()
    )
