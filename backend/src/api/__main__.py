"""Entry point for running the whitelist API."""

import logging
import os

import uvicorn

from core.config import get_settings

from .main import app

if __name__ == "__main__":
    logging.basicConfig(level=get_settings().log_level.upper())
    host = os.getenv("API_HOST", "0.0.0.0")
    # API_PORT for local dev (.env), PORT for PaaS platforms (Railway, Heroku, etc.)
    port = int(os.getenv("API_PORT") or os.getenv("PORT") or "8000")
    uvicorn.run(app, host=host, port=port)
