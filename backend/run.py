#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Creates the tables of a local SQLite database on first run, then serves the
API with auto-reload.
"""

from pathlib import Path
import sys

# Add backend to path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))

import uvicorn  # noqa: E402

from servicebooking.core.config import settings  # noqa: E402

if __name__ == "__main__":
    if settings.is_sqlite:
        from servicebooking.init_db import init_db

        init_db()
    uvicorn.run(
        "servicebooking.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
