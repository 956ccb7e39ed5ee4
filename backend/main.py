# backend/main.py
from __future__ import annotations

import logging
import os

import uvicorn

from spacetime.core.config import settings
from spacetime.main import app  # noqa: F401  (uvicorn "main:app")

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

if __name__ == "__main__":              # pragma: no cover
    uvicorn.run(
        "spacetime.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=False,
    )
