#!/usr/bin/env python3
"""Run script for VisualMemory."""

import uvicorn

from visualmemory.config import API_HOST, API_PORT

if __name__ == "__main__":
    uvicorn.run(
        "visualmemory.api.app:app",
        host=API_HOST,
        port=API_PORT,
        reload=True
    )
