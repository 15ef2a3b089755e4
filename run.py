#!/usr/bin/env python3
"""Run script for eventseries."""

import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "eventseries.api.app:app",
        host=os.getenv("APP_HOST", "0.0.0.0"),
        port=int(os.getenv("APP_PORT", "8000")),
        reload=os.getenv("DEBUG", "False").lower() == "true",
    )
