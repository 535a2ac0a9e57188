from __future__ import annotations

import os

import uvicorn

from moodlog.app.main import app


def run() -> None:
    """Serve the moodlog API; binds to localhost unless HOST says otherwise."""

    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
