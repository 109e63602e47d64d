"""ASGI entrypoint: ``uvicorn users_service.main:app``."""

import os

import uvicorn

from .core.app_factory import create_application

app = create_application()


def run() -> None:
    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "3000"))
    uvicorn.run(app, host=host, port=port)


__all__ = ("app", "run")
