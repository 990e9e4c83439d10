"""ASGI entrypoint: ``uvicorn diet_tracker.api.asgi:app``."""

from diet_tracker.api.app import create_app
from diet_tracker.config import Settings
from diet_tracker.containers import build_container

settings = Settings()
app = create_app(build_container(settings))
