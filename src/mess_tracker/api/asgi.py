"""ASGI entrypoint for the mess tracker API."""

from mess_tracker.api.app import create_app
from mess_tracker.containers import build_container

app = create_app(build_container())
