"""ASGI entrypoint for the nutrition memory API."""

from nutrition_memory.api.app import create_app
from nutrition_memory.containers import build_container

app = create_app(build_container())
