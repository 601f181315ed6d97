"""ASGI entrypoint for the Calorics engine API."""

from calorics.api.app import create_app
from calorics.containers import build_container

app = create_app(build_container())
