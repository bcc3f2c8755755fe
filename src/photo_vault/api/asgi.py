"""ASGI entrypoint for the photo vault API."""

from photo_vault.api.app import create_app
from photo_vault.containers import build_container

app = create_app(build_container())
