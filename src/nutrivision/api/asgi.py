"""ASGI entrypoint for the NutriVision API."""

from nutrivision.api.app import create_app
from nutrivision.containers import build_container

app = create_app(build_container())
