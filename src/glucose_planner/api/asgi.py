"""ASGI entrypoint for the glucose planner API."""

from glucose_planner.api.app import create_app
from glucose_planner.containers import build_container

app = create_app(build_container())
