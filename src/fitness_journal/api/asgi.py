"""ASGI entrypoint for the fitness journal API."""

from fitness_journal.api.app import create_app
from fitness_journal.containers import build_container

app = create_app(build_container())
