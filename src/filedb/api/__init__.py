"""HTTP layer: a thin JSON translator in front of the record store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Flask

if TYPE_CHECKING:
    from ..interfaces.store import RecordStore

EXTENSION_KEY = "filedb"


def create_app(store: RecordStore) -> Flask:
    app = Flask(__name__)
    app.extensions[EXTENSION_KEY] = store

    # Blueprints
    from .routes import bp as records_bp

    app.register_blueprint(records_bp)

    return app
