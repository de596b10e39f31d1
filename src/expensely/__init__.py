"""Expensely application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .config import BaseConfig, DevConfig, TestConfig

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}

__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app"]


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths in registration order."""

    yield "expensely.blueprints.auth"
    yield "expensely.blueprints.overview"
    yield "expensely.blueprints.expenses"
    yield "expensely.blueprints.analysis"
    yield "expensely.blueprints.chat"
    yield "expensely.blueprints.admin"


def create_app(config_name: str | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_cls = _resolve_config(config_name)
    config_obj = config_cls()
    app.config.from_object(config_obj)
    app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", config_obj.sqlalchemy_engine_options())
    app.config["EXPENSELY_CONFIG"] = config_obj
    app.json.ensure_ascii = False

    # Import lazily so model classes can be imported without touching the engine.
    from . import cli, security
    from .extensions import init_db
    from .logging_config import setup_logging

    setup_logging(config_obj)
    init_db(app)
    security.init_app(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    cli.init_app(app)

    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)
        init_hook = getattr(module, "init_app", None)
        if callable(init_hook):
            init_hook(app)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        name = (exc.name or "error").lower().replace(" ", "_")
        return jsonify({"error": name, "message": exc.description}), exc.code or 500
