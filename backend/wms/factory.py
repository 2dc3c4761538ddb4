"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from wms.core.config import BaseConfig, ensure_secure, get_config
from wms.core.logger import configure_logging
from wms.core.logger import init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    The signing secret is read once here and handed to the auth components
    through an immutable settings object; a placeholder secret aborts start-up
    outside development and testing.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    ensure_secure(app.config)
    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from wms.core import proxy

    proxy.init_app(app)

    from wms.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from wms.core import cors

    cors.init_app(app)

    from wms.core import auth

    auth.init_app(app)

    from wms.api import init_app as init_api

    init_api(app)

    from wms.core import errors

    errors.init_app(app)

    from wms import cli as app_cli

    app_cli.init_app(app)

    return app
