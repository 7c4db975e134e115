"""Application factory for the auth delegate service."""

from typing import Any, Mapping, Optional

from flask import Flask, jsonify
from werkzeug.exceptions import BadRequest, MethodNotAllowed, NotFound

from . import routes, settings
from .app_logging import setup_logger


def jsonify_exception(error):
    exc_resp = error.get_response()
    response = jsonify(reason=error.description)
    response.status_code = exc_resp.status_code
    return response


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    """
    Initialize an instance of the auth delegate service.

    Raises
    ------
    :class:`.settings.ConfigurationError`
        If the service URIs or the scale constraint are missing or invalid.

    """
    app = Flask('hauth_delegate')
    app.config.from_pyfile('config.py')
    if config:
        app.config.update(config)
    setup_logger(app.config['LOGLEVEL'])

    app.extensions['hauth_delegate'] = settings.load(app.config)

    app.register_blueprint(routes.blueprint)
    app.errorhandler(NotFound)(jsonify_exception)
    app.errorhandler(BadRequest)(jsonify_exception)
    app.errorhandler(MethodNotAllowed)(jsonify_exception)
    return app
