"""Delegate endpoints called by the image server."""

import logging
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import BadRequest

from .domain import RequestContext
from .engine import AuthorizationEngine
from .iiif import ServiceDescriptionBuilder
from .services import access_mode, cookies

logger = logging.getLogger(__name__)

blueprint = Blueprint('delegate', __name__, url_prefix='')


@blueprint.route('/status', methods=['GET'])
def status():
    """Report that the service is up."""
    return jsonify({'status': 'ok'})


@blueprint.route('/delegate/pre-authorize', methods=['POST'])
def pre_authorize():
    """
    Authorize a request received by the image server.

    The body is the image server's delegate context. The response carries
    the authorization result and, for description resources, the keys to
    add to ``info.json``. Both come from the same engine state.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        logger.error('Delegate context is not a JSON object')
        raise BadRequest('Delegate context must be a JSON object')
    try:
        context = RequestContext.from_delegate_context(payload)
    except ValueError as e:
        logger.error('Malformed delegate context: %s', e)
        raise BadRequest(str(e)) from e

    settings = current_app.extensions['hauth_delegate']
    access_modes = access_mode.get_session(settings)
    cookie_validation = cookies.get_session(settings)
    try:
        engine = AuthorizationEngine(access_modes, cookie_validation,
                                     ServiceDescriptionBuilder(settings),
                                     settings.scale_constraint)
        decision, state = engine.decide(context)
        extra_keys: Dict[str, Any] = \
            engine.extra_information_response_keys(state)
    finally:
        access_modes.close()
        cookie_validation.close()

    return jsonify({
        'authorized': decision.to_delegate_response(),
        'extra_information_response_keys': extra_keys,
    })
