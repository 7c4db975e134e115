"""Flask configuration for the auth delegate service."""

import os

AUTH_ACCESS_SERVICE = os.environ.get('AUTH_ACCESS_SERVICE')
AUTH_COOKIE_SERVICE = os.environ.get('AUTH_COOKIE_SERVICE')
AUTH_TOKEN_SERVICE = os.environ.get('AUTH_TOKEN_SERVICE')
SINAI_AUTH_TOKEN_SERVICE = os.environ.get('SINAI_AUTH_TOKEN_SERVICE')
TIERED_ACCESS_SCALE_CONSTRAINT = \
    os.environ.get('TIERED_ACCESS_SCALE_CONSTRAINT')

AUTH_SERVICE_TIMEOUT = os.environ.get('AUTH_SERVICE_TIMEOUT', '10')

LOGLEVEL = os.environ.get('LOGLEVEL', 'INFO')
