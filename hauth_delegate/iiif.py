"""
Auth service descriptions for IIIF description resources.

See https://iiif.io/api/auth/1.0/#service-descriptions
"""

from typing import Any, Dict

from .domain import AccessMode
from .settings import Settings

CONTEXT = 'http://iiif.io/api/auth/1/context.json'
KIOSK_PROFILE = 'http://iiif.io/api/auth/1/kiosk'
EXTERNAL_PROFILE = 'http://iiif.io/api/auth/1/external'
TOKEN_PROFILE = 'http://iiif.io/api/auth/1/token'

# The auth API makes labels optional, but Mirador will not render an
# external service without one.
KIOSK_LABEL = 'internal cookie granting service.'
EXTERNAL_LABEL = 'external authentication required'

SERVICE_KEY = 'service'


class ServiceDescriptionBuilder(object):
    """Builds the cookie service description advertised for an item."""

    def __init__(self, settings: Settings) -> None:
        self.cookie_service = settings.cookie_service
        self.token_service = settings.token_service
        self.sinai_token_service = settings.sinai_token_service

    def build(self, mode: AccessMode) -> Dict[str, Any]:
        """
        Describe how a client may obtain access to an item in ``mode``.

        Raises
        ------
        ValueError
            For :attr:`.AccessMode.OPEN`, which has nothing to advertise.

        """
        if mode is AccessMode.TIERED:
            return {
                '@context': CONTEXT,
                '@id': self.cookie_service,
                'profile': KIOSK_PROFILE,
                'label': KIOSK_LABEL,
                SERVICE_KEY: [_token_service(self.token_service)],
            }
        if mode is AccessMode.ALL_OR_NOTHING:
            # The client authenticates elsewhere, so there is no cookie
            # service to point at.
            return {
                '@context': CONTEXT,
                'profile': EXTERNAL_PROFILE,
                'label': EXTERNAL_LABEL,
                SERVICE_KEY: [_token_service(self.sinai_token_service)],
            }
        raise ValueError(f'No auth services for access mode {mode.value}')


def _token_service(uri: str) -> Dict[str, str]:
    return {'@id': uri, 'profile': TOKEN_PROFILE}
