"""
Integration with the token services that validate access cookies.

Both token services answer a cookie-bearing ``GET`` with an IIIF access token
response whose ``accessToken`` is itself a base64-encoded JSON token. The
client's ``X-Forwarded-For`` header is passed along so that the token service
sees the client's address rather than ours.

Every failure counts as an invalid cookie.
"""

import logging
from typing import Any, Dict, Optional, Type

import requests

from .. import tokens
from ..domain import AffiliateToken, CampusToken
from ..settings import Settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = 'accessToken'


class CookieValidationSession(object):
    """An HTTP session with the campus and affiliate token services."""

    def __init__(self, campus_endpoint: str, affiliate_endpoint: str,
                 timeout: float = 10.0) -> None:
        """Create a new HTTP session."""
        self.campus_endpoint = campus_endpoint
        self.affiliate_endpoint = affiliate_endpoint
        self.timeout = timeout
        self._session = requests.Session()
        self._adapter = requests.adapters.HTTPAdapter(max_retries=0)
        self._session.mount('http://', self._adapter)
        self._session.mount('https://', self._adapter)

    def validate_campus_network(self, cookie_header: Optional[str],
                                forwarded_for: Optional[str] = None) -> bool:
        """Check whether cookies prove the client is on the campus network."""
        return self._validate(self.campus_endpoint, CampusToken,
                              cookie_header, forwarded_for)

    def validate_affiliate(self, cookie_header: Optional[str],
                           forwarded_for: Optional[str] = None) -> bool:
        """Check whether cookies prove the client is an affiliate."""
        return self._validate(self.affiliate_endpoint, AffiliateToken,
                              cookie_header, forwarded_for)

    def _validate(self, endpoint: str,
                  shape: Type[tokens.T],
                  cookie_header: Optional[str],
                  forwarded_for: Optional[str]) -> bool:
        if not cookie_header:
            logger.debug('No cookies to validate')
            return False

        headers = {'Cookie': cookie_header}
        if forwarded_for:
            headers['X-Forwarded-For'] = forwarded_for

        logger.debug('GET %s', endpoint)
        try:
            response = self._session.get(endpoint, headers=headers,
                                         timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error('Cookie validation at %s failed: %s', endpoint, e)
            return False
        if not response.ok:
            logger.error('Cookie validation at %s failed with status %i',
                         endpoint, response.status_code)
            return False

        try:
            data: Dict[str, Any] = response.json()
            encoded = data[ACCESS_TOKEN_KEY]
        except (ValueError, KeyError, TypeError) as e:
            logger.error('Token service at %s sent no access token: %r',
                         endpoint, e)
            return False
        if not isinstance(encoded, str):
            logger.error('Token service at %s sent a malformed access token',
                         endpoint)
            return False

        token = tokens.decode_payload(encoded, shape)
        if token is None:
            logger.error('Token service at %s sent an unreadable %s',
                         endpoint, shape.__name__)
            return False
        return token.grants_access

    def close(self) -> None:
        self._session.close()


def get_session(settings: Settings) -> CookieValidationSession:
    """Create a new cookie validation session from the delegate settings."""
    return CookieValidationSession(settings.token_service,
                                   settings.sinai_token_service,
                                   settings.timeout)
