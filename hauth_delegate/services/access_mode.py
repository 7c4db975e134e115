"""
Integration with the access-mode service.

The access-mode service classifies each item as open, tiered or
all-or-nothing. An item it has never heard of (HTTP 404) is treated as open
so that newly ingested items are viewable before they are catalogued. Any
other failure is treated as all-or-nothing: when we cannot tell whether an
item is restricted, we restrict it.
"""

import logging
from typing import Any, Dict
from urllib.parse import quote, urlsplit, urlunsplit

import requests

from ..domain import AccessMode
from ..settings import Settings

logger = logging.getLogger(__name__)

ACCESS_MODE_KEY = 'accessMode'


class AccessModeServiceSession(object):
    """An HTTP session with the access-mode service."""

    def __init__(self, endpoint: str, timeout: float = 10.0) -> None:
        """Create a new HTTP session."""
        self.endpoint = endpoint
        self.timeout = timeout
        self._session = requests.Session()
        self._adapter = requests.adapters.HTTPAdapter(max_retries=0)
        self._session.mount('http://', self._adapter)
        self._session.mount('https://', self._adapter)

    def url_for(self, identifier: str) -> str:
        """Append ``identifier`` to the endpoint as a single path segment."""
        parts = urlsplit(self.endpoint)
        path = f"{parts.path.rstrip('/')}/{quote(identifier, safe='')}"
        return urlunsplit(parts._replace(path=path))

    def resolve(self, identifier: str) -> AccessMode:
        """
        Get the access mode of an item.

        Parameters
        ----------
        identifier : str
            The image server's identifier for the item.

        Returns
        -------
        :class:`.AccessMode`
            Never raises; lookup failures yield
            :attr:`.AccessMode.ALL_OR_NOTHING`.

        """
        url = self.url_for(identifier)
        logger.debug('GET %s', url)
        try:
            response = self._session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error('Access mode lookup for %s failed: %s', identifier, e)
            return AccessMode.ALL_OR_NOTHING

        if response.status_code == requests.codes.not_found:
            logger.debug('%s is unknown to the access mode service', identifier)
            return AccessMode.OPEN
        if response.status_code != requests.codes.ok:
            logger.error('Access mode lookup for %s failed with status %i: %s',
                         identifier, response.status_code, response.text)
            return AccessMode.ALL_OR_NOTHING

        try:
            data: Dict[str, Any] = response.json()
            mode = AccessMode(data[ACCESS_MODE_KEY])
        except (ValueError, KeyError, TypeError) as e:
            logger.error('Access mode for %s could not be read: %r',
                         identifier, e)
            return AccessMode.ALL_OR_NOTHING
        logger.debug('%s has access mode %s', identifier, mode.value)
        return mode

    def close(self) -> None:
        self._session.close()


def get_session(settings: Settings) -> AccessModeServiceSession:
    """Create a new access-mode session from the delegate settings."""
    return AccessModeServiceSession(settings.access_service,
                                    settings.timeout)
