"""Functions for reading bearer tokens from client requests."""

import base64
import binascii
import json
import logging
from typing import Optional, Type, TypeVar

from pydantic import ValidationError

from .domain import AffiliateToken, CampusToken

logger = logging.getLogger(__name__)

SCHEME = 'Bearer'

T = TypeVar('T', CampusToken, AffiliateToken)


def decode_payload(encoded: str, shape: Type[T]) -> Optional[T]:
    """
    Decode a base64-encoded JSON token into ``shape``.

    Parameters
    ----------
    encoded : str
        Base64 text whose decoded bytes are a JSON object.
    shape : type
        Either :class:`.CampusToken` or :class:`.AffiliateToken`.

    Returns
    -------
    :class:`.CampusToken` or :class:`.AffiliateToken` or None
        ``None`` if the value is not base64, not JSON, or not a ``shape``.

    """
    # Token services may strip the trailing padding.
    padded = encoded + '=' * (-len(encoded) % 4)
    try:
        raw = base64.b64decode(padded, validate=True)
        data = json.loads(raw)
        return shape.model_validate(data)
    except (binascii.Error, ValueError, RecursionError, ValidationError) as e:
        # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors;
        # deeply nested JSON exhausts the parser.
        logger.debug('Not a valid %s: %s', shape.__name__, e)
        return None


def decode(header: Optional[str], shape: Type[T]) -> Optional[T]:
    """
    Get a token of ``shape`` from an ``Authorization`` header value.

    The header must look like ``Bearer <base64 JSON>``. Anything else,
    including a missing header, yields ``None``.
    """
    if not header:
        return None
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != SCHEME.lower():
        logger.debug('Authorization header is not a bearer token')
        return None
    return decode_payload(parts[1], shape)
