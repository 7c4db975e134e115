"""Defines access-control concepts for the IIIF auth delegate."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool
from werkzeug.datastructures import Headers


class AccessMode(Enum):
    """
    The policy governing how much of an item is visible without credentials.

    See https://iiif.io/api/auth/1.0/#interaction-with-access-controlled-resources
    """

    OPEN = 'OPEN'
    """No restrictions."""

    TIERED = 'TIERED'
    """A degraded tier is public; full resolution requires a credential."""

    ALL_OR_NOTHING = 'ALL_OR_NOTHING'
    """Full access with a valid credential, otherwise none."""


class RequestKind(Enum):
    """The kind of resource a request is for."""

    INFORMATION = 'INFORMATION'
    """The description resource (``info.json``)."""

    IMAGE = 'IMAGE'
    """Image content."""

    @classmethod
    def from_uri(cls, request_uri: str) -> 'RequestKind':
        """Classify a request by the URI reported by the image server."""
        if request_uri.endswith('info.json'):
            return cls.INFORMATION
        return cls.IMAGE


class ScaleConstraint(NamedTuple):
    """A resolution-reduction ratio, e.g. ``1:2`` for half size."""

    numerator: int
    denominator: int

    @property
    def is_full_resolution(self) -> bool:
        """A full-resolution request has the degenerate ratio ``n:n``."""
        return self.numerator == self.denominator

    def __str__(self) -> str:
        """Return this constraint as a :-delimited string."""
        return f'{self.numerator}:{self.denominator}'

    @classmethod
    def parse(cls, value: str) -> 'ScaleConstraint':
        """
        Parse a configured ``numerator:denominator`` string.

        Parameters
        ----------
        value : str

        Returns
        -------
        :class:`.ScaleConstraint`

        Raises
        ------
        ValueError
            If ``value`` is not two positive integers separated by a colon, or
            if the numerator is not smaller than the denominator.

        """
        parts = value.strip().split(':')
        if len(parts) != 2 or not all(part.isdigit() for part in parts):
            raise ValueError(f'Not a scale constraint: {value!r}')
        numerator, denominator = (int(part) for part in parts)
        if numerator < 1:
            raise ValueError(f'Scale constraint must be positive: {value!r}')
        if numerator >= denominator:
            raise ValueError(
                f'Scale constraint numerator must be smaller than its'
                f' denominator: {value!r}'
            )
        return cls(numerator, denominator)


FULL_RESOLUTION = ScaleConstraint(1, 1)


class CampusToken(BaseModel):
    """An access token issued to clients on the campus network."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    version: str
    """Version of the service that issued the token."""

    campus_network: StrictBool = Field(alias='campus-network')
    """Whether the client IP was on the campus network."""

    @property
    def grants_access(self) -> bool:
        return self.campus_network


class AffiliateToken(BaseModel):
    """An access token issued to authenticated affiliates."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    version: str
    """Version of the service that issued the token."""

    affiliate: StrictBool = Field(alias='sinaiAffiliate')
    """Whether the bearer proved affiliation."""

    @property
    def grants_access(self) -> bool:
        return self.affiliate


Token = Union[CampusToken, AffiliateToken]


class RequestContext(NamedTuple):
    """The parts of an image server request that bear on authorization."""

    identifier: str
    """Identifier of the requested item."""

    request_kind: RequestKind

    requested_scale: ScaleConstraint = FULL_RESOLUTION
    """Scale constraint of the request; ``1:1`` for full resolution."""

    authorization_header: Optional[str] = None
    cookie_header: Optional[str] = None
    forwarded_for_header: Optional[str] = None

    @classmethod
    def from_delegate_context(cls, context: Mapping[str, Any]) \
            -> 'RequestContext':
        """
        Build a request context from an image server delegate context.

        Parameters
        ----------
        context : dict
            Must contain ``identifier`` and ``request_uri``. May contain
            ``scale_constraint`` (a two-element list) and ``request_headers``.

        Returns
        -------
        :class:`.RequestContext`

        Raises
        ------
        ValueError
            If a required key is missing or a value has the wrong shape.

        """
        try:
            identifier = context['identifier']
            request_uri = context['request_uri']
        except KeyError as e:
            raise ValueError(f'Delegate context lacks {e}') from e
        if not isinstance(identifier, str) or not identifier:
            raise ValueError('Identifier must be a non-empty string')
        if not isinstance(request_uri, str):
            raise ValueError('Request URI must be a string')

        raw_scale = context.get('scale_constraint')
        if raw_scale is None:
            raw_scale = [1, 1]
        if (not isinstance(raw_scale, (list, tuple)) or len(raw_scale) != 2
                or not all(type(n) is int for n in raw_scale)):
            raise ValueError(f'Bad scale constraint: {raw_scale!r}')
        numerator, denominator = raw_scale

        raw_headers = context.get('request_headers')
        if raw_headers is None:
            raw_headers = {}
        if not isinstance(raw_headers, Mapping):
            raise ValueError(f'Bad request headers: {raw_headers!r}')
        # Header names are lowercased by the image server under HTTP/2.
        headers = Headers(dict(raw_headers))
        return cls(
            identifier=identifier,
            request_kind=RequestKind.from_uri(request_uri),
            requested_scale=ScaleConstraint(numerator, denominator),
            authorization_header=headers.get('Authorization'),
            cookie_header=headers.get('Cookie'),
            forwarded_for_header=headers.get('X-Forwarded-For'),
        )


WWW_AUTHENTICATE = 'Bearer charset="UTF-8"'
"""Value of the ``WWW-Authenticate`` header sent with a challenge."""


@dataclass(frozen=True)
class Allow:
    """Serve the request."""

    def to_delegate_response(self) -> bool:
        return True


@dataclass(frozen=True)
class Deny:
    """Refuse the request (HTTP 403)."""

    def to_delegate_response(self) -> bool:
        return False


@dataclass(frozen=True)
class Redirect:
    """Send the client to the degraded tier (HTTP 302)."""

    numerator: int
    denominator: int

    def to_delegate_response(self) -> dict:
        return {
            'status_code': 302,
            'scale_numerator': self.numerator,
            'scale_denominator': self.denominator,
        }


@dataclass(frozen=True)
class Challenge:
    """Ask the client to authenticate (HTTP 401)."""

    www_authenticate: str = WWW_AUTHENTICATE

    def to_delegate_response(self) -> dict:
        return {'status_code': 401, 'challenge': self.www_authenticate}


Decision = Union[Allow, Deny, Redirect, Challenge]


class EngineState(NamedTuple):
    """
    What the decision step learned about a single request.

    Returned by :meth:`.AuthorizationEngine.decide` and handed back to
    :meth:`.AuthorizationEngine.auxiliary_service_metadata` when the
    description resource for the same request is assembled.
    """

    mode: AccessMode
    """The access mode resolved for the requested item."""

    needs_auth_service_metadata: bool = False
    """Whether the description resource must advertise the auth services."""
