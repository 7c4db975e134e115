"""
Decides whether a request for an item may be served.

Each item has an access mode (see :class:`.AccessMode`). Requests for open
items are always served. For tiered items, a client without credentials is
sent to a degraded tier (the configured scale constraint), and full
resolution requires either a campus-network bearer token (for the
description resource) or a campus-network cookie (for image content). For
all-or-nothing items the client must present an affiliate token or cookie,
and is otherwise challenged to authenticate.

:meth:`AuthorizationEngine.decide` returns the :class:`.Decision` together
with an :class:`.EngineState`. The state must be passed to
:meth:`AuthorizationEngine.auxiliary_service_metadata` when the description
resource for the same request is built; the engine keeps nothing between
calls, so one instance may serve concurrent requests.

The engine talks to the outside world only through three collaborators,
which makes it easy to substitute fakes:

- ``access_modes`` has ``resolve(identifier) -> AccessMode`` (see
  :class:`.AccessModeServiceSession`);
- ``cookies`` has ``validate_campus_network(cookie_header, forwarded_for)``
  and ``validate_affiliate(cookie_header, forwarded_for)``, both returning
  ``bool`` (see :class:`.CookieValidationSession`);
- ``descriptions`` has ``build(mode) -> dict`` (see
  :class:`.ServiceDescriptionBuilder`).
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from . import tokens
from .domain import (AccessMode, AffiliateToken, Allow, CampusToken,
                     Challenge, Decision, Deny, EngineState, Redirect,
                     RequestContext, RequestKind, ScaleConstraint)
from .iiif import SERVICE_KEY

logger = logging.getLogger(__name__)

Outcome = Tuple[Decision, bool]
"""A decision and whether the description must advertise auth services."""


class AuthorizationEngine(object):
    """Combines access mode, credentials and scale into a decision."""

    def __init__(self, access_modes: Any, cookies: Any, descriptions: Any,
                 scale_constraint: ScaleConstraint) -> None:
        self.access_modes = access_modes
        self.cookies = cookies
        self.descriptions = descriptions
        self.scale_constraint = scale_constraint
        self._policies: Dict[Tuple[AccessMode, RequestKind],
                             Callable[[RequestContext], Outcome]] = {
            (AccessMode.OPEN, RequestKind.INFORMATION): self._open,
            (AccessMode.OPEN, RequestKind.IMAGE): self._open,
            (AccessMode.TIERED, RequestKind.INFORMATION):
                self._tiered_information,
            (AccessMode.TIERED, RequestKind.IMAGE): self._tiered_image,
            (AccessMode.ALL_OR_NOTHING, RequestKind.INFORMATION):
                self._all_or_nothing_information,
            (AccessMode.ALL_OR_NOTHING, RequestKind.IMAGE):
                self._all_or_nothing_image,
        }

    def decide(self, context: RequestContext) \
            -> Tuple[Decision, EngineState]:
        """
        Authorize a request.

        Parameters
        ----------
        context : :class:`.RequestContext`

        Returns
        -------
        tuple
            The :class:`.Decision`, and the :class:`.EngineState` to pass to
            :meth:`auxiliary_service_metadata` for the same request.

        """
        mode = self.access_modes.resolve(context.identifier)
        policy = self._policies[(mode, context.request_kind)]
        decision, needs_metadata = policy(context)
        logger.debug('%s request for %s (%s at %s): %s',
                     context.request_kind.value, context.identifier,
                     mode.value, context.requested_scale, decision)
        return decision, EngineState(mode, needs_metadata)

    def auxiliary_service_metadata(self, state: EngineState) \
            -> Optional[Dict[str, Any]]:
        """Get the auth service description to advertise, if any."""
        if not state.needs_auth_service_metadata \
                or state.mode is AccessMode.OPEN:
            return None
        return self.descriptions.build(state.mode)

    def extra_information_response_keys(self, state: EngineState) \
            -> Dict[str, Any]:
        """Get keys to add to the description resource."""
        description = self.auxiliary_service_metadata(state)
        if description is None:
            return {}
        return {SERVICE_KEY: [description]}

    def _degraded(self) -> Redirect:
        return Redirect(self.scale_constraint.numerator,
                        self.scale_constraint.denominator)

    def _open(self, context: RequestContext) -> Outcome:
        return Allow(), False

    def _tiered_information(self, context: RequestContext) -> Outcome:
        token = tokens.decode(context.authorization_header, CampusToken)
        if token is not None and token.campus_network:
            return Allow(), False
        # The client already has the degraded tier (probably via an earlier
        # redirect); advertise the auth services so it can upgrade.
        if context.requested_scale == self.scale_constraint:
            return Allow(), True
        if not context.requested_scale.is_full_resolution:
            return Deny(), False
        return self._degraded(), False

    def _tiered_image(self, context: RequestContext) -> Outcome:
        if context.requested_scale == self.scale_constraint:
            return Allow(), False
        if not context.requested_scale.is_full_resolution:
            return Challenge(), False
        if self.cookies.validate_campus_network(context.cookie_header,
                                                context.forwarded_for_header):
            return Allow(), False
        return self._degraded(), False

    def _all_or_nothing_information(self, context: RequestContext) \
            -> Outcome:
        token = tokens.decode(context.authorization_header, AffiliateToken)
        if token is not None and token.affiliate:
            return Allow(), False
        return Challenge(), True

    def _all_or_nothing_image(self, context: RequestContext) -> Outcome:
        if self.cookies.validate_affiliate(context.cookie_header,
                                           context.forwarded_for_header):
            return Allow(), False
        return Challenge(), False
