"""
IIIF Authentication delegate for an image server.

The image server asks the delegate, for every request, whether the client
may see the requested item in full, only at a reduced ("degraded")
resolution, or not at all. The delegate answers in the image server's
pre-authorization vocabulary:

- ``true``: serve the request;
- ``false``: 403 Forbidden;
- ``{"status_code": 302, "scale_numerator": n, "scale_denominator": d}``:
  redirect to the degraded tier;
- ``{"status_code": 401, "challenge": "Bearer charset=\\"UTF-8\\""}``:
  ask the client to authenticate.

For description resources (``info.json``) the delegate may also supply an
IIIF Auth 1.0 cookie service description, telling the client where to get
the cookie and access token that grant elevated access.

The decision depends on the item's access mode, which comes from an external
access-mode service, and on the credentials the client presents: a bearer
token in the ``Authorization`` header for description resources, and
cookies (checked against a token service) for image content. The delegate
does not issue credentials, keep sessions or cache decisions.

See :mod:`hauth_delegate.engine` for the decision rules.
"""
