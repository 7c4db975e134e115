"""Validated, immutable configuration for the delegate."""

import logging
from typing import Any, Mapping

from pydantic import (BaseModel, ConfigDict, HttpUrl, PositiveFloat,
                      TypeAdapter, ValidationError, field_validator)

from .domain import ScaleConstraint

logger = logging.getLogger(__name__)

REQUIRED = (
    'AUTH_ACCESS_SERVICE',
    'AUTH_COOKIE_SERVICE',
    'AUTH_TOKEN_SERVICE',
    'SINAI_AUTH_TOKEN_SERVICE',
    'TIERED_ACCESS_SCALE_CONSTRAINT',
)


_URL = TypeAdapter(HttpUrl)


class ConfigurationError(RuntimeError):
    """Raised when a required setting is missing or invalid."""


class Settings(BaseModel):
    """Service URIs and policy loaded once at startup."""

    model_config = ConfigDict(frozen=True)

    access_service: str
    """Base URI of the access-mode service; item identifiers are appended."""

    cookie_service: str
    """Campus cookie service advertised to clients."""

    token_service: str
    """Campus token service, advertised and used to validate cookies."""

    sinai_token_service: str
    """Affiliate token service, advertised and used to validate cookies."""

    scale_constraint: ScaleConstraint
    """The degraded tier served for tiered items."""

    timeout: PositiveFloat = 10.0
    """Seconds to wait on any one outbound request."""

    @field_validator('access_service', 'cookie_service', 'token_service',
                     'sinai_token_service')
    @classmethod
    def _check_url(cls, value: str) -> str:
        # Keep the configured text; HttpUrl adds a trailing slash to
        # host-only URIs.
        try:
            _URL.validate_python(value)
        except ValidationError as e:
            raise ValueError(f'Not an HTTP(S) URL: {value!r}') from e
        return value

    @field_validator('scale_constraint', mode='before')
    @classmethod
    def _parse_scale_constraint(cls, value: Any) -> Any:
        if isinstance(value, str):
            return ScaleConstraint.parse(value)
        return value


FIELDS = {
    'AUTH_ACCESS_SERVICE': 'access_service',
    'AUTH_COOKIE_SERVICE': 'cookie_service',
    'AUTH_TOKEN_SERVICE': 'token_service',
    'SINAI_AUTH_TOKEN_SERVICE': 'sinai_token_service',
    'TIERED_ACCESS_SCALE_CONSTRAINT': 'scale_constraint',
    'AUTH_SERVICE_TIMEOUT': 'timeout',
}


def load(config: Mapping[str, Any]) -> Settings:
    """
    Validate raw configuration values, e.g. a Flask ``app.config``.

    Parameters
    ----------
    config : dict
        Keyed by the names in :data:`FIELDS`.

    Returns
    -------
    :class:`.Settings`

    Raises
    ------
    :class:`.ConfigurationError`
        If a required key is missing or any value is invalid.

    """
    missing = [key for key in REQUIRED if not config.get(key)]
    if missing:
        raise ConfigurationError(f'Missing required config: {", ".join(missing)}')

    values = {field: config[key] for key, field in FIELDS.items()
              if config.get(key) is not None}
    try:
        settings = Settings(**values)
    except ValidationError as e:
        names = {field: key for key, field in FIELDS.items()}
        bad = sorted({names.get(str(err['loc'][0]), str(err['loc'][0]))
                      for err in e.errors() if err['loc']})
        raise ConfigurationError(f'Invalid config: {", ".join(bad)}') from e
    logger.debug('Loaded settings; tiered access at %s',
                 settings.scale_constraint)
    return settings
