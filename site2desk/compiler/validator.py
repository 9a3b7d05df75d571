"""Structural validation of build configurations.

Validation is deliberately permissive: only the URL and the two identifying
fields are checked.  Every other field is defaulted by ``BuildConfig``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union
from urllib.parse import urlsplit

from pydantic import ValidationError

from site2desk.errors import (
    ConfigValidationError,
    InvalidUrlError,
    MissingRequiredFieldError,
)

from .models import BuildConfig, ValidatedConfig


def is_absolute_url(url: str) -> bool:
    """Return ``True`` if *url* has a scheme and something to point at.

    ``https://example.com`` and ``file:///tmp/index.html`` pass; ``example.com``,
    ``not-a-url`` and ``https://`` do not.
    """
    if not url:
        return False
    try:
        parts = urlsplit(url)
        # Accessing .port validates the port component.
        parts.port
    except ValueError:
        return False
    if not parts.scheme or not parts.scheme[0].isalpha():
        return False
    if parts.netloc:
        return True
    # Schemes such as file:, data: and about: carry no network location.
    return bool(parts.path)


def validate_config(raw: Union[BuildConfig, Mapping[str, Any]]) -> ValidatedConfig:
    """Validate a raw configuration and return a ``ValidatedConfig``.

    Args:
        raw: A ``BuildConfig`` or the mapping it would be built from (for
            example a freshly parsed JSON record).

    Returns:
        The validated configuration.  The input is never modified.

    Raises:
        InvalidUrlError: ``url`` is not an absolute URL.
        MissingRequiredFieldError: ``name`` or ``appId`` is empty.
        ConfigValidationError: the record could not be read at all.
    """
    if isinstance(raw, BuildConfig):
        data = raw.to_record()
    else:
        data = dict(raw)

    try:
        config = ValidatedConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigValidationError(f"Malformed configuration: {exc}") from exc

    if not is_absolute_url(config.url):
        raise InvalidUrlError(config.url)
    if not config.name.strip():
        raise MissingRequiredFieldError("name")
    if not config.app_id.strip():
        raise MissingRequiredFieldError("appId")
    return config
