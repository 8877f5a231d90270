#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Input validation utilities for redmineone.

This module checks caller input before it is used to build a request:
the server URL, identifiers placed into paths, and mandatory create
parameters.

Example::

    from redmineone.validation import validate_url, encode_path_component

    # Validate URLs
    url = validate_url("https://redmine.example.com")

    # Encode path components
    safe_id = encode_path_component("my project")  # "my%20project"
"""
import warnings
from typing import Any, Iterable, Mapping
from urllib.parse import quote, urlparse, urlunparse

from redmineone.exceptions import (
    InvalidParameterError,
    MissingParameterError,
    RedmineValidationError,
)


def validate_url(
    url: str,
    require_https: bool = False,
    warn_http: bool = True,
) -> str:
    """Validate and normalize the server URL.

    :param url: The URL to validate
    :param require_https: Whether to reject plain HTTP (default: False)
    :param warn_http: Whether to warn about HTTP URLs (default: True)

    :return: Validated URL without trailing slash

    :raises RedmineValidationError: If URL is invalid or doesn't meet requirements

    Example::

        from redmineone.validation import validate_url

        url = validate_url("https://redmine.example.com/")
        # "https://redmine.example.com"

        # Local development server
        url = validate_url("http://localhost:3000", warn_http=False)
    """
    if not url or not isinstance(url, str):
        raise RedmineValidationError(
            message="URL cannot be empty",
            field="url",
            value=url,
        )

    url = url.strip()
    parsed = urlparse(url)

    if parsed.scheme:
        if parsed.scheme not in ("http", "https"):
            raise RedmineValidationError(
                message=f"Invalid URL scheme: {parsed.scheme}. Use http or https.",
                field="url",
                value=url,
            )
    else:
        url = f"https://{url}"
        parsed = urlparse(url)

    if parsed.scheme == "http":
        if require_https:
            raise RedmineValidationError(
                message="HTTPS is required. Use require_https=False for development.",
                field="url",
                value=url,
            )
        elif warn_http:
            warnings.warn(
                f"Using HTTP is not recommended for production: {url}",
                UserWarning,
                stacklevel=2,
            )

    if not parsed.netloc:
        raise RedmineValidationError(
            message="URL must include a hostname",
            field="url",
            value=url,
        )

    normalized = urlunparse(parsed)
    return normalized.rstrip("/")


def validate_identifier(
    value: Any,
    method: str,
    argument: str = "projectIdentifier",
) -> Any:
    """Check that an identifier is an int or a string.

    Booleans are rejected even though ``bool`` subclasses ``int``.

    :param value: The identifier
    :param method: Qualified name of the calling operation, used in the message
    :param argument: Argument name, used in the message

    :return: The identifier, unchanged

    :raises InvalidParameterError: If the identifier has another type
    """
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise InvalidParameterError(
            message=f"{method}(): Argument #1 (${argument}) must be of type int or string",
            field=argument,
            value=value,
        )
    return value


def require_params(params: Mapping[str, Any], names: Iterable[str]) -> None:
    """Raise unless every parameter in ``names`` is present and not None.

    :param params: Normalized parameters
    :param names: Mandatory parameter names

    :raises MissingParameterError: If any of them is absent
    """
    names = tuple(names)
    missing = [name for name in names if params.get(name) is None]
    if missing:
        listed = ", ".join(f"`{name}`" for name in names)
        raise MissingParameterError(
            message=f"These parameters are mandatory: {listed}",
            missing=missing,
        )


def encode_path_component(value: Any) -> str:
    """URL-encode a value for use as one path segment.

    :param value: An id, identifier or page title
    :return: The encoded segment; slashes are encoded too
    """
    return quote(str(value), safe="")
