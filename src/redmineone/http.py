#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Response envelope and transport contract.

Every resource API talks to the server through an :class:`HttpClient`.
The only concrete implementation shipped is
:class:`redmineone.client.RedmineClient`, but tests and callers can plug in
any transport that implements :meth:`HttpClient._send`.

Example::

    from redmineone.http import HttpClient, Response

    class StaticClient(HttpClient):
        def _send(self, method, path, body=b"", content_type=None):
            return Response(200, "application/json", b'{"projects": []}')
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Union

from redmineone.exceptions import InvalidParameterError


# Only these codes count as an unambiguous success for data calls.
SUCCESS_STATUS_CODES = frozenset({200, 201})
# Close/archive/reopen/unarchive answer with an empty 204.
NO_CONTENT_STATUS_CODES = frozenset({204})

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE")


@dataclass(frozen=True)
class Response:
    """An immutable HTTP response envelope.

    Attributes:
        status_code: HTTP status code (0 when no response was received).
        content_type: Value of the Content-Type header.
        content: Raw response body.
    """

    status_code: int
    content_type: str = ""
    content: bytes = b""

    @property
    def text(self) -> str:
        """Return the body decoded as UTF-8."""
        if isinstance(self.content, str):
            return self.content
        return self.content.decode("utf-8", errors="replace")

    @property
    def is_empty(self) -> bool:
        """Return True if the body is empty."""
        return len(self.content) == 0


def call_failed(status_code: int) -> bool:
    """Return True unless ``status_code`` is exactly 200 or 201.

    202 Accepted, 204 No Content and every other code count as a failure.

    :param status_code: The HTTP status code
    :return: Whether the call is considered failed
    """
    return status_code not in SUCCESS_STATUS_CODES


def confirmation_failed(status_code: int) -> bool:
    """Return True unless ``status_code`` is exactly 204.

    :param status_code: The HTTP status code
    :return: Whether the confirmation call is considered failed
    """
    return status_code not in NO_CONTENT_STATUS_CODES


def content_type_for(path: str) -> Optional[str]:
    """Return the request content type implied by a request path.

    :param path: Request path, optionally with a query string
    :return: The content type, or None for paths without a known suffix
    """
    bare = path.split("?", 1)[0]
    if bare.endswith("/uploads.json") or bare == "uploads.json":
        return "application/octet-stream"
    if bare.endswith(".json"):
        return "application/json"
    if bare.endswith(".xml"):
        return "application/xml"
    return None


class HttpClient(ABC):
    """Transport contract consumed by the resource APIs.

    Subclasses implement :meth:`_send`. :meth:`send` remembers the most
    recent envelope so the legacy ``get_last_response_*`` accessors work.
    """

    last_response: Optional[Response] = None

    def send(
        self,
        method: str,
        path: str,
        body: Union[bytes, str] = b"",
        content_type: Optional[str] = None,
    ) -> Response:
        """Send a request and return the response envelope.

        :param method: HTTP method (GET, POST, PUT, DELETE)
        :param path: Request path relative to the server URL
        :param body: Request body
        :param content_type: Request content type; derived from the path
            when omitted
        :return: The response envelope
        :raises InvalidParameterError: If ``method`` is not one of
            :data:`HTTP_METHODS`
        """
        method = method.upper()
        if method not in HTTP_METHODS:
            raise InvalidParameterError(
                message=f"`{method}` is not a supported method. "
                f"Possible methods are `{'`, `'.join(HTTP_METHODS)}`",
                field="method",
                value=method,
            )
        if content_type is None:
            content_type = content_type_for(path)
        if isinstance(body, str):
            body = body.encode("utf-8")
        response = self._send(method, path, body, content_type)
        self.last_response = response
        return response

    @abstractmethod
    def _send(
        self,
        method: str,
        path: str,
        body: bytes,
        content_type: Optional[str],
    ) -> Response:
        """Perform the request. Implemented by concrete transports."""

    def get_last_response_status_code(self) -> int:
        """Return the status code of the last response, or 0."""
        return self.last_response.status_code if self.last_response else 0

    def get_last_response_content_type(self) -> str:
        """Return the content type of the last response, or an empty string."""
        return self.last_response.content_type if self.last_response else ""

    def get_last_response_body(self) -> bytes:
        """Return the raw body of the last response, or an empty body."""
        return self.last_response.content if self.last_response else b""
