#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Exception classes for redmineone.

This module provides a hierarchy of exception classes for handling
the error conditions met when talking to a Redmine server.

Exception Hierarchy:
    RedmineOneErrors (base)
    ├── SerializerError - a body could not be encoded or decoded
    ├── RedmineAPIError - transport failures
    │   ├── UnexpectedResponseError - status code or body violates the contract
    │   └── RedmineTimeoutError - the request timed out
    └── RedmineValidationError - input validation failures
        ├── MissingParameterError - mandatory create parameters absent
        └── InvalidParameterError - argument of the wrong type
"""
from typing import Any, Optional


class RedmineOneErrors(Exception):
    """Base class for all redmineone exceptions.

    Attributes:
        errors: Error category string.
        messages: Error message string.
    """

    DEFAULT_MESSAGES = {
        "value": "A value is missing or of the wrong type.",
        "serializer": "A body could not be serialized.",
        "response": "The Redmine server replied with an unexpected response.",
    }

    def __init__(
        self,
        errors: str = None,
        messages: str = None,
        *args: Any,
        **kwargs: Any
    ) -> None:
        """Initialize the exception.

        :param errors: Error category (value, serializer, response, wrong)
        :param messages: Custom error message
        :param args: Additional positional arguments
        :param kwargs: Additional keyword arguments
        """
        self.errors = errors
        self.messages = messages
        super().__init__(self.__str__())

    @property
    def message(self) -> str:
        """Return the bare message, falling back to the category default."""
        return self.messages or self.DEFAULT_MESSAGES.get(
            self.errors, "The data being sent is incorrect."
        )

    def __str__(self) -> str:
        """Return the representation of the error messages."""
        return f"<RedmineOneError: {self.message}>"


class SerializerError(RedmineOneErrors):
    """Raised when a payload cannot be converted to or from its wire format.

    Attributes:
        kind: ``malformed_body`` for undecodable payloads or
            ``unserializable`` for values the encoder cannot express.
        raw: The offending payload.

    Example::

        try:
            decode_json(b"{not json")
        except SerializerError as e:
            print(e.kind, e.raw)
    """

    MALFORMED_BODY = "malformed_body"
    UNSERIALIZABLE = "unserializable"

    def __init__(
        self,
        message: str = "Could not serialize the payload",
        kind: str = MALFORMED_BODY,
        raw: Any = None,
    ) -> None:
        """Initialize the serializer error.

        :param message: Error description
        :param kind: Error kind (malformed_body or unserializable)
        :param raw: The payload that failed
        """
        self.kind = kind
        self.raw = raw
        super().__init__("serializer", message)

    def __str__(self) -> str:
        """Return formatted error message."""
        return f"<SerializerError: {self.message}>"


class RedmineAPIError(RedmineOneErrors):
    """Raised when a request to Redmine fails at the transport level.

    Attributes:
        status_code: HTTP status code, when a response was received.
        url: The URL that was requested.
        method: The HTTP method used.
    """

    def __init__(
        self,
        message: str = "API request failed",
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        method: Optional[str] = None,
    ) -> None:
        """Initialize the API error.

        :param message: Error description
        :param status_code: HTTP status code
        :param url: Request URL
        :param method: HTTP method
        """
        self.status_code = status_code
        self.url = url
        self.method = method
        super().__init__("wrong", message)

    def __str__(self) -> str:
        """Return formatted error message."""
        parts = [f"<RedmineAPIError: {self.message}"]
        if self.status_code:
            parts.append(f" (HTTP {self.status_code})")
        if self.method and self.url:
            parts.append(f" [{self.method} {self.url}]")
        parts.append(">")
        return "".join(parts)


class UnexpectedResponseError(RedmineAPIError):
    """Raised when the server's reply violates what a strict call expects.

    Attributes:
        response: The :class:`redmineone.http.Response` envelope.
        server_message: Human-readable message found in the error payload.

    Example::

        try:
            projects.close(5)
        except UnexpectedResponseError as e:
            print(e.status_code, e.server_message)
    """

    def __init__(
        self,
        message: str = "The Redmine server replied with an unexpected response.",
        status_code: Optional[int] = None,
        response: Any = None,
        server_message: Optional[str] = None,
    ) -> None:
        """Initialize the unexpected response error.

        :param message: Error description
        :param status_code: HTTP status code of the response
        :param response: The response envelope
        :param server_message: Message extracted from the payload
        """
        self.response = response
        self.server_message = server_message
        super().__init__(message=message, status_code=status_code)

    @classmethod
    def create(
        cls,
        response: Any,
        message: str = None,
        server_message: Optional[str] = None,
    ) -> "UnexpectedResponseError":
        """Create an exception from a response envelope.

        :param response: The :class:`redmineone.http.Response`
        :param message: Optional custom message
        :param server_message: Message extracted from the payload

        :return: UnexpectedResponseError instance
        """
        return cls(
            message=message or (
                "The Redmine server replied with the status code "
                f"{response.status_code}"
            ),
            status_code=response.status_code,
            response=response,
            server_message=server_message,
        )

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.server_message:
            return f"<UnexpectedResponseError: {self.message} ({self.server_message})>"
        return f"<UnexpectedResponseError: {self.message}>"


class RedmineTimeoutError(RedmineAPIError):
    """Raised when a request times out.

    Example::

        try:
            client.send("GET", "/projects.json")
        except RedmineTimeoutError as e:
            print(f"Request timed out: {e}")
    """

    def __init__(
        self,
        message: str = "Request timed out",
        timeout: Optional[float] = None,
        url: Optional[str] = None,
        method: Optional[str] = None,
    ) -> None:
        """Initialize the timeout error.

        :param message: Error description
        :param timeout: Timeout value in seconds
        :param url: Request URL
        :param method: HTTP method
        """
        self.timeout = timeout
        super().__init__(message=message, url=url, method=method)

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.timeout:
            return f"<RedmineTimeoutError: {self.message} (timeout: {self.timeout}s)>"
        return f"<RedmineTimeoutError: {self.message}>"


class RedmineValidationError(RedmineOneErrors):
    """Raised when input validation fails before any request is sent.

    Example::

        if not url:
            raise RedmineValidationError("URL cannot be empty", field="url")
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Any = None,
    ) -> None:
        """Initialize the validation error.

        :param message: Error description
        :param field: Name of the field that failed validation
        :param value: The invalid value
        """
        self.field = field
        self.value = value
        super().__init__("value", message)

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.field:
            return f"<RedmineValidationError: {self.message} (field: {self.field})>"
        return f"<RedmineValidationError: {self.message}>"


class MissingParameterError(RedmineValidationError):
    """Raised when mandatory parameters of a create call are absent."""

    def __init__(self, message: str = "Missing parameters", missing: tuple = ()) -> None:
        """Initialize the missing parameter error.

        :param message: Error description
        :param missing: Names of the absent parameters
        """
        self.missing = tuple(missing)
        super().__init__(message=message, field=", ".join(self.missing) or None)

    def __str__(self) -> str:
        """Return formatted error message."""
        return f"<MissingParameterError: {self.message}>"


class InvalidParameterError(RedmineValidationError, TypeError):
    """Raised when an argument is outside the accepted type set."""

    def __str__(self) -> str:
        """Return formatted error message."""
        return f"<InvalidParameterError: {self.message}>"
