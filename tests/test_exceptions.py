#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Unit tests for redmineone.exceptions module."""
import pytest

from redmineone.exceptions import (
    RedmineOneErrors,
    SerializerError,
    RedmineAPIError,
    UnexpectedResponseError,
    RedmineTimeoutError,
    RedmineValidationError,
    MissingParameterError,
    InvalidParameterError,
)
from redmineone.http import Response


class TestRedmineOneErrors:
    """Tests for the base RedmineOneErrors exception."""

    def test_basic_initialization(self):
        """Test basic exception initialization."""
        exc = RedmineOneErrors("value", "Test message")
        assert exc.errors == "value"
        assert exc.messages == "Test message"
        assert str(exc) == "<RedmineOneError: Test message>"

    def test_default_message(self):
        """Test that the category default is used when no message is given."""
        exc = RedmineOneErrors("response")
        assert exc.message == "The Redmine server replied with an unexpected response."

    def test_unknown_category(self):
        """Test the fallback message."""
        assert RedmineOneErrors("wrong").message == "The data being sent is incorrect."


class TestSerializerError:
    """Tests for SerializerError."""

    def test_attributes(self):
        """Test kind and raw payload."""
        exc = SerializerError("bad body", raw=b"{x")
        assert exc.kind == SerializerError.MALFORMED_BODY
        assert exc.raw == b"{x"
        assert str(exc) == "<SerializerError: bad body>"
        assert isinstance(exc, RedmineOneErrors)


class TestUnexpectedResponseError:
    """Tests for UnexpectedResponseError."""

    def test_create_from_response(self):
        """Test the status code message."""
        response = Response(403)
        exc = UnexpectedResponseError.create(response)
        assert exc.status_code == 403
        assert exc.response is response
        assert exc.message == "The Redmine server replied with the status code 403"

    def test_server_message_in_str(self):
        """Test that the server message is shown."""
        exc = UnexpectedResponseError.create(Response(422), server_message="Name is invalid")
        assert "Name is invalid" in str(exc)
        assert "status code 422" in str(exc)

    def test_default_message(self):
        """Test the default message."""
        exc = UnexpectedResponseError()
        assert exc.message == "The Redmine server replied with an unexpected response."

    def test_hierarchy(self):
        """Test the exception hierarchy."""
        exc = UnexpectedResponseError()
        assert isinstance(exc, RedmineAPIError)
        assert isinstance(exc, RedmineOneErrors)


class TestRedmineAPIError:
    """Tests for RedmineAPIError and RedmineTimeoutError."""

    def test_str_with_details(self):
        """Test formatting with status, method and URL."""
        exc = RedmineAPIError(
            "Connection failed",
            status_code=502,
            url="https://redmine.example.com/issues.json",
            method="GET",
        )
        assert str(exc) == (
            "<RedmineAPIError: Connection failed (HTTP 502) "
            "[GET https://redmine.example.com/issues.json]>"
        )

    def test_timeout(self):
        """Test timeout formatting."""
        exc = RedmineTimeoutError(timeout=30)
        assert "timeout: 30s" in str(exc)
        assert isinstance(exc, RedmineAPIError)


class TestValidationErrors:
    """Tests for the validation exceptions."""

    def test_validation_error_field(self):
        """Test the field in the message."""
        exc = RedmineValidationError("URL cannot be empty", field="url")
        assert str(exc) == "<RedmineValidationError: URL cannot be empty (field: url)>"

    def test_missing_parameter(self):
        """Test the missing parameter names."""
        exc = MissingParameterError("These parameters are mandatory", missing=["name"])
        assert exc.missing == ("name",)
        assert exc.field == "name"
        assert isinstance(exc, RedmineValidationError)

    def test_invalid_parameter_is_type_error(self):
        """Test that invalid parameters can be caught as TypeError."""
        with pytest.raises(TypeError):
            raise InvalidParameterError("must be of type int or string")
