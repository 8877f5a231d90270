#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Classify server replies as success, soft failure or error.

Resource APIs hand every response envelope to :func:`classify` together
with what the call expects back. The resulting :class:`Classification`
is unwrapped in one of two ways:

    * :func:`unwrap_strict` returns the value or raises the structured
      error (``list()``, ``close()``, ...);
    * :func:`unwrap_legacy` returns the value or a message/``False`` in
      its place (the deprecated ``all()`` entry points).

Example::

    from redmineone.http import Response
    from redmineone.response import Expect, classify, unwrap_legacy

    reply = Response(200, "application/json", b'"string"')
    unwrap_legacy(classify(reply, Expect.COLLECTION, legacy=True))
    # 'Could not convert response body into array: "string"'
"""
import json
from dataclasses import dataclass
from typing import Any, Optional

from redmineone.exceptions import SerializerError, UnexpectedResponseError
from redmineone.http import Response, call_failed, confirmation_failed
from redmineone.redmine_logs import add_log
from redmineone.serializer import decode


class Expect:
    """What a call expects back from the server."""

    # List-style data calls: a decoded mapping or list on 200/201
    COLLECTION = "collection"
    # close/reopen/archive/unarchive: an empty 204
    CONFIRMATION = "confirmation"
    # show/create/update/delete: whatever the server sent, decoded
    ANY = "any"
    # Downloads: the raw bytes
    RAW = "raw"


class Outcome:
    SUCCESS = "success"
    SOFT_FAILURE = "soft_failure"
    ERROR = "error"


@dataclass(frozen=True)
class Classification:
    """The verdict on one response.

    Attributes:
        outcome: One of the :class:`Outcome` values.
        value: The usable value on success.
        error: The structured error on failure.
        soft_value: What a legacy caller receives instead of the error.
        response: The classified envelope.
    """

    outcome: str
    value: Any = None
    error: Optional[Exception] = None
    soft_value: Any = None
    response: Optional[Response] = None

    @property
    def ok(self) -> bool:
        """Return True if the outcome is a success."""
        return self.outcome == Outcome.SUCCESS


def extract_server_message(decoded: Any) -> Optional[str]:
    """Return the human-readable message of an error payload.

    Redmine answers validation failures with ``{"errors": [...]}`` (or the
    XML ``<errors type="array">`` equivalent) and some failures with
    ``{"error": "..."}``.

    :param decoded: A decoded response body
    :return: The message, or None if the payload carries none
    """
    if not isinstance(decoded, dict):
        return None
    errors = decoded.get("errors")
    if isinstance(errors, list) and errors:
        return "; ".join(str(error) for error in errors)
    if isinstance(errors, str) and errors:
        return errors
    error = decoded.get("error")
    if error:
        return str(error)
    return None


def _server_message_of(response: Response) -> Optional[str]:
    if response.is_empty:
        return None
    try:
        return extract_server_message(decode(response.content, response.content_type))
    except SerializerError:
        return None


def _attempt(response: Response) -> Any:
    """Decode a collection reply, raising on anything a strict caller rejects."""
    if call_failed(response.status_code):
        raise UnexpectedResponseError.create(
            response, server_message=_server_message_of(response)
        )

    if response.is_empty:
        raise UnexpectedResponseError(
            status_code=response.status_code, response=response
        )

    try:
        value = decode(response.content, response.content_type)
    except SerializerError as e:
        raise UnexpectedResponseError(
            status_code=response.status_code, response=response
        ) from e

    if not isinstance(value, (dict, list)):
        cause = SerializerError(
            message="Could not convert response body into array: " + json.dumps(value),
            raw=value,
        )
        raise UnexpectedResponseError(
            status_code=response.status_code, response=response
        ) from cause

    return value


def _soft_value_of(error: UnexpectedResponseError, response: Response) -> Any:
    if response.is_empty:
        return False
    if isinstance(error.__cause__, SerializerError):
        return error.__cause__.message
    return error.server_message or error.message


def _failure(
    response: Response,
    error: Exception,
    soft_value: Any,
    legacy: bool,
) -> Classification:
    add_log(
        f"Request failed with status {response.status_code}: {error}",
        "warning" if legacy else "error",
    )
    return Classification(
        outcome=Outcome.SOFT_FAILURE if legacy else Outcome.ERROR,
        error=error,
        soft_value=soft_value,
        response=response,
    )


def classify(
    response: Response,
    expect: str = Expect.COLLECTION,
    legacy: bool = False,
) -> Classification:
    """Classify a response against what the call expects.

    :param response: The response envelope
    :param expect: One of the :class:`Expect` values
    :param legacy: Report failures as soft failures instead of errors
    :return: The classification
    """
    if expect == Expect.CONFIRMATION:
        if confirmation_failed(response.status_code):
            error = UnexpectedResponseError.create(
                response, server_message=_server_message_of(response)
            )
            return _failure(response, error, False, legacy)
        return Classification(Outcome.SUCCESS, value=True, response=response)

    if expect == Expect.RAW:
        if call_failed(response.status_code):
            error = UnexpectedResponseError.create(response)
            return _failure(response, error, False, legacy)
        if response.is_empty:
            return Classification(Outcome.SUCCESS, value=False, response=response)
        return Classification(Outcome.SUCCESS, value=response.content, response=response)

    if expect == Expect.ANY:
        if response.is_empty:
            return Classification(Outcome.SUCCESS, value=False, response=response)
        try:
            value = decode(response.content, response.content_type)
        except SerializerError as e:
            return _failure(response, e, e.message, legacy)
        return Classification(Outcome.SUCCESS, value=value, response=response)

    try:
        value = _attempt(response)
    except UnexpectedResponseError as e:
        return _failure(response, e, _soft_value_of(e, response), legacy)
    return Classification(Outcome.SUCCESS, value=value, response=response)


def unwrap_strict(classification: Classification) -> Any:
    """Return the value of a classification or raise its error.

    :param classification: A classification
    :return: The value
    :raises UnexpectedResponseError: If the reply was rejected
    :raises SerializerError: If an ``any`` reply could not be decoded
    """
    if classification.ok:
        return classification.value
    raise classification.error


def unwrap_legacy(classification: Classification) -> Any:
    """Return the value of a classification or its soft replacement.

    :param classification: A classification
    :return: The value, an error message, or False
    """
    if classification.ok:
        return classification.value
    return classification.soft_value
