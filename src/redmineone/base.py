#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Base class shared by the resource APIs.

:class:`AbstractApi` owns the request plumbing every resource needs:
sending through the transport, remembering the last response, handing
replies to the classifier and resolving names to ids.

Example::

    from redmineone.base import AbstractApi

    class NewsApi(AbstractApi):
        def list(self, params=None):
            return self._retrieve_data("/news.json", params)
"""
import warnings
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from redmineone.exceptions import InvalidParameterError
from redmineone.http import HttpClient, Response, call_failed
from redmineone.params import FieldSpec, encoding_hints, sanitize_params
from redmineone.redmine_logs import add_log
from redmineone.resolver import ApiListingSource, IdentifierResolver
from redmineone.response import (
    Classification,
    Expect,
    classify,
    unwrap_legacy,
    unwrap_strict,
)
from redmineone.serializer import build_path, encode_json, encode_xml


class AbstractApi:
    """Common base of the resource APIs.

    :param client: Transport used for every request
    :param resolver: Name resolver; APIs obtained from
        :meth:`redmineone.client.RedmineClient.get_api` share the client's.
        Without one, the API builds its own, listing through sibling APIs
        on the same transport.

    :raises InvalidParameterError: If ``client`` is not an :class:`HttpClient`
    """

    # Resolver kind whose listing this API provides, if any
    kind: Optional[str] = None

    def __init__(
        self,
        client: HttpClient,
        resolver: Optional[IdentifierResolver] = None,
    ) -> None:
        if not isinstance(client, HttpClient):
            raise InvalidParameterError(
                message=f"{type(self).__name__}.__init__(): Argument #1 ($client) "
                f"must be of type HttpClient, `{type(client).__name__}` given",
                field="client",
                value=client,
            )
        self.client = client
        self.last_response: Optional[Response] = None
        self._siblings: Dict[str, "AbstractApi"] = {}
        self.resolver = resolver or IdentifierResolver(
            ApiListingSource(self._api_for_kind)
        )

    def _api_for_kind(self, kind: str) -> "AbstractApi":
        """Return the API listing ``kind``, sharing this API's transport and resolver."""
        from redmineone.client import API_CLASSES

        api_class = API_CLASSES[kind]
        if isinstance(self, api_class):
            return self
        if kind not in self._siblings:
            self._siblings[kind] = api_class(self.client, resolver=self.resolver)
        return self._siblings[kind]

    # -------------------------------------------------------------------------
    # Last response
    # -------------------------------------------------------------------------

    def last_call_failed(self) -> bool:
        """Return True unless the last call of this API answered 200 or 201.

        An API that has not sent anything yet reports a failure.
        """
        if self.last_response is None:
            return True
        return call_failed(self.last_response.status_code)

    def get_last_response(self) -> Response:
        """Return the last response of this API, or an empty envelope."""
        return self.last_response or Response(status_code=0)

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------

    def _send(
        self,
        method: str,
        path: str,
        body: Union[bytes, str] = b"",
        content_type: Optional[str] = None,
    ) -> Response:
        add_log(f"{method} {path}", "debug")
        self.last_response = self.client.send(method, path, body, content_type)
        return self.last_response

    def _request(
        self,
        method: str,
        path: str,
        body: Union[bytes, str] = b"",
        expect: str = Expect.ANY,
        legacy: bool = False,
        content_type: Optional[str] = None,
    ) -> Classification:
        response = self._send(method, path, body, content_type)
        return classify(response, expect, legacy)

    def _get(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        expect: str = Expect.ANY,
    ) -> Any:
        """GET a path and return the decoded body, ``False`` if empty."""
        return unwrap_legacy(
            self._request("GET", build_path(path, params), expect=expect, legacy=True)
        )

    def _retrieve_data(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """GET a collection, raising on anything but a decoded mapping or list.

        ``offset`` and ``limit`` in ``params`` are passed through as is.

        :raises UnexpectedResponseError: If the reply is rejected
        """
        return unwrap_strict(
            self._request("GET", build_path(path, params), expect=Expect.COLLECTION)
        )

    def _retrieve_all(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """GET a collection, returning a message or ``False`` on failure."""
        return unwrap_legacy(
            self._request(
                "GET", build_path(path, params), expect=Expect.COLLECTION, legacy=True
            )
        )

    def _post(
        self,
        path: str,
        body: Union[bytes, str],
        content_type: Optional[str] = None,
    ) -> Any:
        return unwrap_legacy(
            self._request("POST", path, body, legacy=True, content_type=content_type)
        )

    def _put(
        self,
        path: str,
        body: Union[bytes, str],
        content_type: Optional[str] = None,
    ) -> Any:
        return unwrap_legacy(
            self._request("PUT", path, body, legacy=True, content_type=content_type)
        )

    def _delete(self, path: str) -> Any:
        return unwrap_legacy(self._request("DELETE", path, legacy=True))

    def _confirm(self, path: str, body: Union[bytes, str] = b"") -> bool:
        """PUT a state change that the server confirms with an empty 204.

        :raises UnexpectedResponseError: On any other status
        """
        return unwrap_strict(self._request("PUT", path, body, expect=Expect.CONFIRMATION))

    # -------------------------------------------------------------------------
    # Bodies
    # -------------------------------------------------------------------------

    @staticmethod
    def _xml(
        tag: str,
        fields: Iterable[FieldSpec],
        params: Optional[Mapping[str, Any]],
    ) -> str:
        """Normalize ``params`` against ``fields`` and encode them as XML."""
        fields = tuple(fields)
        return encode_xml(tag, sanitize_params(fields, params), encoding_hints(fields))

    @staticmethod
    def _json(value: Any) -> str:
        return encode_json(value)

    # -------------------------------------------------------------------------
    # Listings
    # -------------------------------------------------------------------------

    def _listing(
        self,
        force_update: bool = False,
        reverse: bool = True,
        params: Optional[Mapping[str, Any]] = None,
        scope: Any = None,
    ) -> Dict[Any, Any]:
        if reverse:
            return self.resolver.listing(self.kind, force_update, dict(params or {}), scope)
        return self.resolver.id_listing(self.kind, force_update, dict(params or {}), scope)

    def _deprecated(self, old: str, new: str) -> None:
        name = type(self).__name__
        warnings.warn(
            f"`{name}.{old}()` is deprecated, use `{name}.{new}()` instead.",
            DeprecationWarning,
            stacklevel=3,
        )
