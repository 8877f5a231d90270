#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""HTTP client with connection pooling for Redmine API requests.

This module provides the concrete transport behind the resource APIs and
the registry that hands out API instances.

Features:
    - Connection pooling via requests.Session
    - API key or basic authentication
    - User impersonation (administrators only)
    - One shared name resolver for every API of a client
    - Context manager support

Example::

    from redmineone.client import ClientConfig, RedmineClient

    # Using as context manager (recommended)
    with RedmineClient("https://redmine.example.com", api_key="0123abcd") as client:
        issues = client.get_api("issue")
        print(issues.list({"limit": 10}))

    # Basic auth with a custom pool
    config = ClientConfig(pool_connections=20, pool_maxsize=20, timeout=60)
    client = RedmineClient(
        "https://redmine.example.com",
        username="admin",
        password="secret",
        config=config,
    )
"""
from dataclasses import dataclass
from typing import Dict, Optional, Type
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter
from requests.auth import HTTPBasicAuth

from redmineone.attachments import AttachmentApi
from redmineone.base import AbstractApi
from redmineone.exceptions import (
    InvalidParameterError,
    RedmineAPIError,
    RedmineTimeoutError,
    RedmineValidationError,
)
from redmineone.http import HttpClient, Response
from redmineone.issue_categories import IssueCategoryApi
from redmineone.issue_priorities import IssuePriorityApi
from redmineone.issue_statuses import IssueStatusApi
from redmineone.issues import IssueApi
from redmineone.projects import ProjectApi
from redmineone.redmine_logs import add_log, mask_sensitive_string
from redmineone.resolver import ApiListingSource, IdentifierResolver
from redmineone.trackers import TrackerApi
from redmineone.users import UserApi
from redmineone.validation import validate_url
from redmineone.wiki import WikiApi


API_KEY_HEADER = "X-Redmine-API-Key"
IMPERSONATE_HEADER = "X-Redmine-Switch-User"

API_CLASSES: Dict[str, Type[AbstractApi]] = {
    "attachment": AttachmentApi,
    "issue": IssueApi,
    "issue_category": IssueCategoryApi,
    "issue_priority": IssuePriorityApi,
    "issue_status": IssueStatusApi,
    "project": ProjectApi,
    "tracker": TrackerApi,
    "user": UserApi,
    "wiki": WikiApi,
}


@dataclass
class ClientConfig:
    """Configuration for RedmineClient.

    Attributes:
        pool_connections: Number of connection pools to cache (default: 10)
        pool_maxsize: Maximum connections per pool (default: 10)
        timeout: Request timeout in seconds (default: 30)
        verify_ssl: Whether to verify SSL certificates (default: True)
        require_https: Whether to reject plain HTTP server URLs (default: False)
        user_agent: Value of the User-Agent header

    Example::

        config = ClientConfig(pool_maxsize=30, timeout=60)
        client = RedmineClient(url, api_key=key, config=config)
    """

    pool_connections: int = 10
    pool_maxsize: int = 10
    timeout: int = 30
    verify_ssl: bool = True
    require_https: bool = False
    user_agent: str = "redmineone"


class RedmineClient(HttpClient):
    """HTTP client with connection pooling for the Redmine API.

    A failed request is not retried; it surfaces to the caller at once.

    Attributes:
        base_url: The base URL of the Redmine server.
        session: The underlying requests Session.
        resolver: Name resolver shared by every API of this client.

    Example::

        client = RedmineClient("https://redmine.example.com", api_key="0123abcd")

        projects = client.get_api("project")
        projects.archive("old-website")

        # Act as another user
        client.start_impersonate_user("jsmith")
        client.get_api("issue").add_note_to_issue(42, "On it")
        client.stop_impersonate_user()
    """

    def __init__(
        self,
        url: str,
        api_key: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        config: Optional[ClientConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the Redmine client.

        :param url: Base URL of the Redmine server
        :param api_key: API key, sent in the ``X-Redmine-API-Key`` header
        :param username: Login for basic auth (alternative to ``api_key``)
        :param password: Password for basic auth
        :param config: Client configuration
        :param session: Optional existing session to use

        :raises RedmineValidationError: If the URL is invalid
        """
        self.config = config or ClientConfig()
        self.base_url = validate_url(url, require_https=self.config.require_https)
        self._closed = False
        self._apis: Dict[str, AbstractApi] = {}
        self.resolver = IdentifierResolver(ApiListingSource(self.get_api))

        if session:
            self.session = session
        else:
            self.session = self._create_session()

        if api_key:
            self.session.headers.update({API_KEY_HEADER: api_key})
            add_log(f"Using API key {mask_sensitive_string(api_key)}", "debug")
        elif username and password:
            self.session.auth = HTTPBasicAuth(username, password)
        else:
            add_log(
                "No authentication configured. Only public resources are accessible.",
                "debug",
            )

        self.session.headers.update({"User-Agent": self.config.user_agent})

    def _create_session(self) -> requests.Session:
        """Create a new session with connection pooling.

        :return: Configured requests Session
        """
        session = requests.Session()

        adapter = HTTPAdapter(
            pool_connections=self.config.pool_connections,
            pool_maxsize=self.config.pool_maxsize,
            max_retries=0,
        )

        session.mount("https://", adapter)
        session.mount("http://", adapter)

        return session

    def _build_url(self, path: str) -> str:
        """Build full URL from path.

        :param path: API path (e.g., "/issues.json")
        :return: Full URL
        """
        if path.startswith(("http://", "https://")):
            return path
        return urljoin(self.base_url + "/", path.lstrip("/"))

    def get_api(self, name: str) -> AbstractApi:
        """Return the API for a resource kind.

        Instances are created once per client and share its resolver.

        :param name: One of the keys of :data:`API_CLASSES`
        :return: The API instance

        :raises InvalidParameterError: If ``name`` is unknown
        """
        if name not in API_CLASSES:
            raise InvalidParameterError(
                message=f"`{name}` is not a valid api. "
                f"Possible apis are `{'`, `'.join(API_CLASSES)}`",
                field="name",
                value=name,
            )
        if name not in self._apis:
            self._apis[name] = API_CLASSES[name](self, resolver=self.resolver)
        return self._apis[name]

    def start_impersonate_user(self, username: str) -> None:
        """Send the following requests as another user.

        Requires an administrator account.

        :param username: Login of the user to act as
        """
        self.session.headers[IMPERSONATE_HEADER] = username

    def stop_impersonate_user(self) -> None:
        """Send the following requests as the authenticated user again."""
        self.session.headers.pop(IMPERSONATE_HEADER, None)

    def _send(
        self,
        method: str,
        path: str,
        body: bytes,
        content_type: Optional[str],
    ) -> Response:
        """Make an HTTP request.

        :param method: HTTP method (GET, POST, PUT, DELETE)
        :param path: API path or full URL
        :param body: Request body
        :param content_type: Request content type

        :return: The response envelope

        :raises RedmineValidationError: If the client has been closed
        :raises RedmineTimeoutError: If the request times out
        :raises RedmineAPIError: If the connection fails
        """
        if self._closed:
            raise RedmineValidationError(
                message="Client has been closed",
                field="client",
            )

        url = self._build_url(path)
        headers = {"Content-Type": content_type} if content_type else {}

        try:
            response = self.session.request(
                method=method,
                url=url,
                data=body or None,
                headers=headers,
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
            )
        except requests.exceptions.Timeout as e:
            add_log(f"Request timeout: {url}", "error")
            raise RedmineTimeoutError(
                message=f"Request timed out after {self.config.timeout}s",
                timeout=self.config.timeout,
                url=url,
                method=method,
            ) from e
        except requests.exceptions.ConnectionError as e:
            add_log(f"Connection error: {url}", "error")
            raise RedmineAPIError(
                message=f"Connection failed: {e}",
                url=url,
                method=method,
            ) from e

        add_log(f"{method} {url} -> {response.status_code}", "debug")
        return Response(
            status_code=response.status_code,
            content_type=response.headers.get("Content-Type", ""),
            content=response.content,
        )

    def close(self) -> None:
        """Close the session and release connections."""
        if not self._closed:
            self.session.close()
            self._closed = True
            add_log("Client session closed", "debug")

    def __enter__(self) -> "RedmineClient":
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context manager and close session."""
        self.close()

    def __del__(self) -> None:
        """Destructor to ensure session is closed."""
        if hasattr(self, "_closed") and not self._closed:
            self.close()
