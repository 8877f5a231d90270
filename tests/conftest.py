#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Pytest configuration and shared fixtures for redmineone tests.

This module provides reusable fixtures for testing redmineone components.
"""
import json
from typing import Any, Dict, Generator, List, Optional, Tuple

import pytest
import responses

from redmineone.http import HttpClient, Response


# =============================================================================
# Fake Transport
# =============================================================================

class FakeHttpClient(HttpClient):
    """Transport that replays queued responses and records requests.

    Each recorded request is a ``(method, path, body, content_type)`` tuple
    with the body decoded to text.
    """

    def __init__(self, *replies: Response) -> None:
        self.replies: List[Response] = list(replies)
        self.requests: List[Tuple[str, str, str, Optional[str]]] = []

    def queue(self, status_code: int, content_type: str = "", body: Any = b"") -> None:
        """Queue a reply; dict and list bodies are JSON-encoded."""
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.replies.append(Response(status_code, content_type, body))

    def queue_json(self, data: Any, status_code: int = 200) -> None:
        self.queue(status_code, "application/json", data)

    def _send(self, method, path, body, content_type):
        self.requests.append((method, path, body.decode("utf-8"), content_type))
        if not self.replies:
            raise AssertionError(f"Unexpected request: {method} {path}")
        return self.replies.pop(0)

    @property
    def paths(self) -> List[str]:
        """Return the requested paths in order."""
        return [request[1] for request in self.requests]


@pytest.fixture
def http_client() -> FakeHttpClient:
    """Create an empty fake transport."""
    return FakeHttpClient()


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def base_url() -> str:
    """Provide a test base URL."""
    return "https://redmine.example.com"


@pytest.fixture
def api_key() -> str:
    """Provide a test API key."""
    return "0123456789abcdef0123456789abcdef"


# =============================================================================
# Mock Data Fixtures
# =============================================================================

@pytest.fixture
def sample_projects() -> Dict[str, Any]:
    """Provide a sample project list reply."""
    return {
        "projects": [
            {"id": 1, "name": "Website", "identifier": "website"},
            {"id": 2, "name": "Mobile App", "identifier": "mobile"},
        ],
        "total_count": 2,
        "offset": 0,
        "limit": 25,
    }


@pytest.fixture
def sample_statuses() -> Dict[str, Any]:
    """Provide a sample issue status list reply."""
    return {
        "issue_statuses": [
            {"id": 1, "name": "New", "is_closed": False},
            {"id": 123, "name": "Status Name", "is_closed": False},
            {"id": 5, "name": "Closed", "is_closed": True},
        ]
    }


@pytest.fixture
def sample_trackers() -> Dict[str, Any]:
    """Provide a sample tracker list reply."""
    return {
        "trackers": [
            {"id": 1, "name": "Bug"},
            {"id": 2, "name": "Feature"},
        ]
    }


@pytest.fixture
def sample_users() -> Dict[str, Any]:
    """Provide a sample user list reply."""
    return {
        "users": [
            {"id": 5, "login": "jsmith", "firstname": "John", "lastname": "Smith"},
            {"id": 25, "login": "jdoe", "firstname": "Jane", "lastname": "Doe"},
        ]
    }


@pytest.fixture
def sample_categories() -> Dict[str, Any]:
    """Provide a sample issue category list reply."""
    return {
        "issue_categories": [
            {"id": 7, "name": "Backend", "project": {"id": 1, "name": "Website"}},
            {"id": 8, "name": "Frontend", "project": {"id": 1, "name": "Website"}},
        ]
    }


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture
def client_config():
    """Create a ClientConfig for testing."""
    from redmineone.client import ClientConfig
    return ClientConfig(
        pool_connections=5,
        pool_maxsize=5,
        timeout=10,
    )


@pytest.fixture
def redmine_client(base_url: str, api_key: str, client_config):
    """Create a RedmineClient for testing."""
    from redmineone.client import RedmineClient
    client = RedmineClient(base_url, api_key=api_key, config=client_config)
    yield client
    client.close()


@pytest.fixture
def mocked_responses() -> Generator:
    """Activate the responses mock for HTTP-level tests."""
    with responses.RequestsMock() as rsps:
        yield rsps
