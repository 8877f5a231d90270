#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Integration tests using HTTP mocking with the responses library.

These tests drive the resource APIs through a real RedmineClient session
with mocked HTTP responses.
"""
import json

import pytest
import responses

from redmineone.client import RedmineClient
from redmineone.exceptions import UnexpectedResponseError
from redmineone.resolver import NOT_FOUND


class TestIssueFlows:
    """Issue calls with name resolution over HTTP."""

    def test_create_issue_by_names(
        self, mocked_responses, redmine_client, base_url, api_key, sample_projects, sample_trackers
    ):
        """Test that names are listed, resolved and sent as ids."""
        mocked_responses.add(responses.GET, f"{base_url}/projects.json", json=sample_projects)
        mocked_responses.add(responses.GET, f"{base_url}/trackers.json", json=sample_trackers)
        mocked_responses.add(
            responses.POST,
            f"{base_url}/issues.xml",
            json={"issue": {"id": 42, "subject": "Crash"}},
            status=201,
        )

        issues = redmine_client.get_api("issue")
        result = issues.create({"project": "Mobile App", "tracker": "Feature", "subject": "Crash"})

        assert result == {"issue": {"id": 42, "subject": "Crash"}}
        assert not issues.last_call_failed()

        request = mocked_responses.calls[2].request
        assert request.headers["X-Redmine-API-Key"] == api_key
        assert request.headers["Content-Type"] == "application/xml"
        assert request.body == (
            b'<?xml version="1.0"?>\n<issue><subject>Crash</subject>'
            b"<project_id>2</project_id><tracker_id>2</tracker_id></issue>\n"
        )

    def test_listing_shared_between_apis(
        self, mocked_responses, redmine_client, base_url, sample_projects
    ):
        """Test that one project listing serves every API of the client."""
        mocked_responses.add(responses.GET, f"{base_url}/projects.json", json=sample_projects)

        assert redmine_client.get_api("project").get_id_by_name("Website") == 1
        assert redmine_client.resolver.get_id_by_name("project", "Mobile App") == 2
        assert redmine_client.get_api("project").get_id_by_name("Nope") is NOT_FOUND
        assert len(mocked_responses.calls) == 1

    def test_validation_errors_returned(self, mocked_responses, redmine_client, base_url):
        """Test that a rejected update returns the server's errors."""
        mocked_responses.add(
            responses.PUT,
            f"{base_url}/issues/5.xml",
            json={"errors": ["Subject cannot be blank"]},
            status=422,
        )

        issues = redmine_client.get_api("issue")
        assert issues.update(5, {"subject": ""}) == {"errors": ["Subject cannot be blank"]}
        assert issues.last_call_failed()

    def test_impersonation_header_sent(self, mocked_responses, redmine_client, base_url):
        """Test that notes can be written as another user."""
        mocked_responses.add(responses.PUT, f"{base_url}/issues/5.xml", status=204)
        mocked_responses.add(responses.PUT, f"{base_url}/issues/5.xml", status=204)

        issues = redmine_client.get_api("issue")
        redmine_client.start_impersonate_user("jsmith")
        issues.add_note_to_issue(5, "On it")
        redmine_client.stop_impersonate_user()
        issues.add_note_to_issue(5, "Done")

        assert mocked_responses.calls[0].request.headers["X-Redmine-Switch-User"] == "jsmith"
        assert "X-Redmine-Switch-User" not in mocked_responses.calls[1].request.headers

    def test_upload_and_attach(self, mocked_responses, redmine_client, base_url):
        """Test the two step attachment flow."""
        mocked_responses.add(
            responses.POST,
            f"{base_url}/uploads.json",
            json={"upload": {"token": "7.ed1c"}},
            status=201,
        )
        mocked_responses.add(responses.PUT, f"{base_url}/issues/5.json", status=204)

        reply = redmine_client.get_api("attachment").upload(b"data", {"filename": "a.txt"})
        redmine_client.get_api("issue").attach(5, {
            "token": reply["upload"]["token"],
            "filename": "a.txt",
        })

        upload = mocked_responses.calls[0].request
        assert upload.url == f"{base_url}/uploads.json?filename=a.txt"
        assert upload.headers["Content-Type"] == "application/octet-stream"
        assert upload.body == b"data"

        attach = mocked_responses.calls[1].request
        assert attach.headers["Content-Type"] == "application/json"
        assert json.loads(attach.body) == {
            "issue": {"id": 5, "uploads": [{"token": "7.ed1c", "filename": "a.txt"}]}
        }


class TestProjectFlows:
    """Project calls over HTTP."""

    def test_close_confirmed(self, mocked_responses, redmine_client, base_url):
        """Test that an empty 204 confirms a state change."""
        mocked_responses.add(responses.PUT, f"{base_url}/projects/website/close.xml", status=204)
        assert redmine_client.get_api("project").close("website") is True

    def test_close_forbidden(self, mocked_responses, redmine_client, base_url):
        """Test that a 403 raises with the server's message."""
        mocked_responses.add(
            responses.PUT,
            f"{base_url}/projects/website/close.xml",
            json={"errors": ["You are not authorized"]},
            status=403,
        )

        with pytest.raises(UnexpectedResponseError) as exc_info:
            redmine_client.get_api("project").close("website")

        error = exc_info.value
        assert error.status_code == 403
        assert error.message == "The Redmine server replied with the status code 403"
        assert error.server_message == "You are not authorized"

    def test_xml_reply(self, mocked_responses, redmine_client, base_url):
        """Test that XML list replies are decoded with their pagination."""
        mocked_responses.add(
            responses.GET,
            f"{base_url}/projects.json",
            body=(
                '<?xml version="1.0" encoding="UTF-8"?>'
                '<projects total_count="1" offset="0" limit="25" type="array">'
                "<project><id>1</id><name>Website</name></project>"
                "</projects>"
            ),
            content_type="application/xml",
        )

        result = redmine_client.get_api("project").list()
        assert result == {
            "projects": [{"id": "1", "name": "Website"}],
            "total_count": "1",
            "offset": "0",
            "limit": "25",
        }

    def test_legacy_list_on_server_error(self, mocked_responses, redmine_client, base_url):
        """Test that the deprecated listing returns the server's message."""
        mocked_responses.add(
            responses.GET,
            f"{base_url}/projects.json",
            json={"error": "Internal error"},
            status=500,
        )

        with pytest.warns(DeprecationWarning):
            assert redmine_client.get_api("project").all() == "Internal error"


class TestBasicAuth:
    """Basic authentication over HTTP."""

    def test_basic_auth_header(self, mocked_responses, base_url):
        """Test that username and password are sent as basic auth."""
        mocked_responses.add(
            responses.GET,
            f"{base_url}/users/current.json",
            json={"user": {"id": 1, "login": "admin"}},
        )

        with RedmineClient(base_url, username="admin", password="secret") as client:
            user = client.get_api("user").get_current_user()

        assert user == {"user": {"id": 1, "login": "admin"}}
        request = mocked_responses.calls[0].request
        assert request.headers["Authorization"].startswith("Basic ")
        assert request.url == f"{base_url}/users/current.json?include=memberships%2Cgroups"

    def test_download(self, mocked_responses, base_url):
        """Test that attachment content comes back as bytes."""
        mocked_responses.add(
            responses.GET,
            f"{base_url}/attachments/download/17",
            body=b"\x89PNG",
            content_type="image/png",
        )

        with RedmineClient(base_url, username="admin", password="secret") as client:
            assert client.get_api("attachment").download(17) == b"\x89PNG"
