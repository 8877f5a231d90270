#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""redmineone - REST API client for Redmine.

redmineone is a Python library for the Redmine REST API. It translates
method calls into requests, encodes XML and JSON request bodies, and
decodes replies into dicts, lists and scalars.

Features:
    * Projects, issues, users, wiki pages, trackers, issue statuses,
      issue categories, issue priorities and attachments
    * Custom fields, watcher lists and upload references in request bodies
    * Names accepted in place of ids (project, tracker, status, user, ...)
    * Strict calls that raise on unexpected replies
    * Connection pooling and credential masking in logs

Quick Start
-----------

API key authentication::

    from redmineone import RedmineClient

    with RedmineClient("https://redmine.example.com", api_key="0123abcd") as client:
        projects = client.get_api("project")
        print(projects.list({"limit": 10}))

Creating an issue by names::

    issues = client.get_api("issue")
    issues.create({
        "project": "Website",
        "tracker": "Bug",
        "status": "New",
        "subject": "Login page crashes",
        "custom_fields": [{"id": 2, "value": "Sprint 4"}],
    })

Handling unexpected replies::

    from redmineone import UnexpectedResponseError

    try:
        projects.close("website")
    except UnexpectedResponseError as e:
        print(e.status_code, e.server_message)

Plugging in another transport::

    from redmineone import HttpClient, ProjectApi, Response

    class StaticClient(HttpClient):
        def _send(self, method, path, body, content_type):
            return Response(200, "application/json", b'{"projects": []}')

    ProjectApi(StaticClient()).list()
"""
from redmineone.redmine_logs import add_log, WORK_PATH
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
from redmineone.http import (
    HttpClient,
    Response,
    call_failed,
)
from redmineone.custom_fields import CustomField
from redmineone.params import (
    Encoding,
    FieldSpec,
    sanitize_params,
)
from redmineone.resolver import (
    NOT_FOUND,
    IdentifierResolver,
    ListingSource,
)
from redmineone.serializer import (
    encode_json,
    encode_xml,
    decode,
    build_path,
)
from redmineone.response import (
    Expect,
    classify,
)
from redmineone.validation import validate_url
from redmineone.base import AbstractApi
from redmineone.attachments import AttachmentApi
from redmineone.issue_categories import IssueCategoryApi
from redmineone.issue_priorities import IssuePriorityApi
from redmineone.issue_statuses import IssueStatusApi
from redmineone.issues import IssueApi
from redmineone.projects import ProjectApi
from redmineone.trackers import TrackerApi
from redmineone.users import UserApi
from redmineone.wiki import WikiApi
from redmineone.client import (
    RedmineClient,
    ClientConfig,
    API_CLASSES,
)

__version__ = "1.0.0"
__all__ = [
    # Logging
    "add_log",
    "WORK_PATH",
    # Exceptions
    "RedmineOneErrors",
    "SerializerError",
    "RedmineAPIError",
    "UnexpectedResponseError",
    "RedmineTimeoutError",
    "RedmineValidationError",
    "MissingParameterError",
    "InvalidParameterError",
    # Transport
    "HttpClient",
    "Response",
    "call_failed",
    # Bodies
    "CustomField",
    "Encoding",
    "FieldSpec",
    "sanitize_params",
    "encode_json",
    "encode_xml",
    "decode",
    "build_path",
    # Resolution
    "NOT_FOUND",
    "IdentifierResolver",
    "ListingSource",
    # Replies
    "Expect",
    "classify",
    # Validation
    "validate_url",
    # APIs
    "AbstractApi",
    "AttachmentApi",
    "IssueCategoryApi",
    "IssuePriorityApi",
    "IssueStatusApi",
    "IssueApi",
    "ProjectApi",
    "TrackerApi",
    "UserApi",
    "WikiApi",
    # Client
    "RedmineClient",
    "ClientConfig",
    "API_CLASSES",
]
