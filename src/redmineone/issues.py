#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Issue API.

Create and update calls accept names in place of ids: ``project``,
``category``, ``status``, ``tracker``, ``assigned_to`` and ``author`` are
resolved to their ``*_id`` counterparts before the body is built. A name
that matches nothing is sent as ``false`` so the server rejects it.

Example::

    from redmineone import RedmineClient
    from redmineone.issues import IssueApi

    client = RedmineClient("https://redmine.example.com", api_key="...")
    issues = client.get_api("issue")

    issues.create({
        "project": "Website",
        "tracker": "Bug",
        "subject": "Login page crashes",
        "priority_id": IssueApi.PRIO_HIGH,
        "watcher_user_ids": [5, 25],
        "custom_fields": [{"id": 2, "value": "Sprint 4"}],
    })
    issues.set_issue_status(42, "Resolved")
    issues.add_note_to_issue(42, "Fixed in r1234", private_note=True)
"""
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from redmineone.base import AbstractApi
from redmineone.params import Encoding, FieldSpec
from redmineone.serializer import encode_xml
from redmineone.validation import encode_path_component


CREATE_FIELDS = (
    FieldSpec("subject"),
    FieldSpec("description"),
    FieldSpec("project_id"),
    FieldSpec("category_id"),
    FieldSpec("priority_id"),
    FieldSpec("status_id"),
    FieldSpec("tracker_id"),
    FieldSpec("assigned_to_id"),
    FieldSpec("author_id"),
    FieldSpec("due_date"),
    FieldSpec("start_date"),
    FieldSpec("watcher_user_ids", encoding=Encoding.ARRAY_OF_SCALAR),
    FieldSpec("fixed_version_id"),
)


def _update_fields(id: Any) -> tuple:
    return (
        FieldSpec("id", id),
        FieldSpec("subject"),
        FieldSpec("notes"),
        FieldSpec("private_notes", False),
        FieldSpec("category_id"),
        FieldSpec("priority_id"),
        FieldSpec("status_id"),
        FieldSpec("tracker_id"),
        FieldSpec("assigned_to_id"),
        FieldSpec("due_date"),
    )


class IssueApi(AbstractApi):
    """Listing, reading and writing issues."""

    PRIO_LOW = 1
    PRIO_NORMAL = 2
    PRIO_HIGH = 3
    PRIO_URGENT = 4
    PRIO_IMMEDIATE = 5

    def list(self, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """List issues.

        :param params: Optional filters (project_id, status_id, offset, limit, ...)
        :return: The decoded reply, issues under ``issues``

        :raises UnexpectedResponseError: If the reply is not a collection
        """
        return self._retrieve_data("/issues.json", params)

    def all(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        """List issues, returning an error message or ``False`` on failure.

        Deprecated, use :meth:`list`.
        """
        self._deprecated("all", "list")
        return self._retrieve_all("/issues.json", params)

    def show(
        self,
        id: Union[int, str],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Get an issue.

        :param id: Issue id
        :param params: Optional parameters; ``include`` may be a list
            (children, attachments, relations, changesets, journals, watchers)
        :return: The decoded reply, ``False`` if empty
        """
        return self._get(f"/issues/{encode_path_component(id)}.json", params)

    def create(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Create an issue.

        :param params: Issue fields; names are resolved (see module docs)
        :return: The decoded reply
        """
        params = self._clean_params(params)
        return self._post("/issues.xml", self._xml("issue", CREATE_FIELDS, params))

    def update(self, id: Union[int, str], params: Mapping[str, Any]) -> Any:
        """Update an issue.

        ``assigned_to_id=""`` unassigns the issue.

        :param id: Issue id
        :param params: Fields to change; names are resolved (see module docs)
        :return: The decoded reply, ``False`` if empty
        """
        params = self._clean_params(params)
        return self._put(
            f"/issues/{encode_path_component(id)}.xml",
            self._xml("issue", _update_fields(id), params),
        )

    def add_watcher(self, id: Union[int, str], watcher_user_id: Union[int, str]) -> Any:
        """Add a watcher to an issue.

        :param id: Issue id
        :param watcher_user_id: User id of the watcher
        :return: The decoded reply, ``False`` if empty
        """
        return self._post(
            f"/issues/{encode_path_component(id)}/watchers.xml",
            encode_xml("user_id", encode_path_component(watcher_user_id)),
        )

    def remove_watcher(
        self,
        id: Union[int, str],
        watcher_user_id: Union[int, str],
    ) -> Any:
        """Remove a watcher from an issue."""
        return self._delete(
            f"/issues/{encode_path_component(id)}/watchers/"
            f"{encode_path_component(watcher_user_id)}.xml"
        )

    def set_issue_status(self, id: Union[int, str], status: str) -> Any:
        """Set the status of an issue by status name.

        :param id: Issue id
        :param status: Status name, resolved through the status listing
        :return: The decoded reply, ``False`` if empty
        """
        return self.update(id, {
            "status_id": self.resolver.get_id_by_name("issue_status", status),
        })

    def add_note_to_issue(
        self,
        id: Union[int, str],
        note: str,
        private_note: bool = False,
    ) -> Any:
        """Add a note to an issue.

        :param id: Issue id
        :param note: Note text
        :param private_note: Whether only privileged users can see the note
        :return: The decoded reply, ``False`` if empty
        """
        return self.update(id, {
            "notes": note,
            "private_notes": private_note,
        })

    def attach(self, id: Union[int, str], attachment: Mapping[str, Any]) -> Any:
        """Attach one uploaded file to an issue. See :meth:`attach_many`."""
        return self.attach_many(id, [attachment])

    def attach_many(
        self,
        id: Union[int, str],
        attachments: Iterable[Mapping[str, Any]],
    ) -> Any:
        """Attach uploaded files to an issue.

        :param id: Issue id
        :param attachments: Upload references, each with the ``token`` returned
            by :meth:`redmineone.attachments.AttachmentApi.upload` and
            optionally ``filename``, ``description`` and ``content_type``
        :return: The decoded reply, ``False`` if empty

        Example::

            upload = attachments.upload(data, {"filename": "log.txt"})
            issues.attach_many(42, [{
                "token": upload["upload"]["token"],
                "filename": "log.txt",
            }])
        """
        body = {"issue": {"id": id, "uploads": [dict(item) for item in attachments]}}
        return self._put(f"/issues/{encode_path_component(id)}.json", self._json(body))

    def remove(self, id: Union[int, str]) -> Any:
        """Delete an issue."""
        return self._delete(f"/issues/{encode_path_component(id)}.xml")

    def _clean_params(self, params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Replace name references by resolved ids."""
        params = dict(params or {})
        resolver = self.resolver

        if params.get("project") is not None:
            params["project_id"] = resolver.get_id_by_name("project", params.pop("project"))

        if params.get("category") is not None and params.get("project_id") is not None:
            params["category_id"] = resolver.get_category_id_by_name(
                params["project_id"], params.pop("category")
            )

        if params.get("status") is not None:
            params["status_id"] = resolver.get_id_by_name("issue_status", params.pop("status"))

        if params.get("tracker") is not None:
            params["tracker_id"] = resolver.get_id_by_name("tracker", params.pop("tracker"))

        if params.get("assigned_to") is not None:
            params["assigned_to_id"] = resolver.get_id_by_name(
                "user", params.pop("assigned_to")
            )

        if params.get("author") is not None:
            params["author_id"] = resolver.get_id_by_name("user", params.pop("author"))

        return params
