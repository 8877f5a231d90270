#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Project API.

Example::

    from redmineone import RedmineClient

    with RedmineClient("https://redmine.example.com", api_key="...") as client:
        projects = client.get_api("project")

        projects.list({"limit": 25})
        projects.show("my-project")
        projects.create({"name": "Website", "identifier": "website"})
        projects.get_id_by_name("Website")
        projects.archive("website")
"""
from typing import Any, Dict, Mapping, Optional, Union

from redmineone.base import AbstractApi
from redmineone.params import FieldSpec, sanitize_params
from redmineone.resolver import ResolvedId
from redmineone.validation import (
    encode_path_component,
    require_params,
    validate_identifier,
)


DEFAULT_SHOW_INCLUDE = "trackers,issue_categories,attachments,relations"

CREATE_FIELDS = (
    FieldSpec("name"),
    FieldSpec("identifier"),
    FieldSpec("description"),
)


class ProjectApi(AbstractApi):
    """Listing, reading and writing projects."""

    kind = "project"

    def list(self, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """List projects.

        :param params: Optional parameters (offset, limit, ...)
        :return: The decoded reply, projects under ``projects``

        :raises UnexpectedResponseError: If the reply is not a collection
        """
        return self._retrieve_data("/projects.json", params)

    def all(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        """List projects, returning an error message or ``False`` on failure.

        Deprecated, use :meth:`list`.
        """
        self._deprecated("all", "list")
        return self._retrieve_all("/projects.json", params)

    def listing(
        self,
        force_update: bool = False,
        reverse: bool = True,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Dict[Any, Any]:
        """Return project names and ids.

        :param force_update: List again even if cached
        :param reverse: Map name to id (default) rather than id to name
        :param params: Optional list parameters (offset, limit, ...)
        :return: The mapping
        """
        return self._listing(force_update, reverse, params)

    def get_id_by_name(
        self,
        name: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> ResolvedId:
        """Return the id of the project called ``name``, or :data:`NOT_FOUND`."""
        return self.resolver.get_id_by_name(self.kind, name, dict(params or {}))

    def show(
        self,
        id: Union[int, str],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Get a project with its trackers, categories, attachments and relations.

        :param id: Project id or identifier
        :param params: Optional parameters; ``include`` replaces the default
            associations and may be a list
        :return: The decoded reply, ``False`` if empty
        """
        params = dict(params or {})
        if not params.get("include"):
            params["include"] = DEFAULT_SHOW_INCLUDE
        return self._get(f"/projects/{encode_path_component(id)}.json", params)

    def create(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Create a project.

        :param params: Project fields; ``name`` and ``identifier`` are mandatory
        :return: The decoded reply

        :raises MissingParameterError: If ``name`` or ``identifier`` is missing
        """
        params = sanitize_params(CREATE_FIELDS, params)
        require_params(params, ("name", "identifier"))
        return self._post("/projects.xml", self._xml("project", CREATE_FIELDS, params))

    def update(self, id: Union[int, str], params: Mapping[str, Any]) -> Any:
        """Update a project.

        :param id: Project id or identifier
        :param params: Fields to change
        :return: The decoded reply, ``False`` if empty
        """
        fields = (FieldSpec("id", id),) + CREATE_FIELDS
        return self._put(
            f"/projects/{encode_path_component(id)}.xml",
            self._xml("project", fields, params),
        )

    def _change_state(self, project_identifier: Any, action: str) -> bool:
        validate_identifier(project_identifier, f"{type(self).__name__}.{action}")
        return self._confirm(
            f"/projects/{encode_path_component(project_identifier)}/{action}.xml"
        )

    def close(self, project_identifier: Union[int, str]) -> bool:
        """Close a project.

        :param project_identifier: Project id or identifier
        :return: True

        :raises InvalidParameterError: If the identifier is not an int or str
        :raises UnexpectedResponseError: Unless the server answers 204
        """
        return self._change_state(project_identifier, "close")

    def reopen(self, project_identifier: Union[int, str]) -> bool:
        """Reopen a closed project. See :meth:`close`."""
        return self._change_state(project_identifier, "reopen")

    def archive(self, project_identifier: Union[int, str]) -> bool:
        """Archive a project. See :meth:`close`."""
        return self._change_state(project_identifier, "archive")

    def unarchive(self, project_identifier: Union[int, str]) -> bool:
        """Unarchive a project. See :meth:`close`."""
        return self._change_state(project_identifier, "unarchive")

    def remove(self, id: Union[int, str]) -> Any:
        """Delete a project.

        :param id: Project id or identifier
        :return: The decoded reply, ``False`` if empty
        """
        return self._delete(f"/projects/{encode_path_component(id)}.xml")
