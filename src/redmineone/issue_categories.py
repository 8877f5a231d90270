#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Issue category API.

Categories belong to a project, so listings and name lookups are scoped
by project id.

Example::

    categories = client.get_api("issue_category")

    categories.list_by_project("website")
    categories.create("website", {"name": "Backend", "assigned_to_id": 5})
    categories.get_id_by_name(3, "Backend")
    categories.remove(12, {"reassign_to_id": 13})
"""
from typing import Any, Dict, Mapping, Optional, Union

from redmineone.base import AbstractApi
from redmineone.params import FieldSpec, sanitize_params
from redmineone.resolver import ResolvedId
from redmineone.serializer import build_path
from redmineone.validation import (
    encode_path_component,
    require_params,
    validate_identifier,
)


CREATE_FIELDS = (
    FieldSpec("name"),
    FieldSpec("assigned_to_id"),
)


class IssueCategoryApi(AbstractApi):
    """Listing, reading and writing the issue categories of a project."""

    kind = "issue_category"

    def list_by_project(
        self,
        project_identifier: Union[int, str],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """List the categories of a project.

        :param project_identifier: Project id or identifier
        :param params: Optional parameters
        :return: The decoded reply, categories under ``issue_categories``

        :raises InvalidParameterError: If the identifier is not an int or str
        :raises UnexpectedResponseError: If the reply is not a collection
        """
        validate_identifier(project_identifier, f"{type(self).__name__}.list_by_project")
        return self._retrieve_data(
            f"/projects/{encode_path_component(project_identifier)}/issue_categories.json",
            params,
        )

    def all(
        self,
        project: Union[int, str],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """List the categories of a project, returning a message or ``False`` on failure.

        Deprecated, use :meth:`list_by_project`.
        """
        self._deprecated("all", "list_by_project")
        return self._retrieve_all(
            f"/projects/{encode_path_component(project)}/issue_categories.json", params
        )

    def listing(
        self,
        project: Union[int, str],
        force_update: bool = False,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, int]:
        """Return a ``name -> id`` mapping of the categories of a project."""
        return self._listing(force_update, True, params, scope=project)

    def get_id_by_name(self, project: Union[int, str], name: str) -> ResolvedId:
        """Return the id of category ``name`` in ``project``, or :data:`NOT_FOUND`."""
        return self.resolver.get_category_id_by_name(project, name)

    def show(self, id: Union[int, str]) -> Any:
        """Get a category."""
        return self._get(f"/issue_categories/{encode_path_component(id)}.json")

    def create(
        self,
        project: Union[int, str],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Create a category in a project.

        :param project: Project id or identifier
        :param params: Category fields; ``name`` is mandatory
        :return: The decoded reply

        :raises MissingParameterError: If ``name`` is missing
        """
        params = sanitize_params(CREATE_FIELDS, params)
        require_params(params, ("name",))
        return self._post(
            f"/projects/{encode_path_component(project)}/issue_categories.xml",
            self._xml("issue_category", CREATE_FIELDS, params),
        )

    def update(self, id: Union[int, str], params: Mapping[str, Any]) -> Any:
        """Update a category."""
        return self._put(
            f"/issue_categories/{encode_path_component(id)}.xml",
            self._xml("issue_category", CREATE_FIELDS, params),
        )

    def remove(
        self,
        id: Union[int, str],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Delete a category.

        :param id: Category id
        :param params: Optional ``reassign_to_id``, the category that takes
            over the issues of the deleted one
        :return: The decoded reply, ``False`` if empty
        """
        params = {"reassign_to_id": (params or {}).get("reassign_to_id")}
        return self._delete(
            build_path(f"/issue_categories/{encode_path_component(id)}.xml", params)
        )
