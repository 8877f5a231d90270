#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Wiki API.

Example::

    wiki = client.get_api("wiki")

    wiki.list_by_project("website")
    wiki.show("website", "Install Guide")
    wiki.show("website", "Install Guide", version=3)
    wiki.create("website", "FAQ", {"text": "h1. FAQ", "comments": "First draft"})
"""
from typing import Any, Dict, Mapping, Optional, Union

from redmineone.base import AbstractApi
from redmineone.params import FieldSpec
from redmineone.validation import encode_path_component, validate_identifier


PAGE_FIELDS = (
    FieldSpec("text"),
    FieldSpec("comments"),
    FieldSpec("version"),
)


def _page_path(project: Any, page: str, version: Any = None, suffix: str = "json") -> str:
    path = f"/projects/{encode_path_component(project)}/wiki/{encode_path_component(page)}"
    if version is not None:
        path = f"{path}/{encode_path_component(version)}"
    return f"{path}.{suffix}"


class WikiApi(AbstractApi):
    """Reading and writing the wiki pages of a project."""

    def list_by_project(
        self,
        project_identifier: Union[int, str],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """List the wiki pages of a project.

        :param project_identifier: Project id or identifier
        :param params: Optional parameters
        :return: The decoded reply, pages under ``wiki_pages``

        :raises InvalidParameterError: If the identifier is not an int or str
        :raises UnexpectedResponseError: If the reply is not a collection
        """
        validate_identifier(project_identifier, f"{type(self).__name__}.list_by_project")
        return self._retrieve_data(
            f"/projects/{encode_path_component(project_identifier)}/wiki/index.json",
            params,
        )

    def all(
        self,
        project: Union[int, str],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """List wiki pages, returning an error message or ``False`` on failure.

        Deprecated, use :meth:`list_by_project`.
        """
        self._deprecated("all", "list_by_project")
        return self._retrieve_all(
            f"/projects/{encode_path_component(project)}/wiki/index.json", params
        )

    def show(
        self,
        project: Union[int, str],
        page: str,
        version: Optional[Union[int, str]] = None,
    ) -> Any:
        """Get a wiki page with its attachments.

        :param project: Project id or identifier
        :param page: Page title
        :param version: Optional page version; the latest when omitted
        :return: The decoded reply, ``False`` if empty
        """
        return self._get(_page_path(project, page, version), {"include": "attachments"})

    def create(
        self,
        project: Union[int, str],
        page: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Create or update a wiki page.

        :param project: Project id or identifier
        :param page: Page title
        :param params: ``text``, ``comments`` and, to guard against
            concurrent edits, the ``version`` being replaced
        :return: The decoded reply, ``False`` if empty
        """
        return self._put(
            _page_path(project, page, suffix="xml"),
            self._xml("wiki_page", PAGE_FIELDS, params),
        )

    def update(
        self,
        project: Union[int, str],
        page: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Update a wiki page. Same request as :meth:`create`."""
        return self.create(project, page, params)

    def remove(self, project: Union[int, str], page: str) -> Any:
        """Delete a wiki page and its history."""
        return self._delete(_page_path(project, page, suffix="xml"))
