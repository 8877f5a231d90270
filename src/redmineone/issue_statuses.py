#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Issue status API."""
from typing import Any, Dict, Mapping, Optional

from redmineone.base import AbstractApi
from redmineone.resolver import ResolvedId


class IssueStatusApi(AbstractApi):
    """Listing issue statuses and resolving status names."""

    kind = "issue_status"

    def list(self, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """List issue statuses.

        :param params: Optional parameters
        :return: The decoded reply, statuses under ``issue_statuses``

        :raises UnexpectedResponseError: If the reply is not a collection
        """
        return self._retrieve_data("/issue_statuses.json", params)

    def all(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        """List issue statuses, returning an error message or ``False`` on failure.

        Deprecated, use :meth:`list`.
        """
        self._deprecated("all", "list")
        return self._retrieve_all("/issue_statuses.json", params)

    def listing(
        self,
        force_update: bool = False,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, int]:
        """Return a ``name -> id`` mapping of the issue statuses."""
        return self._listing(force_update, True, params)

    def get_id_by_name(self, name: str) -> ResolvedId:
        """Return the id of the status called ``name``, or :data:`NOT_FOUND`."""
        return self.resolver.get_id_by_name(self.kind, name)
