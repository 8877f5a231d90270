#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Tracker API."""
from typing import Any, Dict, Mapping, Optional

from redmineone.base import AbstractApi
from redmineone.resolver import ResolvedId


class TrackerApi(AbstractApi):
    """Listing trackers and resolving tracker names."""

    kind = "tracker"

    def list(self, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """List trackers.

        :param params: Optional parameters
        :return: The decoded reply, trackers under ``trackers``

        :raises UnexpectedResponseError: If the reply is not a collection
        """
        return self._retrieve_data("/trackers.json", params)

    def all(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        """List trackers, returning an error message or ``False`` on failure.

        Deprecated, use :meth:`list`.
        """
        self._deprecated("all", "list")
        return self._retrieve_all("/trackers.json", params)

    def listing(
        self,
        force_update: bool = False,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, int]:
        """Return a ``name -> id`` mapping of the trackers."""
        return self._listing(force_update, True, params)

    def get_id_by_name(self, name: str) -> ResolvedId:
        """Return the id of the tracker called ``name``, or :data:`NOT_FOUND`."""
        return self.resolver.get_id_by_name(self.kind, name)
