#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Issue priority API.

Priorities are an enumeration; their ids also exist as constants on
:class:`redmineone.issues.IssueApi` (``PRIO_LOW`` ... ``PRIO_IMMEDIATE``).
"""
from typing import Any, Dict, Mapping, Optional

from redmineone.base import AbstractApi


class IssuePriorityApi(AbstractApi):

    def list(self, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """List issue priorities.

        :param params: Optional parameters
        :return: The decoded reply, priorities under ``issue_priorities``

        :raises UnexpectedResponseError: If the reply is not a collection
        """
        return self._retrieve_data("/enumerations/issue_priorities.json", params)

    def all(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        """List issue priorities, returning an error message or ``False`` on failure.

        Deprecated, use :meth:`list`.
        """
        self._deprecated("all", "list")
        return self._retrieve_all("/enumerations/issue_priorities.json", params)
