#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Name to id resolution backed by a per-kind listing cache.

Create and update calls accept human-readable references (a project
name, a tracker name, a user login) and translate them to numeric ids
before the request is built. The translation reads the full listing of the
referenced kind once and keeps it until a caller forces a refresh.

The cache is plain mutable state: one resolver serves one logical session
and is not safe for concurrent mutation. Callers sharing a client between
threads must synchronize around it.

Example::

    resolver = client.resolver

    resolver.get_id_by_name("tracker", "Bug")            # lists trackers once
    resolver.get_id_by_name("tracker", "Feature")        # served from cache
    resolver.listing("tracker", force_refresh=True)      # lists again
    resolver.get_category_id_by_name(3, "Backend")       # scoped to project 3
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple, Union

from redmineone.exceptions import InvalidParameterError
from redmineone.redmine_logs import add_log


class _NotFound:
    """Falsy sentinel returned when a name has no matching id."""

    _instance = None

    def __new__(cls) -> "_NotFound":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __reduce__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFound()

# An id, or NOT_FOUND when the name is unknown
ResolvedId = Union[int, _NotFound]


@dataclass(frozen=True)
class ListingKind:
    """How a resource kind is listed and labelled.

    :param collection: Key holding the records in a list response
    :param label: Record field used as the lookup name
    """

    collection: str
    label: str = "name"


LISTING_KINDS: Dict[str, ListingKind] = {
    "project": ListingKind("projects"),
    "tracker": ListingKind("trackers"),
    "issue_status": ListingKind("issue_statuses"),
    "issue_category": ListingKind("issue_categories"),
    "user": ListingKind("users", "login"),
}


@dataclass
class ListingCache:
    """Cached listing of one resource kind.

    ``entries`` maps names to ids; a name shared by several records keeps
    the id of the last one listed. ``labels`` maps every id to its name.
    """

    entries: Dict[str, int] = field(default_factory=dict)
    labels: Dict[int, str] = field(default_factory=dict)
    populated: bool = False

    def replace(
        self,
        entries: Dict[str, int],
        labels: Optional[Dict[int, str]] = None,
    ) -> None:
        """Replace both maps at once; ``labels`` defaults to inverted ``entries``."""
        self.entries = entries
        if labels is None:
            labels = {id_: name for name, id_ in entries.items()}
        self.labels = labels
        self.populated = True

    def clear(self) -> None:
        """Drop the maps and mark the cache unpopulated."""
        self.entries = {}
        self.labels = {}
        self.populated = False


class ListingSource(ABC):
    """Capability to list all records of a resource kind."""

    @abstractmethod
    def list(
        self,
        kind: str,
        params: Optional[Dict[str, Any]] = None,
        scope: Optional[Hashable] = None,
    ) -> List[Dict[str, Any]]:
        """Return the records of ``kind``.

        :param kind: Resource kind (see :data:`LISTING_KINDS`)
        :param params: Extra list parameters (offset, limit, ...)
        :param scope: Parent id for scoped kinds (project id for categories)
        :return: The list of records
        """


class ApiListingSource(ListingSource):
    """Lists records through the resource APIs.

    :param get_api: Callable returning the resource API of a kind
    """

    def __init__(self, get_api: Callable[[str], Any]) -> None:
        self._get_api = get_api

    def list(
        self,
        kind: str,
        params: Optional[Dict[str, Any]] = None,
        scope: Optional[Hashable] = None,
    ) -> List[Dict[str, Any]]:
        api = self._get_api(kind)
        if scope is not None:
            data = api.list_by_project(scope, params or {})
        else:
            data = api.list(params or {})
        records = data.get(LISTING_KINDS[kind].collection) if isinstance(data, dict) else None
        return records or []


class IdentifierResolver:
    """Resolve human-readable names to ids, one cached listing per kind.

    :param source: Where listings come from
    """

    def __init__(self, source: ListingSource) -> None:
        self.source = source
        self._caches: Dict[Tuple[str, Optional[Hashable]], ListingCache] = {}

    def cache(self, kind: str, scope: Optional[Hashable] = None) -> ListingCache:
        """Return the cache of ``kind`` (and ``scope``), creating it empty."""
        if kind not in LISTING_KINDS:
            raise InvalidParameterError(
                message=f"`{kind}` cannot be resolved by name. "
                f"Possible kinds are `{'`, `'.join(sorted(LISTING_KINDS))}`",
                field="kind",
                value=kind,
            )
        return self._caches.setdefault((kind, scope), ListingCache())

    def listing(
        self,
        kind: str,
        force_refresh: bool = False,
        params: Optional[Dict[str, Any]] = None,
        scope: Optional[Hashable] = None,
    ) -> Dict[str, int]:
        """Return the ``name -> id`` map of ``kind``.

        The listing is fetched when the cache was never populated or when
        ``force_refresh`` is set. A failing list call propagates and leaves
        the previous map in place.

        :param kind: Resource kind
        :param force_refresh: Fetch again even if cached
        :param params: Extra list parameters (offset, limit, ...)
        :param scope: Parent id for scoped kinds
        :return: Mapping of name to id
        """
        cache = self.cache(kind, scope)
        if force_refresh or not cache.populated:
            add_log(f"Refreshing {kind} listing (scope: {scope})", "debug")
            records = self.source.list(kind, params, scope)
            label = LISTING_KINDS[kind].label
            cache.replace(
                {str(record[label]): int(record["id"]) for record in records},
                {int(record["id"]): str(record[label]) for record in records},
            )
        return dict(cache.entries)

    def id_listing(
        self,
        kind: str,
        force_refresh: bool = False,
        params: Optional[Dict[str, Any]] = None,
        scope: Optional[Hashable] = None,
    ) -> Dict[int, str]:
        """Return the ``id -> name`` map of ``kind``.

        Unlike :meth:`listing`, records sharing a name each keep an entry.
        Fetching follows the same rules as :meth:`listing`.

        :param kind: Resource kind
        :param force_refresh: Fetch again even if cached
        :param params: Extra list parameters (offset, limit, ...)
        :param scope: Parent id for scoped kinds
        :return: Mapping of id to name
        """
        self.listing(kind, force_refresh, params, scope)
        return dict(self.cache(kind, scope).labels)

    def get_id_by_name(
        self,
        kind: str,
        name: Any,
        params: Optional[Dict[str, Any]] = None,
        scope: Optional[Hashable] = None,
    ) -> ResolvedId:
        """Return the id of the ``kind`` record called ``name``.

        Matching is exact and case-sensitive.

        :param kind: Resource kind
        :param name: Name (or login, for users) to look up
        :param params: Extra list parameters used on the first fetch
        :param scope: Parent id for scoped kinds
        :return: The id, or :data:`NOT_FOUND`
        """
        entries = self.listing(kind, False, params, scope)
        return entries.get(str(name), NOT_FOUND)

    def get_category_id_by_name(
        self,
        project_id: Any,
        name: Any,
    ) -> ResolvedId:
        """Return the id of the issue category ``name`` in a project.

        :param project_id: Numeric project id; :data:`NOT_FOUND` short-circuits
        :param name: Category name
        :return: The id, or :data:`NOT_FOUND`
        """
        if project_id is NOT_FOUND or project_id is None:
            return NOT_FOUND
        return self.get_id_by_name("issue_category", name, scope=project_id)

    def invalidate(self, kind: Optional[str] = None) -> None:
        """Mark the caches of ``kind`` (or of every kind) unpopulated."""
        for (cached_kind, _), cache in self._caches.items():
            if kind is None or cached_kind == kind:
                cache.clear()
