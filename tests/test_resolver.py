#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Tests for the resolver module."""
import copy
import pickle

import pytest
from unittest.mock import Mock

from redmineone.exceptions import InvalidParameterError, UnexpectedResponseError
from redmineone.resolver import (
    NOT_FOUND,
    ApiListingSource,
    IdentifierResolver,
    ListingCache,
    ListingSource,
)


class StaticSource(ListingSource):
    """Listing source serving fixed records and counting calls."""

    def __init__(self, records):
        self.records = records
        self.calls = []

    def list(self, kind, params=None, scope=None):
        self.calls.append((kind, params, scope))
        result = self.records[kind]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def source():
    return StaticSource({
        "tracker": [{"id": 1, "name": "Bug"}, {"id": "2", "name": "Feature"}],
        "user": [{"id": 5, "login": "jsmith"}],
        "issue_category": [{"id": 7, "name": "Backend"}],
    })


class TestNotFound:
    """Tests for the NOT_FOUND sentinel."""

    def test_falsy(self):
        """Test that the sentinel is falsy and distinct from False."""
        assert not NOT_FOUND
        assert NOT_FOUND is not False
        assert repr(NOT_FOUND) == "NOT_FOUND"

    def test_singleton(self):
        """Test that copies and pickles keep the identity."""
        assert copy.copy(NOT_FOUND) is NOT_FOUND
        assert pickle.loads(pickle.dumps(NOT_FOUND)) is NOT_FOUND


class TestListingCache:
    """Tests for ListingCache."""

    def test_lifecycle(self):
        """Test replace and clear."""
        cache = ListingCache()
        assert not cache.populated
        cache.replace({"Bug": 1})
        assert cache.populated and cache.entries == {"Bug": 1}
        assert cache.labels == {1: "Bug"}
        cache.clear()
        assert not cache.populated and cache.entries == {}
        assert cache.labels == {}


class TestIdentifierResolver:
    """Tests for IdentifierResolver."""

    def test_listing_builds_name_map(self, source):
        """Test that ids are coerced to int and keyed by name."""
        resolver = IdentifierResolver(source)
        assert resolver.listing("tracker") == {"Bug": 1, "Feature": 2}

    def test_id_listing_keeps_shared_names(self, source):
        """Test that records sharing a name each keep their id."""
        source.records["tracker"] = [{"id": 1, "name": "Bug"}, {"id": 4, "name": "Bug"}]
        resolver = IdentifierResolver(source)
        assert resolver.id_listing("tracker") == {1: "Bug", 4: "Bug"}
        assert resolver.listing("tracker") == {"Bug": 4}
        assert len(source.calls) == 1

    def test_users_keyed_by_login(self, source):
        """Test that users are looked up by login."""
        resolver = IdentifierResolver(source)
        assert resolver.get_id_by_name("user", "jsmith") == 5

    def test_lookup_lists_once(self, source):
        """Test that two lookups issue a single list call."""
        resolver = IdentifierResolver(source)
        assert resolver.get_id_by_name("tracker", "Bug") == 1
        assert resolver.get_id_by_name("tracker", "Feature") == 2
        assert len(source.calls) == 1

    def test_force_refresh_lists_again(self, source):
        """Test that force_refresh always lists."""
        resolver = IdentifierResolver(source)
        resolver.listing("tracker")
        resolver.listing("tracker", force_refresh=True)
        resolver.listing("tracker", force_refresh=True)
        assert len(source.calls) == 3

    def test_refresh_replaces_entries(self, source):
        """Test that a refresh drops names no longer listed."""
        resolver = IdentifierResolver(source)
        resolver.listing("tracker")
        source.records["tracker"] = [{"id": 3, "name": "Support"}]
        assert resolver.listing("tracker", force_refresh=True) == {"Support": 3}
        assert resolver.get_id_by_name("tracker", "Bug") is NOT_FOUND

    def test_lookup_is_case_sensitive(self, source):
        """Test exact matching."""
        resolver = IdentifierResolver(source)
        assert resolver.get_id_by_name("tracker", "bug") is NOT_FOUND

    def test_failed_refresh_keeps_cache(self, source):
        """Test that a failing list call leaves the previous map."""
        resolver = IdentifierResolver(source)
        resolver.listing("tracker")
        source.records["tracker"] = UnexpectedResponseError(status_code=500)

        with pytest.raises(UnexpectedResponseError):
            resolver.listing("tracker", force_refresh=True)
        assert resolver.get_id_by_name("tracker", "Bug") == 1

    def test_listing_returns_copy(self, source):
        """Test that callers cannot mutate the cache."""
        resolver = IdentifierResolver(source)
        resolver.listing("tracker")["Bug"] = 99
        assert resolver.get_id_by_name("tracker", "Bug") == 1

    def test_unknown_kind(self, source):
        """Test that unknown kinds are rejected."""
        resolver = IdentifierResolver(source)
        with pytest.raises(InvalidParameterError):
            resolver.listing("wiki")

    def test_category_scoped_by_project(self, source):
        """Test that categories are listed per project."""
        resolver = IdentifierResolver(source)
        assert resolver.get_category_id_by_name(1, "Backend") == 7
        assert resolver.get_category_id_by_name(2, "Backend") == 7
        assert [call[2] for call in source.calls] == [1, 2]

    def test_category_with_unresolved_project(self, source):
        """Test that an unresolved project short-circuits without listing."""
        resolver = IdentifierResolver(source)
        assert resolver.get_category_id_by_name(NOT_FOUND, "Backend") is NOT_FOUND
        assert source.calls == []

    def test_invalidate(self, source):
        """Test that invalidation forces the next lookup to list."""
        resolver = IdentifierResolver(source)
        resolver.listing("tracker")
        resolver.listing("user")
        resolver.invalidate("tracker")
        resolver.listing("tracker")
        resolver.listing("user")
        assert [call[0] for call in source.calls] == ["tracker", "user", "tracker"]

        resolver.invalidate()
        resolver.listing("user")
        assert len(source.calls) == 4


class TestApiListingSource:
    """Tests for ApiListingSource."""

    def test_unscoped_list(self):
        """Test that records are read from the collection key."""
        api = Mock()
        api.list.return_value = {"issue_statuses": [{"id": 1, "name": "New"}]}
        source = ApiListingSource(lambda kind: api)

        assert source.list("issue_status", {"limit": 5}) == [{"id": 1, "name": "New"}]
        api.list.assert_called_once_with({"limit": 5})

    def test_scoped_list(self):
        """Test that a scope lists by project."""
        api = Mock()
        api.list_by_project.return_value = {"issue_categories": []}
        source = ApiListingSource(lambda kind: api)

        assert source.list("issue_category", None, 3) == []
        api.list_by_project.assert_called_once_with(3, {})

    def test_missing_collection(self):
        """Test that a reply without the collection key lists nothing."""
        api = Mock()
        api.list.return_value = {"total_count": 0}
        assert ApiListingSource(lambda kind: api).list("project") == []
