#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""User API.

Example::

    from redmineone import RedmineClient

    client = RedmineClient("https://redmine.example.com", api_key="...")
    users = client.get_api("user")

    # Who am I?
    me = users.get_current_user()

    # Look up an id by login
    user_id = users.get_id_by_username("jsmith")

    # Create a user
    users.create({
        "login": "jdoe",
        "firstname": "John",
        "lastname": "Doe",
        "mail": "jdoe@example.com",
    })
"""
from typing import Any, Dict, Mapping, Optional, Union

from redmineone.base import AbstractApi
from redmineone.custom_fields import is_multiple_value
from redmineone.params import FieldSpec, sanitize_params
from redmineone.resolver import ResolvedId
from redmineone.validation import encode_path_component, require_params


# Associations always fetched by show()
SHOW_INCLUDE = ("memberships", "groups")

CREATE_FIELDS = (
    FieldSpec("login"),
    FieldSpec("password"),
    FieldSpec("lastname"),
    FieldSpec("firstname"),
    FieldSpec("mail"),
)


class UserApi(AbstractApi):
    """Manager for Redmine user operations."""

    kind = "user"

    def list(self, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """List users.

        :param params: Optional filters (status, name, group_id, offset, limit)
        :return: The decoded reply, users under ``users``

        :raises UnexpectedResponseError: If the reply is not a collection
        """
        return self._retrieve_data("/users.json", params)

    def all(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        """List users, returning an error message or ``False`` on failure.

        Deprecated, use :meth:`list`.
        """
        self._deprecated("all", "list")
        return self._retrieve_all("/users.json", params)

    def listing(
        self,
        force_update: bool = False,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, int]:
        """Return a ``login -> id`` mapping of the users.

        :param force_update: List again even if cached
        :param params: Optional list parameters
        :return: The mapping
        """
        return self._listing(force_update, True, params)

    def get_current_user(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Get the user the client is authenticated as."""
        return self.show("current", params)

    def get_id_by_username(
        self,
        username: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> ResolvedId:
        """Return the id of the user with login ``username``, or :data:`NOT_FOUND`."""
        return self.resolver.get_id_by_name(self.kind, username, dict(params or {}))

    def show(
        self,
        id: Union[int, str],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Get a user with memberships and groups.

        :param id: User id, or ``current``
        :param params: Optional parameters; a list ``include`` is merged with
            ``memberships`` and ``groups``
        :return: The decoded reply, ``False`` if empty
        """
        params = dict(params or {})
        include = params.get("include") or []
        if not is_multiple_value(include):
            include = str(include).split(",")
        merged = []
        for name in list(include) + list(SHOW_INCLUDE):
            if name not in merged:
                merged.append(name)
        params["include"] = ",".join(merged)
        return self._get(f"/users/{encode_path_component(id)}.json", params)

    def create(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Create a user.

        :param params: User fields; ``login``, ``lastname``, ``firstname``
            and ``mail`` are mandatory
        :return: The decoded reply

        :raises MissingParameterError: If a mandatory field is missing
        """
        params = sanitize_params(CREATE_FIELDS, params)
        require_params(params, ("login", "lastname", "firstname", "mail"))
        return self._post("/users.xml", self._xml("user", CREATE_FIELDS, params))

    def update(self, id: Union[int, str], params: Mapping[str, Any]) -> Any:
        """Update a user."""
        fields = (FieldSpec("id", id),) + CREATE_FIELDS
        return self._put(
            f"/users/{encode_path_component(id)}.xml",
            self._xml("user", fields, params),
        )

    def remove(self, id: Union[int, str]) -> Any:
        """Delete a user."""
        return self._delete(f"/users/{encode_path_component(id)}.xml")
