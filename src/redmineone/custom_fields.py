#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Redmine custom field definitions and utilities.

Custom fields are server-defined extra attributes attached to issues,
projects, users and other resources. On the wire each value carries the
field's numeric id and, optionally, its name and format.

Example::

    from redmineone.custom_fields import CustomField

    # A single value
    CustomField(id=2, value="Sprint 4")

    # A multi-value list field
    CustomField(id=5, name="Platforms", field_format="list", value=["linux", "mac"])

    # An attachment field pointing at an uploaded file
    CustomField(id=9, field_format="attachment", value={"token": "7167.ed1ccdb0"})
"""
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


def is_upload_value(value: Any) -> bool:
    """Return True if ``value`` references an uploaded file.

    :param value: A custom field value
    :return: Whether the value is a mapping with a ``token`` key
    """
    return isinstance(value, Mapping) and "token" in value


def is_multiple_value(value: Any) -> bool:
    """Return True if ``value`` is a multi-value (list) custom field value."""
    return isinstance(value, (list, tuple))


@dataclass
class CustomField:
    """A custom field value to send with a create or update call.

    :param id: The custom field id
    :param value: Scalar, list of scalars, or an upload mapping. Any other
        mapping is sent as a multiple field holding its values
    :param name: Optional field name
    :param field_format: Optional field format (e.g. ``list``, ``attachment``)
    """

    id: int
    value: Any = None
    name: Optional[str] = None
    field_format: Optional[str] = None

    @property
    def multiple(self) -> bool:
        """Whether this entry carries several values."""
        return is_multiple_value(self.value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the entry to the mapping shape the serializer consumes."""
        data: Dict[str, Any] = {"id": self.id}
        if self.name is not None:
            data["name"] = self.name
        if self.field_format is not None:
            data["field_format"] = self.field_format
        data["value"] = self.value
        return data

