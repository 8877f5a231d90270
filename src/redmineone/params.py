#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Parameter normalization for create and update calls.

Each operation declares the fields it sends as a template of
:class:`FieldSpec` entries. :func:`sanitize_params` merges the caller's
parameters into that template, producing the ordered field set that the
serializer turns into a request body.

Example::

    from redmineone.params import FieldSpec, sanitize_params

    fields = (
        FieldSpec("id", 5),
        FieldSpec("notes"),
        FieldSpec("private_notes", False),
    )
    sanitize_params(fields, {"notes": "Done"})
    # {"id": 5, "notes": "Done"}
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Union


class Encoding:
    """Encoding hints understood by :func:`redmineone.serializer.encode_xml`."""

    PLAIN = "plain"
    ARRAY_OF_SCALAR = "array-of-scalar"
    ARRAY_OF_OBJECT = "array-of-object"
    CUSTOM_FIELD_LIST = "custom-field-list"
    UPLOAD_LIST = "upload-list"

    ALL = (PLAIN, ARRAY_OF_SCALAR, ARRAY_OF_OBJECT, CUSTOM_FIELD_LIST, UPLOAD_LIST)


@dataclass(frozen=True)
class FieldSpec:
    """A field an operation may send.

    :param key: Field name on the wire
    :param default: Value used when the caller does not supply one;
        ``None`` omits the field
    :param encoding: One of the :class:`Encoding` hints
    """

    key: str
    default: Any = None
    encoding: str = Encoding.PLAIN

    def __post_init__(self) -> None:
        if self.encoding not in Encoding.ALL:
            raise ValueError(f"Unknown encoding hint: {self.encoding}")


Defaults = Union[Mapping[str, Any], Iterable[FieldSpec]]


def is_set(value: Any) -> bool:
    """Return True if a default value should be sent.

    ``None``, ``False``, the empty string and empty containers are unset;
    ``0``, ``"0"`` and ``True`` are set.

    :param value: A default value
    :return: Whether the value counts as set
    """
    if value is None or value is False:
        return False
    if isinstance(value, (str, bytes, list, tuple, dict)) and len(value) == 0:
        return False
    return True


def defaults_from(defaults: Defaults) -> Dict[str, Any]:
    """Return the ``key -> default`` mapping of a template.

    :param defaults: A mapping or a sequence of :class:`FieldSpec`
    :return: Ordered mapping of defaults
    """
    if isinstance(defaults, Mapping):
        return dict(defaults)
    return {field_spec.key: field_spec.default for field_spec in defaults}


def encoding_hints(defaults: Defaults) -> Dict[str, str]:
    """Return the non-plain encoding hints declared by a template.

    :param defaults: A mapping or a sequence of :class:`FieldSpec`
    :return: Mapping of field name to encoding hint
    """
    if isinstance(defaults, Mapping):
        return {}
    return {
        field_spec.key: field_spec.encoding
        for field_spec in defaults
        if field_spec.encoding != Encoding.PLAIN
    }


def sanitize_params(
    defaults: Defaults,
    params: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Merge supplied parameters into a default-field template.

    Template keys come first, in declaration order. A supplied value other
    than ``None`` is copied verbatim, so ``""`` survives and clears a field
    on the server. Without a supplied value the default is used when it is
    set (see :func:`is_set`). Supplied keys outside the template follow in
    the order they were given.

    :param defaults: A mapping or a sequence of :class:`FieldSpec`
    :param params: Caller-supplied parameters
    :return: The normalized field set
    """
    params = params or {}
    template = defaults_from(defaults)
    result: Dict[str, Any] = {}

    for key, default in template.items():
        supplied = params.get(key)
        if supplied is not None:
            result[key] = supplied
        elif is_set(default):
            result[key] = default

    for key, value in params.items():
        if key not in template and value is not None:
            result[key] = value

    return result
