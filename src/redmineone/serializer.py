#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Request and response body serialization.

Redmine accepts XML for most create/update calls and answers in either
JSON or XML. This module converts between those wire formats and plain
Python values (dicts, lists and scalars).

XML request bodies follow the server's conventions:

    * list values get a ``type="array"`` attribute and one child per item,
      named after the singular of the key (``watcher_user_ids`` holds
      ``watcher_user_id`` elements, ``uploads`` holds ``upload`` elements);
    * ``custom_fields`` entries become ``custom_field`` elements carrying
      ``name``, ``field_format`` and ``id`` attributes;
    * text is escaped for ``&``, ``<`` and ``>`` only. Quotes are sent
      as-is, which the server accepts.

Example::

    from redmineone.serializer import encode_xml, decode

    body = encode_xml("issue", {"subject": "Crash", "watcher_user_ids": [5, 25]})
    # <?xml version="1.0"?>
    # <issue><subject>Crash</subject><watcher_user_ids type="array">
    # <watcher_user_id>5</watcher_user_id>...</watcher_user_ids></issue>

    decode(b'{"issue": {"id": 1}}', "application/json")
    # {"issue": {"id": 1}}
"""
import json
import re
import xml.etree.ElementTree as ET
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlencode

import defusedxml
import defusedxml.ElementTree as SafeET

from redmineone.custom_fields import CustomField, is_multiple_value, is_upload_value
from redmineone.exceptions import SerializerError
from redmineone.params import Encoding
from redmineone.resolver import NOT_FOUND


XML_DECLARATION = '<?xml version="1.0"?>'

# Outside the XML 1.0 Char production
_INVALID_XML_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

Body = Union[bytes, str]


def _as_text(body: Body) -> str:
    if isinstance(body, bytes):
        return body.decode("utf-8")
    return body


# =============================================================================
# JSON
# =============================================================================

def encode_json(value: Any) -> str:
    """Encode a value as a JSON request body.

    :param value: Dict, list or scalar
    :return: JSON text
    :raises SerializerError: If the value holds something JSON cannot express
    """
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as e:
        raise SerializerError(
            message=f'Error "{e}" while encoding JSON',
            kind=SerializerError.UNSERIALIZABLE,
            raw=value,
        ) from e


def decode_json(body: Body) -> Any:
    """Decode a JSON response body.

    :param body: Raw body
    :return: The decoded value, which may be a scalar
    :raises SerializerError: If the body is not valid JSON
    """
    try:
        return json.loads(_as_text(body))
    except (UnicodeDecodeError, ValueError) as e:
        raise SerializerError(
            message=f'Error "{e}" while decoding JSON: {_as_text_lossy(body)}',
            raw=body,
        ) from e


def _as_text_lossy(body: Body) -> str:
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


# =============================================================================
# XML encoding
# =============================================================================

def singularize(key: str) -> str:
    """Return the element name used for the items of a list field.

    :param key: Plural field name (e.g. ``watcher_user_ids``)
    :return: Singular item name (e.g. ``watcher_user_id``)
    """
    if key.endswith("ies"):
        return key[:-3] + "y"
    if key.endswith("s"):
        return key[:-1]
    return key


def _to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if value is NOT_FOUND:
        return "false"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        value = value.decode("utf-8")
    text = str(value)
    if _INVALID_XML_CHARS.search(text):
        raise SerializerError(
            message=f"Characters not allowed in XML: {text!r}",
            kind=SerializerError.UNSERIALIZABLE,
            raw=value,
        )
    return text


def _infer_encoding(key: str, value: Any) -> str:
    if key == "custom_fields" and is_multiple_value(value):
        return Encoding.CUSTOM_FIELD_LIST
    if key == "uploads" and is_multiple_value(value):
        return Encoding.UPLOAD_LIST
    if is_multiple_value(value):
        if any(isinstance(item, Mapping) for item in value):
            return Encoding.ARRAY_OF_OBJECT
        return Encoding.ARRAY_OF_SCALAR
    return Encoding.PLAIN


def _fill_element(element: ET.Element, value: Any, hints: Mapping[str, str]) -> None:
    if isinstance(value, CustomField):
        value = value.to_dict()
    if isinstance(value, Mapping):
        for key, child in value.items():
            _append_child(element, str(key), child, hints)
    else:
        element.text = _to_text(value)


def _append_child(
    parent: ET.Element,
    key: str,
    value: Any,
    hints: Mapping[str, str],
) -> None:
    encoding = hints.get(key) or _infer_encoding(key, value)

    if encoding == Encoding.CUSTOM_FIELD_LIST:
        _append_custom_fields(parent, key, value or [])
        return

    if encoding in (Encoding.ARRAY_OF_SCALAR, Encoding.ARRAY_OF_OBJECT, Encoding.UPLOAD_LIST):
        wrapper = ET.SubElement(parent, key, {"type": "array"})
        item_tag = "upload" if encoding == Encoding.UPLOAD_LIST else singularize(key)
        for item in value or []:
            _fill_element(ET.SubElement(wrapper, item_tag), item, {})
        return

    _fill_element(ET.SubElement(parent, key), value, {})


def _append_custom_fields(parent: ET.Element, key: str, fields: Any) -> None:
    wrapper = ET.SubElement(parent, key, {"type": "array"})
    for entry in fields:
        if isinstance(entry, CustomField):
            entry = entry.to_dict()
        if not isinstance(entry, Mapping) or entry.get("id") is None:
            raise SerializerError(
                message=f"Custom field entries need an `id`: {entry!r}",
                kind=SerializerError.UNSERIALIZABLE,
                raw=entry,
            )

        node = ET.SubElement(wrapper, "custom_field")
        if entry.get("name") is not None:
            node.set("name", _to_text(entry["name"]))
        if entry.get("field_format") is not None:
            node.set("field_format", _to_text(entry["field_format"]))
        node.set("id", _to_text(entry["id"]))

        value = entry.get("value")
        if is_upload_value(value):
            holder = ET.SubElement(node, "value")
            for name, item in value.items():
                ET.SubElement(holder, str(name)).text = _to_text(item)
        elif is_multiple_value(value) or isinstance(value, Mapping):
            # Any other mapping is a keyed multi-value list; only its values are sent
            items = value.values() if isinstance(value, Mapping) else value
            node.set("multiple", "true")
            for item in items:
                ET.SubElement(node, "value").text = _to_text(item)
        else:
            ET.SubElement(node, "value").text = _to_text(value)


def encode_xml(
    tag: str,
    value: Any,
    hints: Optional[Mapping[str, str]] = None,
) -> str:
    """Encode a value as an XML request body.

    :param tag: Root element name (e.g. ``issue``)
    :param value: Mapping of fields, or a scalar for single-value bodies
        such as ``<user_id>10</user_id>``
    :param hints: Optional ``field -> Encoding`` overrides for top-level
        fields; fields without a hint are encoded by inference
    :return: XML text, declaration included
    :raises SerializerError: If a custom field entry has no id, or text
        holds characters XML 1.0 cannot carry
    """
    root = ET.Element(tag)
    _fill_element(root, value, hints or {})
    return XML_DECLARATION + "\n" + ET.tostring(root, encoding="unicode") + "\n"


# =============================================================================
# XML decoding
# =============================================================================

def _project_element(element: ET.Element, siblings: Dict[str, Any]) -> Any:
    attributes = dict(element.attrib)

    if attributes.get("type") == "array":
        del attributes["type"]
        for name, attr_value in attributes.items():
            siblings.setdefault(name, attr_value)
        # Arrays nested in arrays fold into the same enclosing mapping
        return [_project_element(child, siblings) for child in element]

    children = list(element)
    if not children and not attributes:
        return element.text or ""

    result: Dict[str, Any] = dict(attributes)
    repeated = set()
    for child in children:
        projected = _project_element(child, result)
        if child.tag not in result:
            result[child.tag] = projected
        elif child.tag in repeated:
            result[child.tag].append(projected)
        else:
            result[child.tag] = [result[child.tag], projected]
            repeated.add(child.tag)

    text = (element.text or "").strip()
    if text and not children:
        result["value"] = text
    return result


def decode_xml(body: Body) -> Dict[str, Any]:
    """Decode an XML response body into ``{root_tag: projection}``.

    ``type="array"`` elements become lists; other attributes of an array
    element (``total_count``, ``offset``, ``limit``) are folded into the
    enclosing mapping, arrays nested directly in arrays included. Elements
    with attributes or children become dicts, and repeated children are
    collected into lists. Leaf text stays a string.

    :param body: Raw body
    :return: The decoded mapping
    :raises SerializerError: If the body is not well-formed XML
    """
    try:
        root = SafeET.fromstring(body)
    except (ET.ParseError, defusedxml.DefusedXmlException) as e:
        raise SerializerError(
            message=f'Error "{e}" while decoding XML: {_as_text_lossy(body)}',
            raw=body,
        ) from e

    pagination: Dict[str, Any] = {}
    projected = _project_element(root, pagination)
    result: Dict[str, Any] = {root.tag: projected}
    for name, value in pagination.items():
        result.setdefault(name, value)
    return result


def decode(body: Body, content_type: str) -> Any:
    """Decode a response body according to its content type.

    :param body: Raw body
    :param content_type: Value of the response's Content-Type header
    :return: The decoded value, or the body text for other content types
    :raises SerializerError: If the body is malformed for its format
    """
    content_type = (content_type or "").lower()
    if "json" in content_type:
        return decode_json(body)
    if "xml" in content_type:
        return decode_xml(body)
    return _as_text_lossy(body)


# =============================================================================
# Paths
# =============================================================================

def build_path(path: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Append url-encoded query parameters to a request path.

    An ``include`` list is joined with commas before encoding.

    :param path: Request path (e.g. ``/issues.json``)
    :param params: Query parameters
    :return: Path with query string
    """
    if not params:
        return path

    query = {}
    for key, value in params.items():
        if value is None:
            continue
        if key == "include" and is_multiple_value(value):
            value = ",".join(str(item) for item in value)
        elif isinstance(value, bool):
            value = "true" if value else "false"
        query[key] = value

    if not query:
        return path
    separator = "&" if "?" in path else "?"
    return path + separator + urlencode(query, doseq=True)
