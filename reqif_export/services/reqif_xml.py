"""
ReqIF XML vocabulary shared by ReqIFLoader and ReqIFWriter.

Element names are matched on their local name, so documents written with a
prefixed or a default ReqIF namespace read the same.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from typing import Iterator, Optional

from reqif_export.models.reqif import (
    AttributeDefinitionBoolean,
    AttributeDefinitionDate,
    AttributeDefinitionEnumeration,
    AttributeDefinitionInteger,
    AttributeDefinitionReal,
    AttributeDefinitionString,
    AttributeDefinitionXHTML,
    AttributeValueBoolean,
    AttributeValueDate,
    AttributeValueEnumeration,
    AttributeValueInteger,
    AttributeValueReal,
    AttributeValueString,
    AttributeValueXHTML,
    DatatypeDefinitionBoolean,
    DatatypeDefinitionDate,
    DatatypeDefinitionEnumeration,
    DatatypeDefinitionInteger,
    DatatypeDefinitionReal,
    DatatypeDefinitionString,
    DatatypeDefinitionXHTML,
    RelationGroupType,
    SpecificationType,
    SpecObjectType,
    SpecRelationType,
)

REQIF_NS = "http://www.omg.org/spec/ReqIF/20110401/reqif.xsd"
XHTML_NS = "http://www.w3.org/1999/xhtml"
XML_LANG = "{http://www.w3.org/XML/1998/namespace}lang"

ET.register_namespace("xhtml", XHTML_NS)
ET.register_namespace("reqif", REQIF_NS)

# Suffix of DATATYPE-DEFINITION-*, ATTRIBUTE-DEFINITION-* and ATTRIBUTE-VALUE-*
DATATYPE_KINDS = {
    "BOOLEAN": DatatypeDefinitionBoolean,
    "DATE": DatatypeDefinitionDate,
    "ENUMERATION": DatatypeDefinitionEnumeration,
    "INTEGER": DatatypeDefinitionInteger,
    "REAL": DatatypeDefinitionReal,
    "STRING": DatatypeDefinitionString,
    "XHTML": DatatypeDefinitionXHTML,
}

ATTRIBUTE_DEFINITION_KINDS = {
    "BOOLEAN": AttributeDefinitionBoolean,
    "DATE": AttributeDefinitionDate,
    "ENUMERATION": AttributeDefinitionEnumeration,
    "INTEGER": AttributeDefinitionInteger,
    "REAL": AttributeDefinitionReal,
    "STRING": AttributeDefinitionString,
    "XHTML": AttributeDefinitionXHTML,
}

ATTRIBUTE_VALUE_KINDS = {
    "BOOLEAN": AttributeValueBoolean,
    "DATE": AttributeValueDate,
    "ENUMERATION": AttributeValueEnumeration,
    "INTEGER": AttributeValueInteger,
    "REAL": AttributeValueReal,
    "STRING": AttributeValueString,
    "XHTML": AttributeValueXHTML,
}

SPEC_TYPE_TAGS = {
    "SPEC-OBJECT-TYPE": SpecObjectType,
    "SPECIFICATION-TYPE": SpecificationType,
    "SPEC-RELATION-TYPE": SpecRelationType,
    "RELATION-GROUP-TYPE": RelationGroupType,
}


def kind_of(klass: type, kinds: dict[str, type]) -> str:
    """Reverse lookup of a kind table, honouring subclasses."""
    for kind, candidate in kinds.items():
        if issubclass(klass, candidate):
            return kind
    raise KeyError(klass.__name__)


# ── Element helpers ──────────────────────────────────────


def local_name(element: ET.Element) -> str:
    if not isinstance(element.tag, str):
        return ""
    return element.tag.rsplit("}", 1)[-1]


def child(element: Optional[ET.Element], name: str) -> Optional[ET.Element]:
    if element is None:
        return None
    for candidate in element:
        if local_name(candidate) == name:
            return candidate
    return None


def children(element: Optional[ET.Element], name: Optional[str] = None) -> Iterator[ET.Element]:
    if element is None:
        return
    for candidate in element:
        if not isinstance(candidate.tag, str):
            continue
        if name is None or local_name(candidate) == name:
            yield candidate


def path(element: Optional[ET.Element], *names: str) -> Optional[ET.Element]:
    for name in names:
        element = child(element, name)
    return element


def text_of(element: Optional[ET.Element]) -> Optional[str]:
    if element is None or element.text is None:
        return None
    return element.text.strip()


def reference(element: Optional[ET.Element]) -> Optional[str]:
    """Text of the single *-REF child of `element`."""
    for ref in children(element):
        if local_name(ref).endswith("-REF"):
            return text_of(ref)
    return None


def inner_xml(element: Optional[ET.Element]) -> str:
    if element is None:
        return ""
    parts = [element.text or ""]
    parts.extend(ET.tostring(sub, encoding="unicode") for sub in element)
    return "".join(parts)


# ── Scalars ──────────────────────────────────────────────


def parse_datetime(text: Optional[str]) -> Optional[datetime]:
    if not text:
        return None
    return datetime.fromisoformat(text.strip())


def format_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(timespec="milliseconds")


def parse_bool(text: Optional[str]) -> Optional[bool]:
    if text is None:
        return None
    return text.strip().lower() in ("true", "1")


def format_bool(value: bool) -> str:
    return "true" if value else "false"
