"""
Attribute value creation and coercion.

A source value is a single string; it is parsed into the native shape of the
destination attribute definition. The switch over parameter type variants in
`coerce_parameter_value` pairs with ScalarParameterTypeMappingRule.transform;
keep the two in lockstep.
"""

from __future__ import annotations

import html
import re
from datetime import datetime
from typing import Any, Optional

from reqif_export.exceptions import InvalidOperationError, NotSupportedError
from reqif_export.models.reqif import (
    AttributeDefinition,
    AttributeDefinitionBoolean,
    AttributeDefinitionDate,
    AttributeDefinitionEnumeration,
    AttributeDefinitionInteger,
    AttributeDefinitionReal,
    AttributeDefinitionString,
    AttributeDefinitionXHTML,
    AttributeValue,
    AttributeValueBoolean,
    AttributeValueDate,
    AttributeValueEnumeration,
    AttributeValueInteger,
    AttributeValueReal,
    AttributeValueString,
    AttributeValueXHTML,
    DatatypeDefinitionEnumeration,
    ReqIFContent,
)
from reqif_export.models.source import (
    BooleanParameterType,
    DateParameterType,
    DateTimeParameterType,
    EnumerationParameterType,
    QuantityKind,
    ScalarParameterType,
    TextParameterType,
)

XHTML_DIV_OPEN = "<xhtml:div>"
XHTML_DIV_CLOSE = "</xhtml:div>"

_TAG_PATTERN = re.compile(r"<.*?>", re.DOTALL)
_WRAPPER_OPEN_PATTERN = re.compile(r"^\s*<xhtml:div", re.IGNORECASE)
_WRAPPER_CLOSE_PATTERN = re.compile(r"</xhtml:div>\s*$", re.IGNORECASE)

ATTRIBUTE_VALUE_TYPES: dict[type[AttributeDefinition], type[AttributeValue]] = {
    AttributeDefinitionBoolean: AttributeValueBoolean,
    AttributeDefinitionDate: AttributeValueDate,
    AttributeDefinitionEnumeration: AttributeValueEnumeration,
    AttributeDefinitionInteger: AttributeValueInteger,
    AttributeDefinitionReal: AttributeValueReal,
    AttributeDefinitionString: AttributeValueString,
    AttributeDefinitionXHTML: AttributeValueXHTML,
}


# ── Text formatting ──────────────────────────────────────


def is_xhtml_wrapped(text: str) -> bool:
    lowered = text.strip().lower()
    return lowered.startswith(XHTML_DIV_OPEN[:-1]) and lowered.endswith(XHTML_DIV_CLOSE)


def normalize_xhtml_wrapper(text: str) -> str:
    """Lower-case the wrapping div so the `xhtml` prefix matches the declared namespace."""
    text = _WRAPPER_OPEN_PATTERN.sub(XHTML_DIV_OPEN[:-1], text, count=1)
    return _WRAPPER_CLOSE_PATTERN.sub(XHTML_DIV_CLOSE, text, count=1)


def plain_text(text: str) -> str:
    """HTML-decode and drop anything that looks like a tag."""
    return _TAG_PATTERN.sub("", html.unescape(text))


def format_text(text: str, add_xhtml_tags: bool) -> str:
    """
    Prepare free text for an XHTML attribute value: encode and wrap it once in
    an xhtml div, or reduce it to plain text when wrapping is switched off.
    """
    if not add_xhtml_tags:
        return plain_text(text)
    if is_xhtml_wrapped(text):
        return normalize_xhtml_wrapper(text)
    return f"{XHTML_DIV_OPEN}{html.escape(text)}{XHTML_DIV_CLOSE}"


def text_for(attribute_definition: AttributeDefinition, text: str, add_xhtml_tags: bool) -> str:
    if isinstance(attribute_definition, AttributeDefinitionXHTML):
        return format_text(text, add_xhtml_tags)
    if isinstance(attribute_definition, AttributeDefinitionString):
        return plain_text(text)
    raise InvalidOperationError(
        f"The attribute definition {attribute_definition.identifier} "
        f"({type(attribute_definition).__name__}) cannot hold text"
    )


# ── Attribute values ─────────────────────────────────────


def create_attribute_value(attribute_definition: AttributeDefinition, value: Any) -> AttributeValue:
    """Create the attribute value matching the kind of `attribute_definition`."""
    value_type = None
    for klass in type(attribute_definition).__mro__:
        value_type = ATTRIBUTE_VALUE_TYPES.get(klass)
        if value_type is not None:
            break

    if value_type is None:
        raise NotSupportedError(f"The {type(attribute_definition).__name__} type is not supported")

    if value_type is AttributeValueEnumeration:
        return AttributeValueEnumeration(definition_ref=attribute_definition.identifier, values=value)

    return value_type(definition_ref=attribute_definition.identifier, the_value=value)


def coerce_parameter_value(
    parameter_type: ScalarParameterType,
    raw: str,
    attribute_definition: AttributeDefinition,
    content: ReqIFContent,
    add_xhtml_tags: bool,
) -> Optional[Any]:
    """
    Parse `raw` into the value of an attribute value for `attribute_definition`.
    Returns None when the value cannot be expressed (unknown enumeration literal).
    """
    match parameter_type:
        case BooleanParameterType():
            return parse_bool(raw)
        case DateParameterType() | DateTimeParameterType():
            return parse_datetime(raw)
        case QuantityKind():
            return _parse_number(raw, attribute_definition)
        case EnumerationParameterType():
            return _match_enum_values(raw, attribute_definition, content)
        case TextParameterType():
            return text_for(attribute_definition, raw, add_xhtml_tags)
        case _:
            raise NotSupportedError(f"The {type(parameter_type).__name__} type is not supported")


def parse_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"'{raw}' is not a valid boolean value")


def parse_datetime(raw: str) -> datetime:
    return datetime.fromisoformat(raw.strip())


def _parse_number(raw: str, attribute_definition: AttributeDefinition) -> Any:
    if isinstance(attribute_definition, AttributeDefinitionInteger):
        return int(raw.strip())
    if isinstance(attribute_definition, AttributeDefinitionReal):
        return float(raw.strip())
    return raw


def _match_enum_values(
    raw: str,
    attribute_definition: AttributeDefinition,
    content: ReqIFContent,
) -> Optional[list[str]]:
    datatype = content.find_datatype(attribute_definition.datatype_ref)
    if not isinstance(datatype, DatatypeDefinitionEnumeration):
        return None

    for enum_value in datatype.specified_values:
        if enum_value.long_name == raw:
            return [enum_value.identifier]

    return None
