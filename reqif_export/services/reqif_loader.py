"""
ReqIF Loader — reads a .reqif or .reqifz file into the ReqIF object model.
"""

from __future__ import annotations

import logging
import time
import xml.etree.ElementTree as ET
import zipfile
from pathlib import Path
from typing import Any, Optional

from reqif_export.models.reqif import (
    AlternativeId,
    AttributeDefinition,
    AttributeDefinitionEnumeration,
    AttributeValue,
    AttributeValueEnumeration,
    AttributeValueXHTML,
    DatatypeDefinition,
    DatatypeDefinitionEnumeration,
    DatatypeDefinitionInteger,
    DatatypeDefinitionReal,
    DatatypeDefinitionString,
    EmbeddedValue,
    EnumValue,
    RelationGroup,
    ReqIF,
    ReqIFContent,
    ReqIFHeader,
    ReqIFToolExtension,
    SpecHierarchy,
    Specification,
    SpecObject,
    SpecRelation,
    SpecType,
)
from reqif_export.services.reqif_xml import (
    ATTRIBUTE_DEFINITION_KINDS,
    ATTRIBUTE_VALUE_KINDS,
    DATATYPE_KINDS,
    SPEC_TYPE_TAGS,
    XML_LANG,
    child,
    children,
    inner_xml,
    local_name,
    parse_bool,
    parse_datetime,
    path,
    reference,
    text_of,
)

logger = logging.getLogger(__name__)


class ReqIFLoader:
    """Reads ReqIF documents (.reqif, or .reqifz archives holding one)."""

    def load(self, location: str | Path) -> ReqIF:
        t0 = time.perf_counter()
        location = Path(location)
        suffix = location.suffix.lower()

        if suffix == ".reqif":
            root = ET.parse(location).getroot()
        elif suffix == ".reqifz":
            root = ET.fromstring(_read_archive(location))
        else:
            raise ValueError(f"Unsupported ReqIF file extension '{location.suffix}': {location}")

        reqif = self.read(root)
        elapsed_ms = (time.perf_counter() - t0) * 1000
        logger.info(f"{location} read in {elapsed_ms:.0f} [ms]")
        return reqif

    def loads(self, xml: str | bytes) -> ReqIF:
        return self.read(ET.fromstring(xml))

    def read(self, root: ET.Element) -> ReqIF:
        if local_name(root) != "REQ-IF":
            raise ValueError(f"Not a ReqIF document, root element is <{local_name(root)}>")

        content = path(root, "CORE-CONTENT", "REQ-IF-CONTENT")

        return ReqIF(
            the_header=self._read_header(path(root, "THE-HEADER", "REQ-IF-HEADER")),
            core_content=self._read_content(content),
            tool_extensions=[
                ReqIFToolExtension(content=inner_xml(extension))
                for extension in children(child(root, "TOOL-EXTENSIONS"), "REQ-IF-TOOL-EXTENSION")
            ],
            lang=root.get(XML_LANG),
        )

    # ── Header ───────────────────────────────────────────

    def _read_header(self, element: Optional[ET.Element]) -> ReqIFHeader:
        if element is None:
            return ReqIFHeader()

        header: dict[str, Any] = {
            "comment": text_of(child(element, "COMMENT")),
            "repository_id": text_of(child(element, "REPOSITORY-ID")),
            "req_if_tool_id": text_of(child(element, "REQ-IF-TOOL-ID")),
            "req_if_version": text_of(child(element, "REQ-IF-VERSION")) or "1.0",
            "source_tool_id": text_of(child(element, "SOURCE-TOOL-ID")),
            "title": text_of(child(element, "TITLE")),
        }
        if element.get("IDENTIFIER"):
            header["identifier"] = element.get("IDENTIFIER")
        creation_time = parse_datetime(text_of(child(element, "CREATION-TIME")))
        if creation_time is not None:
            header["creation_time"] = creation_time
        return ReqIFHeader(**header)

    # ── Content ──────────────────────────────────────────

    def _read_content(self, element: Optional[ET.Element]) -> ReqIFContent:
        if element is None:
            return ReqIFContent()

        return ReqIFContent(
            datatypes=[self._read_datatype(e) for e in children(child(element, "DATATYPES"))],
            spec_types=[self._read_spec_type(e) for e in children(child(element, "SPEC-TYPES"))],
            spec_objects=[
                self._read_spec_object(e) for e in children(child(element, "SPEC-OBJECTS"), "SPEC-OBJECT")
            ],
            spec_relations=[
                self._read_spec_relation(e) for e in children(child(element, "SPEC-RELATIONS"), "SPEC-RELATION")
            ],
            specifications=[
                self._read_specification(e)
                for e in children(child(element, "SPECIFICATIONS"), "SPECIFICATION")
            ],
            spec_relation_groups=[
                self._read_relation_group(e)
                for e in children(child(element, "SPEC-RELATION-GROUPS"), "RELATION-GROUP")
            ],
        )

    def _read_datatype(self, element: ET.Element) -> DatatypeDefinition:
        kind = local_name(element).removeprefix("DATATYPE-DEFINITION-")
        if kind not in DATATYPE_KINDS:
            raise ValueError(f"Unknown datatype definition <{local_name(element)}>")

        datatype = DATATYPE_KINDS[kind](**_identifiable(element))

        if isinstance(datatype, DatatypeDefinitionEnumeration):
            datatype.specified_values = [
                self._read_enum_value(e, datatype.identifier)
                for e in children(child(element, "SPECIFIED-VALUES"), "ENUM-VALUE")
            ]
        elif isinstance(datatype, DatatypeDefinitionInteger):
            datatype.min = _optional(element.get("MIN"), int)
            datatype.max = _optional(element.get("MAX"), int)
        elif isinstance(datatype, DatatypeDefinitionReal):
            datatype.accuracy = _optional(element.get("ACCURACY"), int)
            datatype.min = _optional(element.get("MIN"), float)
            datatype.max = _optional(element.get("MAX"), float)
        elif isinstance(datatype, DatatypeDefinitionString):
            datatype.max_length = _optional(element.get("MAX-LENGTH"), int)

        return datatype

    def _read_enum_value(self, element: ET.Element, enumeration_identifier: str) -> EnumValue:
        enum_value = EnumValue(**_identifiable(element), datatype_definition_enumeration=enumeration_identifier)
        embedded = path(element, "PROPERTIES", "EMBEDDED-VALUE")
        if embedded is not None:
            enum_value.properties = EmbeddedValue(
                key=_optional(embedded.get("KEY"), int) or 0,
                other_content=embedded.get("OTHER-CONTENT", ""),
            )
        return enum_value

    def _read_spec_type(self, element: ET.Element) -> SpecType:
        spec_type_class = SPEC_TYPE_TAGS.get(local_name(element))
        if spec_type_class is None:
            raise ValueError(f"Unknown spec type <{local_name(element)}>")

        return spec_type_class(
            **_identifiable(element),
            spec_attributes=[
                self._read_attribute_definition(e) for e in children(child(element, "SPEC-ATTRIBUTES"))
            ],
        )

    def _read_attribute_definition(self, element: ET.Element) -> AttributeDefinition:
        kind = local_name(element).removeprefix("ATTRIBUTE-DEFINITION-")
        if kind not in ATTRIBUTE_DEFINITION_KINDS:
            raise ValueError(f"Unknown attribute definition <{local_name(element)}>")

        definition = ATTRIBUTE_DEFINITION_KINDS[kind](
            **_identifiable(element),
            datatype_ref=reference(child(element, "TYPE")) or "",
            is_editable=parse_bool(element.get("IS-EDITABLE")),
        )
        if isinstance(definition, AttributeDefinitionEnumeration):
            definition.multi_valued = bool(parse_bool(element.get("MULTI-VALUED")))
        return definition

    # ── Spec elements ────────────────────────────────────

    def _read_spec_object(self, element: ET.Element) -> SpecObject:
        return SpecObject(
            **_identifiable(element),
            type_ref=reference(child(element, "TYPE")) or "",
            values=self._read_values(element),
        )

    def _read_spec_relation(self, element: ET.Element) -> SpecRelation:
        return SpecRelation(
            **_identifiable(element),
            type_ref=reference(child(element, "TYPE")) or "",
            values=self._read_values(element),
            source_ref=reference(child(element, "SOURCE")) or "",
            target_ref=reference(child(element, "TARGET")) or "",
        )

    def _read_specification(self, element: ET.Element) -> Specification:
        return Specification(
            **_identifiable(element),
            type_ref=reference(child(element, "TYPE")) or "",
            values=self._read_values(element),
            children=[self._read_hierarchy(e) for e in children(child(element, "CHILDREN"), "SPEC-HIERARCHY")],
        )

    def _read_hierarchy(self, element: ET.Element) -> SpecHierarchy:
        return SpecHierarchy(
            **_identifiable(element),
            object_ref=reference(child(element, "OBJECT")) or "",
            is_editable=parse_bool(element.get("IS-EDITABLE")),
            is_table_internal=parse_bool(element.get("IS-TABLE-INTERNAL")),
            children=[self._read_hierarchy(e) for e in children(child(element, "CHILDREN"), "SPEC-HIERARCHY")],
        )

    def _read_relation_group(self, element: ET.Element) -> RelationGroup:
        return RelationGroup(
            **_identifiable(element),
            type_ref=reference(child(element, "TYPE")) or "",
            source_specification_ref=reference(child(element, "SOURCE-SPECIFICATION")) or "",
            target_specification_ref=reference(child(element, "TARGET-SPECIFICATION")) or "",
            spec_relations=[
                text_of(ref) or "" for ref in children(child(element, "SPEC-RELATIONS"), "SPEC-RELATION-REF")
            ],
        )

    def _read_values(self, element: ET.Element) -> list[AttributeValue]:
        return [self._read_attribute_value(e) for e in children(child(element, "VALUES"))]

    def _read_attribute_value(self, element: ET.Element) -> AttributeValue:
        kind = local_name(element).removeprefix("ATTRIBUTE-VALUE-")
        value_class = ATTRIBUTE_VALUE_KINDS.get(kind)
        if value_class is None:
            raise ValueError(f"Unknown attribute value <{local_name(element)}>")

        definition_ref = reference(child(element, "DEFINITION")) or ""

        if value_class is AttributeValueEnumeration:
            return AttributeValueEnumeration(
                definition_ref=definition_ref,
                values=[text_of(ref) or "" for ref in children(child(element, "VALUES"), "ENUM-VALUE-REF")],
            )

        if value_class is AttributeValueXHTML:
            original = child(element, "THE-ORIGINAL-VALUE")
            return AttributeValueXHTML(
                definition_ref=definition_ref,
                the_value=inner_xml(child(element, "THE-VALUE")).strip(),
                the_original_value=inner_xml(original).strip() if original is not None else None,
            )

        the_value = element.get("THE-VALUE")
        if kind == "BOOLEAN":
            return value_class(definition_ref=definition_ref, the_value=bool(parse_bool(the_value)))
        if kind == "DATE":
            return value_class(definition_ref=definition_ref, the_value=parse_datetime(the_value))
        if kind == "STRING":
            return value_class(definition_ref=definition_ref, the_value=the_value or "")
        return value_class(definition_ref=definition_ref, the_value=the_value)


# ── Helpers (module-level) ───────────────────────────────


def _read_archive(location: Path) -> bytes:
    with zipfile.ZipFile(location) as archive:
        for name in archive.namelist():
            if name.lower().endswith(".reqif"):
                return archive.read(name)
    raise ValueError(f"No .reqif file found inside {location}")


def _identifiable(element: ET.Element) -> dict[str, Any]:
    """The Identifiable properties carried as XML attributes and children."""
    properties: dict[str, Any] = {
        "long_name": element.get("LONG-NAME"),
        "description": element.get("DESC"),
    }
    if element.get("IDENTIFIER"):
        properties["identifier"] = element.get("IDENTIFIER")
    last_change = parse_datetime(element.get("LAST-CHANGE"))
    if last_change is not None:
        properties["last_change"] = last_change

    alternative = path(element, "ALTERNATIVE-ID", "ALTERNATIVE-ID")
    if alternative is not None and alternative.get("IDENTIFIER"):
        properties["alternative_id"] = AlternativeId(identifier=alternative.get("IDENTIFIER"))
    return properties


def _optional(text: Optional[str], parse):
    if text is None or text == "":
        return None
    return parse(text)
