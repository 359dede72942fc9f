"""
ReqIF Writer — serializes a ReqIF document to a .reqif file and a .reqifz
archive that holds that file as its single entry.
"""

from __future__ import annotations

import logging
import time
import xml.etree.ElementTree as ET
import zipfile
from pathlib import Path
from typing import Optional

from reqif_export.models.reqif import (
    AttributeDefinition,
    AttributeDefinitionEnumeration,
    AttributeValue,
    AttributeValueBoolean,
    AttributeValueDate,
    AttributeValueEnumeration,
    AttributeValueXHTML,
    DatatypeDefinition,
    DatatypeDefinitionEnumeration,
    DatatypeDefinitionInteger,
    DatatypeDefinitionReal,
    DatatypeDefinitionString,
    EnumValue,
    Identifiable,
    RelationGroup,
    ReqIF,
    ReqIFContent,
    ReqIFHeader,
    SpecElementWithAttributes,
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
    REQIF_NS,
    SPEC_TYPE_TAGS,
    XHTML_NS,
    XML_LANG,
    format_bool,
    format_datetime,
    kind_of,
)

logger = logging.getLogger(__name__)

_SPEC_TYPE_NAMES = {klass: tag for tag, klass in SPEC_TYPE_TAGS.items()}


class ReqIFWriter:
    """Writes ReqIF documents to disk."""

    def write(self, reqif: ReqIF, target_location: str | Path) -> tuple[Path, Path]:
        """
        Write `<target>.reqif` and `<target>.reqifz`, replacing existing files.
        Returns both paths.
        """
        t0 = time.perf_counter()
        target = Path(target_location)
        reqif_path = target.with_suffix(".reqif")
        reqifz_path = target.with_suffix(".reqifz")
        reqif_path.parent.mkdir(parents=True, exist_ok=True)

        if reqif_path.exists():
            reqif_path.unlink()
        reqif_path.write_bytes(self.to_xml(reqif))

        if reqifz_path.exists():
            reqifz_path.unlink()
        with zipfile.ZipFile(reqifz_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            archive.write(reqif_path, arcname=reqif_path.name)

        elapsed_ms = (time.perf_counter() - t0) * 1000
        logger.info(f"ReqIF written to {reqif_path} and {reqifz_path} in {elapsed_ms:.0f} [ms]")
        return reqif_path, reqifz_path

    def to_xml(self, reqif: ReqIF) -> bytes:
        root = ET.Element("REQ-IF", {"xmlns": REQIF_NS})
        if reqif.lang:
            root.set(XML_LANG, reqif.lang)

        self._write_header(ET.SubElement(root, "THE-HEADER"), reqif.the_header)
        self._write_content(
            ET.SubElement(ET.SubElement(root, "CORE-CONTENT"), "REQ-IF-CONTENT"), reqif.core_content
        )

        if reqif.tool_extensions:
            extensions = ET.SubElement(root, "TOOL-EXTENSIONS")
            for tool_extension in reqif.tool_extensions:
                extension = ET.SubElement(extensions, "REQ-IF-TOOL-EXTENSION")
                _append_fragment(extension, tool_extension.content)

        return ET.tostring(root, encoding="utf-8", xml_declaration=True)

    # ── Header ───────────────────────────────────────────

    def _write_header(self, parent: ET.Element, header: ReqIFHeader) -> None:
        element = ET.SubElement(parent, "REQ-IF-HEADER", {"IDENTIFIER": header.identifier})
        _text_child(element, "COMMENT", header.comment)
        _text_child(element, "CREATION-TIME", format_datetime(header.creation_time))
        _text_child(element, "REPOSITORY-ID", header.repository_id)
        _text_child(element, "REQ-IF-TOOL-ID", header.req_if_tool_id)
        _text_child(element, "REQ-IF-VERSION", header.req_if_version)
        _text_child(element, "SOURCE-TOOL-ID", header.source_tool_id)
        _text_child(element, "TITLE", header.title)

    # ── Content ──────────────────────────────────────────

    def _write_content(self, element: ET.Element, content: ReqIFContent) -> None:
        datatypes = ET.SubElement(element, "DATATYPES")
        for datatype in content.datatypes:
            self._write_datatype(datatypes, datatype)

        spec_types = ET.SubElement(element, "SPEC-TYPES")
        for spec_type in content.spec_types:
            self._write_spec_type(spec_types, spec_type)

        spec_objects = ET.SubElement(element, "SPEC-OBJECTS")
        for spec_object in content.spec_objects:
            self._write_spec_object(spec_objects, spec_object)

        spec_relations = ET.SubElement(element, "SPEC-RELATIONS")
        for spec_relation in content.spec_relations:
            self._write_spec_relation(spec_relations, spec_relation)

        specifications = ET.SubElement(element, "SPECIFICATIONS")
        for specification in content.specifications:
            self._write_specification(specifications, specification)

        relation_groups = ET.SubElement(element, "SPEC-RELATION-GROUPS")
        for relation_group in content.spec_relation_groups:
            self._write_relation_group(relation_groups, relation_group)

    def _write_datatype(self, parent: ET.Element, datatype: DatatypeDefinition) -> None:
        kind = kind_of(type(datatype), DATATYPE_KINDS)
        element = _identifiable(parent, f"DATATYPE-DEFINITION-{kind}", datatype)

        if isinstance(datatype, DatatypeDefinitionEnumeration):
            values = ET.SubElement(element, "SPECIFIED-VALUES")
            for enum_value in datatype.specified_values:
                self._write_enum_value(values, enum_value)
        elif isinstance(datatype, DatatypeDefinitionInteger):
            _optional_attribute(element, "MIN", datatype.min)
            _optional_attribute(element, "MAX", datatype.max)
        elif isinstance(datatype, DatatypeDefinitionReal):
            _optional_attribute(element, "ACCURACY", datatype.accuracy)
            _optional_attribute(element, "MIN", datatype.min)
            _optional_attribute(element, "MAX", datatype.max)
        elif isinstance(datatype, DatatypeDefinitionString):
            _optional_attribute(element, "MAX-LENGTH", datatype.max_length)

    def _write_enum_value(self, parent: ET.Element, enum_value: EnumValue) -> None:
        element = _identifiable(parent, "ENUM-VALUE", enum_value)
        if enum_value.properties is not None:
            ET.SubElement(
                ET.SubElement(element, "PROPERTIES"),
                "EMBEDDED-VALUE",
                {"KEY": str(enum_value.properties.key), "OTHER-CONTENT": enum_value.properties.other_content},
            )

    def _write_spec_type(self, parent: ET.Element, spec_type: SpecType) -> None:
        tag = next(t for klass, t in _SPEC_TYPE_NAMES.items() if isinstance(spec_type, klass))
        element = _identifiable(parent, tag, spec_type)
        if spec_type.spec_attributes:
            attributes = ET.SubElement(element, "SPEC-ATTRIBUTES")
            for definition in spec_type.spec_attributes:
                self._write_attribute_definition(attributes, definition)

    def _write_attribute_definition(self, parent: ET.Element, definition: AttributeDefinition) -> None:
        kind = kind_of(type(definition), ATTRIBUTE_DEFINITION_KINDS)
        element = _identifiable(parent, f"ATTRIBUTE-DEFINITION-{kind}", definition)
        if definition.is_editable is not None:
            element.set("IS-EDITABLE", format_bool(definition.is_editable))
        if isinstance(definition, AttributeDefinitionEnumeration):
            element.set("MULTI-VALUED", format_bool(definition.multi_valued))
        _reference(element, "TYPE", f"DATATYPE-DEFINITION-{kind}-REF", definition.datatype_ref)

    # ── Spec elements ────────────────────────────────────

    def _write_spec_object(self, parent: ET.Element, spec_object: SpecObject) -> None:
        element = _identifiable(parent, "SPEC-OBJECT", spec_object)
        self._write_values(element, spec_object)
        _reference(element, "TYPE", "SPEC-OBJECT-TYPE-REF", spec_object.type_ref)

    def _write_spec_relation(self, parent: ET.Element, spec_relation: SpecRelation) -> None:
        element = _identifiable(parent, "SPEC-RELATION", spec_relation)
        self._write_values(element, spec_relation)
        _reference(element, "SOURCE", "SPEC-OBJECT-REF", spec_relation.source_ref)
        _reference(element, "TARGET", "SPEC-OBJECT-REF", spec_relation.target_ref)
        _reference(element, "TYPE", "SPEC-RELATION-TYPE-REF", spec_relation.type_ref)

    def _write_specification(self, parent: ET.Element, specification: Specification) -> None:
        element = _identifiable(parent, "SPECIFICATION", specification)
        self._write_values(element, specification)
        _reference(element, "TYPE", "SPECIFICATION-TYPE-REF", specification.type_ref)
        if specification.children:
            hierarchy_parent = ET.SubElement(element, "CHILDREN")
            for hierarchy in specification.children:
                self._write_hierarchy(hierarchy_parent, hierarchy)

    def _write_hierarchy(self, parent: ET.Element, hierarchy: SpecHierarchy) -> None:
        element = _identifiable(parent, "SPEC-HIERARCHY", hierarchy)
        if hierarchy.is_editable is not None:
            element.set("IS-EDITABLE", format_bool(hierarchy.is_editable))
        if hierarchy.is_table_internal is not None:
            element.set("IS-TABLE-INTERNAL", format_bool(hierarchy.is_table_internal))
        if hierarchy.children:
            hierarchy_parent = ET.SubElement(element, "CHILDREN")
            for sub in hierarchy.children:
                self._write_hierarchy(hierarchy_parent, sub)
        _reference(element, "OBJECT", "SPEC-OBJECT-REF", hierarchy.object_ref)

    def _write_relation_group(self, parent: ET.Element, relation_group: RelationGroup) -> None:
        element = _identifiable(parent, "RELATION-GROUP", relation_group)
        _reference(element, "SOURCE-SPECIFICATION", "SPECIFICATION-REF", relation_group.source_specification_ref)
        if relation_group.spec_relations:
            relations = ET.SubElement(element, "SPEC-RELATIONS")
            for identifier in relation_group.spec_relations:
                _text_child(relations, "SPEC-RELATION-REF", identifier)
        _reference(element, "TARGET-SPECIFICATION", "SPECIFICATION-REF", relation_group.target_specification_ref)
        _reference(element, "TYPE", "RELATION-GROUP-TYPE-REF", relation_group.type_ref)

    def _write_values(self, element: ET.Element, spec_element: SpecElementWithAttributes) -> None:
        if not spec_element.values:
            return
        values = ET.SubElement(element, "VALUES")
        for attribute_value in spec_element.values:
            self._write_attribute_value(values, attribute_value)

    def _write_attribute_value(self, parent: ET.Element, attribute_value: AttributeValue) -> None:
        kind = kind_of(type(attribute_value), ATTRIBUTE_VALUE_KINDS)
        element = ET.SubElement(parent, f"ATTRIBUTE-VALUE-{kind}")

        if isinstance(attribute_value, AttributeValueEnumeration):
            _reference(element, "DEFINITION", "ATTRIBUTE-DEFINITION-ENUMERATION-REF", attribute_value.definition_ref)
            values = ET.SubElement(element, "VALUES")
            for identifier in attribute_value.values:
                _text_child(values, "ENUM-VALUE-REF", identifier)
            return

        if isinstance(attribute_value, AttributeValueXHTML):
            _reference(element, "DEFINITION", "ATTRIBUTE-DEFINITION-XHTML-REF", attribute_value.definition_ref)
            if attribute_value.the_original_value is not None:
                _xhtml_child(element, "THE-ORIGINAL-VALUE", attribute_value.the_original_value)
            _xhtml_child(element, "THE-VALUE", attribute_value.the_value)
            return

        the_value = attribute_value.the_value
        if isinstance(attribute_value, AttributeValueBoolean):
            element.set("THE-VALUE", format_bool(the_value))
        elif isinstance(attribute_value, AttributeValueDate):
            if the_value is not None:
                element.set("THE-VALUE", format_datetime(the_value))
        elif the_value is not None:
            element.set("THE-VALUE", str(the_value))
        _reference(element, "DEFINITION", f"ATTRIBUTE-DEFINITION-{kind}-REF", attribute_value.definition_ref)


# ── Helpers (module-level) ───────────────────────────────


def _identifiable(parent: ET.Element, tag: str, identifiable: Identifiable) -> ET.Element:
    element = ET.SubElement(parent, tag, {"IDENTIFIER": identifiable.identifier})
    element.set("LAST-CHANGE", format_datetime(identifiable.last_change))
    if identifiable.long_name is not None:
        element.set("LONG-NAME", identifiable.long_name)
    if identifiable.description:
        element.set("DESC", identifiable.description)
    if identifiable.alternative_id is not None:
        ET.SubElement(
            ET.SubElement(element, "ALTERNATIVE-ID"),
            "ALTERNATIVE-ID",
            {"IDENTIFIER": identifiable.alternative_id.identifier},
        )
    return element


def _text_child(parent: ET.Element, tag: str, text: Optional[str]) -> None:
    if text is None:
        return
    ET.SubElement(parent, tag).text = text


def _reference(parent: ET.Element, tag: str, ref_tag: str, identifier: str) -> None:
    if not identifier:
        return
    ET.SubElement(ET.SubElement(parent, tag), ref_tag).text = identifier


def _optional_attribute(element: ET.Element, name: str, value) -> None:
    if value is not None:
        element.set(name, str(value))


def _xhtml_child(parent: ET.Element, tag: str, markup: str) -> None:
    """Embed XHTML markup; text without elements is wrapped in an xhtml div."""
    element = ET.SubElement(parent, tag)
    try:
        wrapper = ET.fromstring(f'<wrapper xmlns:xhtml="{XHTML_NS}">{markup}</wrapper>')
    except ET.ParseError:
        wrapper = None

    if wrapper is None or len(wrapper) == 0:
        div = ET.SubElement(element, f"{{{XHTML_NS}}}div")
        div.text = wrapper.text if wrapper is not None else markup
        return

    element.text = wrapper.text
    for sub in wrapper:
        element.append(sub)


def _append_fragment(parent: ET.Element, markup: str) -> None:
    """Re-embed raw XML kept from a loaded document."""
    if not markup.strip():
        return
    wrapper = ET.fromstring(f'<wrapper xmlns="{REQIF_NS}" xmlns:xhtml="{XHTML_NS}">{markup}</wrapper>')
    parent.text = wrapper.text
    for sub in wrapper:
        parent.append(sub)
