"""
ReqIF object model (OMG ReqIF 1.0).

Cross references are held as identifiers, never as object references:
an attribute definition names its datatype, an attribute value names its
definition, a hierarchy node names its spec object and an enum value names
the enumeration it belongs to. ReqIFContent resolves them on demand.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, TypeVar

from pydantic import BaseModel, Field

from reqif_export.utils.identifiers import new_identifier, utc_now


class AlternativeId(BaseModel):
    identifier: str


class Identifiable(BaseModel):
    identifier: str = Field(default_factory=new_identifier)
    long_name: Optional[str] = None
    description: Optional[str] = None
    last_change: datetime = Field(default_factory=utc_now)
    alternative_id: Optional[AlternativeId] = None


# ── Datatypes ────────────────────────────────────────────


class EmbeddedValue(BaseModel):
    key: int = 0
    other_content: str = ""


class EnumValue(Identifiable):
    properties: Optional[EmbeddedValue] = None
    datatype_definition_enumeration: Optional[str] = None


class DatatypeDefinition(Identifiable):
    """Base of all datatype definitions."""


class DatatypeDefinitionBoolean(DatatypeDefinition):
    pass


class DatatypeDefinitionDate(DatatypeDefinition):
    pass


class DatatypeDefinitionEnumeration(DatatypeDefinition):
    specified_values: list[EnumValue] = []


class DatatypeDefinitionInteger(DatatypeDefinition):
    min: Optional[int] = None
    max: Optional[int] = None


class DatatypeDefinitionReal(DatatypeDefinition):
    accuracy: Optional[int] = None
    min: Optional[float] = None
    max: Optional[float] = None


class DatatypeDefinitionString(DatatypeDefinition):
    max_length: Optional[int] = None


class DatatypeDefinitionXHTML(DatatypeDefinition):
    pass


# ── Attribute definitions & spec types ───────────────────


class AttributeDefinition(Identifiable):
    datatype_ref: str = ""
    is_editable: Optional[bool] = None


class AttributeDefinitionBoolean(AttributeDefinition):
    pass


class AttributeDefinitionDate(AttributeDefinition):
    pass


class AttributeDefinitionEnumeration(AttributeDefinition):
    multi_valued: bool = False


class AttributeDefinitionInteger(AttributeDefinition):
    pass


class AttributeDefinitionReal(AttributeDefinition):
    pass


class AttributeDefinitionString(AttributeDefinition):
    pass


class AttributeDefinitionXHTML(AttributeDefinition):
    pass


class SpecType(Identifiable):
    spec_attributes: list[AttributeDefinition] = []

    def find_attribute_definition(self, identifier: str) -> Optional[AttributeDefinition]:
        for attribute_definition in self.spec_attributes:
            if attribute_definition.identifier == identifier:
                return attribute_definition
        return None


class SpecObjectType(SpecType):
    pass


class SpecificationType(SpecType):
    pass


class SpecRelationType(SpecType):
    pass


class RelationGroupType(SpecType):
    pass


# ── Attribute values ─────────────────────────────────────


class AttributeValue(BaseModel):
    definition_ref: str


class AttributeValueBoolean(AttributeValue):
    the_value: bool = False


class AttributeValueDate(AttributeValue):
    the_value: Optional[datetime] = None


class AttributeValueEnumeration(AttributeValue):
    values: list[str] = []


class AttributeValueInteger(AttributeValue):
    the_value: Optional[int] = None


class AttributeValueReal(AttributeValue):
    the_value: Optional[float] = None


class AttributeValueString(AttributeValue):
    the_value: str = ""


class AttributeValueXHTML(AttributeValue):
    the_value: str = ""
    the_original_value: Optional[str] = None


# ── Spec elements ────────────────────────────────────────


class SpecElementWithAttributes(Identifiable):
    type_ref: str = ""
    values: list[AttributeValue] = []


class SpecObject(SpecElementWithAttributes):
    pass


class SpecHierarchy(Identifiable):
    object_ref: str = ""
    is_editable: Optional[bool] = None
    is_table_internal: Optional[bool] = None
    children: list[SpecHierarchy] = []


class Specification(SpecElementWithAttributes):
    children: list[SpecHierarchy] = []


class SpecRelation(SpecElementWithAttributes):
    source_ref: str = ""
    target_ref: str = ""


class RelationGroup(Identifiable):
    type_ref: str = ""
    source_specification_ref: str = ""
    target_specification_ref: str = ""
    spec_relations: list[str] = []


# ── Document ─────────────────────────────────────────────


class ReqIFToolExtension(BaseModel):
    """Tool specific content, kept as the raw XML of the extension's children."""
    content: str = ""


class ReqIFHeader(BaseModel):
    identifier: str = Field(default_factory=new_identifier)
    comment: Optional[str] = None
    creation_time: datetime = Field(default_factory=utc_now)
    repository_id: Optional[str] = None
    req_if_tool_id: Optional[str] = None
    req_if_version: str = "1.0"
    source_tool_id: Optional[str] = None
    title: Optional[str] = None


SpecTypeT = TypeVar("SpecTypeT", bound=SpecType)


class ReqIFContent(BaseModel):
    datatypes: list[DatatypeDefinition] = []
    spec_types: list[SpecType] = []
    spec_objects: list[SpecObject] = []
    spec_relations: list[SpecRelation] = []
    specifications: list[Specification] = []
    spec_relation_groups: list[RelationGroup] = []

    def find_datatype(self, identifier: str) -> Optional[DatatypeDefinition]:
        for datatype in self.datatypes:
            if datatype.identifier == identifier:
                return datatype
        return None

    def find_spec_object(self, identifier: str) -> Optional[SpecObject]:
        for spec_object in self.spec_objects:
            if spec_object.identifier == identifier:
                return spec_object
        return None

    def spec_types_of(self, kind: type[SpecTypeT]) -> list[SpecTypeT]:
        return [spec_type for spec_type in self.spec_types if isinstance(spec_type, kind)]


class ReqIF(BaseModel):
    the_header: ReqIFHeader = Field(default_factory=ReqIFHeader)
    core_content: ReqIFContent = Field(default_factory=ReqIFContent)
    tool_extensions: list[ReqIFToolExtension] = []
    lang: Optional[str] = None
