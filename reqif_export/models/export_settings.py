"""
Export settings — declarative configuration of a ReqIF export.

Read from camelCase JSON (see ExportSettingsReader); field names are the
snake_case equivalents.
"""

from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class _SettingsModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AttributeDefinitions(_SettingsModel):
    """Identifiers of the template attribute definitions used per role; None = skip."""
    text_attribute_definition_id: Optional[str] = None
    foreign_deleted_attribute_definition_id: Optional[str] = None
    foreign_modified_on_attribute_definition_id: Optional[str] = None
    name_attribute_definition_id: Optional[str] = None


class IdCorrespondence(_SettingsModel):
    """Pairs a parameter type (internal thing) with a template attribute definition."""
    internal_thing: UUID
    external_id: str


class ExportSettings(_SettingsModel):
    title: str = ""
    requirement_attribute_definitions: Optional[AttributeDefinitions] = None
    specification_attribute_definitions: Optional[AttributeDefinitions] = None
    external_identifier_map: list[IdCorrespondence] = []
    add_xhtml_tags: bool = False

    @field_validator("external_identifier_map", mode="before")
    @classmethod
    def _unwrap_correspondence(cls, value: Any) -> Any:
        # An ExternalIdentifierMap object carries its pairs in "correspondence"
        if isinstance(value, dict):
            return value.get("correspondence", [])
        if value is None:
            return []
        return value

    def correspondences_for(self, internal_thing: UUID) -> list[IdCorrespondence]:
        """All correspondences of a parameter type, in map order."""
        return [c for c in self.external_identifier_map if c.internal_thing == internal_thing]
