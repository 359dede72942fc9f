"""
Per-build conversion state.

Created once per ReqIFBuilder.build call and passed down the tree walk, so a
builder carries no state between (or during concurrent) calls.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from reqif_export.models.export_settings import AttributeDefinitions, ExportSettings
from reqif_export.models.reqif import AlternativeId, ReqIF, SpecificationType, SpecObjectType
from reqif_export.models.source import RequirementsSpecification, Thing


class ConversionContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    target: ReqIF
    specification_type: SpecificationType
    spec_object_type: SpecObjectType
    export_settings: ExportSettings
    exclude_alternative_id: bool = False
    specification: Optional[RequirementsSpecification] = None

    def for_specification(self, specification: RequirementsSpecification) -> ConversionContext:
        """Context for converting the content of one specification."""
        return self.model_copy(update={"specification": specification})

    def alternative_id(self, thing: Thing) -> Optional[AlternativeId]:
        if self.exclude_alternative_id:
            return None
        return AlternativeId(identifier=str(thing.iid))

    @property
    def specification_attribute_definitions(self) -> Optional[AttributeDefinitions]:
        return self.export_settings.specification_attribute_definitions

    @property
    def requirement_attribute_definitions(self) -> Optional[AttributeDefinitions]:
        return self.export_settings.requirement_attribute_definitions
