"""
Source Data Assembler — turns the flat list of ECSS-E-TM-10-25 DTOs returned
by a COMET web service into the source data model.

DTOs reference each other by iid; ordered collections come as
[{"k": <sort key>, "v": <iid>}] and parameter values as value-array strings
such as '["10","20"]'.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Optional
from uuid import UUID

from reqif_export.exceptions import DataRetrievalError
from reqif_export.models.source import (
    BooleanParameterType,
    DateParameterType,
    DateTimeParameterType,
    Definition,
    EnumerationParameterType,
    EnumerationValueDefinition,
    MeasurementScale,
    ParameterValue,
    QuantityKind,
    Requirement,
    RequirementsGroup,
    RequirementsSpecification,
    ScalarParameterType,
    TextParameterType,
    TimeOfDayParameterType,
)

logger = logging.getLogger(__name__)

_SIMPLE_PARAMETER_TYPES: dict[str, type[ScalarParameterType]] = {
    "BooleanParameterType": BooleanParameterType,
    "DateParameterType": DateParameterType,
    "DateTimeParameterType": DateTimeParameterType,
    "TextParameterType": TextParameterType,
    "TimeOfDayParameterType": TimeOfDayParameterType,
}

_QUANTITY_KINDS = ("SimpleQuantityKind", "DerivedQuantityKind", "SpecializedQuantityKind")


def parse_value_array(value: Any) -> list[str]:
    """Parse a value-array string ('["a","b"]') into its elements."""
    if value is None:
        return []
    if isinstance(value, list):
        return [str(v) for v in value]
    try:
        parsed = json.loads(value)
    except (TypeError, ValueError):
        return [str(value)]
    if isinstance(parsed, list):
        return [str(v) for v in parsed]
    return [str(parsed)]


def references(value: Any) -> list[str]:
    """Iids of a reference collection, ordered collections sorted by key."""
    if not value:
        return []
    if isinstance(value[0], dict):
        return [str(item["v"]) for item in sorted(value, key=lambda item: item["k"])]
    return [str(item) for item in value]


class SourceDataAssembler:
    """Builds RequirementsSpecifications from COMET DTOs."""

    def __init__(self, things: Iterable[dict[str, Any]]):
        self.things: dict[str, dict[str, Any]] = {}
        for thing in things:
            self.things[str(thing["iid"])] = thing
        self._parameter_types: dict[str, Optional[ScalarParameterType]] = {}

    def requirements_specifications(
        self, engineering_model_iid: UUID, iteration_iid: UUID
    ) -> list[RequirementsSpecification]:
        iteration = self.things.get(str(iteration_iid))
        if iteration is None or iteration.get("classKind") != "Iteration":
            raise DataRetrievalError(f"Iteration {iteration_iid} is not part of the retrieved data")

        specifications = []
        for iid in references(iteration.get("requirementsSpecification")):
            dto = self.things.get(iid)
            if dto is None:
                logger.warning(f"RequirementsSpecification {iid} is referenced but was not retrieved")
                continue
            specifications.append(self._specification(dto, engineering_model_iid, iteration_iid))

        logger.info(f"Assembled {len(specifications)} RequirementsSpecification(s) of iteration {iteration_iid}")
        return specifications

    # ── Requirements ─────────────────────────────────────

    def _specification(
        self, dto: dict[str, Any], engineering_model_iid: UUID, iteration_iid: UUID
    ) -> RequirementsSpecification:
        groups: list[RequirementsGroup] = []
        self._collect_groups(dto.get("group"), None, groups)

        return RequirementsSpecification(
            **self._defined_thing(dto),
            is_deprecated=dto.get("isDeprecated", False),
            iteration_iid=iteration_iid,
            engineering_model_iid=engineering_model_iid,
            requirements=[
                self._requirement(self.things[iid])
                for iid in references(dto.get("requirement"))
                if iid in self.things
            ],
            groups=groups,
            parameter_values=self._parameter_values(dto.get("parameterValue")),
        )

    def _collect_groups(self, group_refs: Any, parent: Optional[str], groups: list[RequirementsGroup]) -> None:
        for iid in references(group_refs):
            dto = self.things.get(iid)
            if dto is None:
                continue
            groups.append(
                RequirementsGroup(
                    **self._defined_thing(dto),
                    parent=parent,
                    parameter_values=self._parameter_values(dto.get("parameterValue")),
                )
            )
            self._collect_groups(dto.get("group"), iid, groups)

    def _requirement(self, dto: dict[str, Any]) -> Requirement:
        return Requirement(
            **self._defined_thing(dto),
            group=dto.get("group"),
            is_deprecated=dto.get("isDeprecated", False),
            parameter_values=self._parameter_values(dto.get("parameterValue")),
        )

    def _parameter_values(self, refs: Any) -> list[ParameterValue]:
        parameter_values = []
        for iid in references(refs):
            dto = self.things.get(iid)
            if dto is None:
                continue
            parameter_type = self._parameter_type(str(dto.get("parameterType")))
            if parameter_type is None:
                continue
            parameter_values.append(
                ParameterValue(iid=dto["iid"], parameter_type=parameter_type, value=parse_value_array(dto.get("value")))
            )
        return parameter_values

    # ── Reference data ───────────────────────────────────

    def _parameter_type(self, iid: str) -> Optional[ScalarParameterType]:
        if iid not in self._parameter_types:
            self._parameter_types[iid] = self._create_parameter_type(iid)
        return self._parameter_types[iid]

    def _create_parameter_type(self, iid: str) -> Optional[ScalarParameterType]:
        dto = self.things.get(iid)
        if dto is None:
            logger.warning(f"ParameterType {iid} is referenced but was not retrieved; its values are skipped")
            return None

        class_kind = dto.get("classKind")
        if class_kind in _SIMPLE_PARAMETER_TYPES:
            return _SIMPLE_PARAMETER_TYPES[class_kind](**self._defined_thing(dto))

        if class_kind == "EnumerationParameterType":
            return EnumerationParameterType(
                **self._defined_thing(dto),
                allow_multi_select=dto.get("allowMultiSelect", False),
                value_definition=[
                    EnumerationValueDefinition(**self._defined_thing(self.things[ref]))
                    for ref in references(dto.get("valueDefinition"))
                    if ref in self.things
                ],
            )

        if class_kind in _QUANTITY_KINDS:
            return QuantityKind(**self._defined_thing(dto), default_scale=self._scale(dto.get("defaultScale")))

        logger.warning(f"{class_kind} {dto.get('shortName')} is not a scalar parameter type; its values are skipped")
        return None

    def _scale(self, iid: Optional[str]) -> Optional[MeasurementScale]:
        dto = self.things.get(str(iid)) if iid else None
        if dto is None:
            return None
        return MeasurementScale(
            **self._defined_thing(dto),
            number_set=dto.get("numberSet"),
            minimum_permissible_value=dto.get("minimumPermissibleValue") or "",
            maximum_permissible_value=dto.get("maximumPermissibleValue") or "",
        )

    def _defined_thing(self, dto: dict[str, Any]) -> dict[str, Any]:
        definitions = []
        for iid in references(dto.get("definition")):
            definition = self.things.get(iid)
            if definition is not None:
                definitions.append(
                    Definition(
                        iid=definition["iid"],
                        content=definition.get("content", ""),
                        language_code=definition.get("languageCode", ""),
                    )
                )
        fields = {
            "iid": dto["iid"],
            "name": dto.get("name", ""),
            "short_name": dto.get("shortName", ""),
            "definition": definitions,
        }
        # Models without a modified_on field ignore it
        if dto.get("modifiedOn"):
            fields["modified_on"] = dto["modifiedOn"]
        return fields
