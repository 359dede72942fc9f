"""
Scalar parameter type → ReqIF datatype definition.

One rule covers every scalar variant because a QuantityKind only turns into
an integer or a real datatype once its default scale has been inspected.

    BooleanParameterType      → DatatypeDefinitionBoolean
    DateParameterType         → DatatypeDefinitionDate
    DateTimeParameterType     → DatatypeDefinitionDate
    EnumerationParameterType  → DatatypeDefinitionEnumeration (+ one EnumValue per value definition)
    QuantityKind (ℤ, ℕ)       → DatatypeDefinitionInteger
    QuantityKind (ℚ, ℝ)       → DatatypeDefinitionReal
    TextParameterType         → DatatypeDefinitionXHTML

The value coercion in builder.attribute_values switches over the same set of
variants; add or remove a variant in both places.
"""

from __future__ import annotations

import logging
from typing import Optional

from reqif_export.exceptions import InvalidOperationError, NotSupportedError
from reqif_export.mapping.rules.base import MappingRule
from reqif_export.models.enums import NumberSetKind
from reqif_export.models.reqif import (
    AlternativeId,
    DatatypeDefinition,
    DatatypeDefinitionBoolean,
    DatatypeDefinitionDate,
    DatatypeDefinitionEnumeration,
    DatatypeDefinitionInteger,
    DatatypeDefinitionReal,
    DatatypeDefinitionXHTML,
    EmbeddedValue,
    EnumValue,
)
from reqif_export.models.source import (
    BooleanParameterType,
    DateParameterType,
    DateTimeParameterType,
    DefinedThing,
    EnumerationParameterType,
    EnumerationValueDefinition,
    MeasurementScale,
    QuantityKind,
    ScalarParameterType,
    TextParameterType,
    Thing,
)
from reqif_export.utils.identifiers import new_identifier, utc_now

logger = logging.getLogger(__name__)

_INTEGER_NUMBER_SETS = (NumberSetKind.INTEGER_NUMBER_SET, NumberSetKind.NATURAL_NUMBER_SET)
_REAL_NUMBER_SETS = (NumberSetKind.RATIONAL_NUMBER_SET, NumberSetKind.REAL_NUMBER_SET)


class ScalarParameterTypeMappingRule(MappingRule[ScalarParameterType, DatatypeDefinition]):
    """Transforms a ScalarParameterType into a DatatypeDefinition."""

    input_type = ScalarParameterType
    output_type = DatatypeDefinition

    def __init__(self, exclude_alternative_id: bool = False):
        self.exclude_alternative_id = exclude_alternative_id

    def transform(self, input: ScalarParameterType) -> DatatypeDefinition:
        match input:
            case BooleanParameterType():
                return self._populate(DatatypeDefinitionBoolean(), input)
            case DateParameterType() | DateTimeParameterType():
                return self._populate(DatatypeDefinitionDate(), input)
            case EnumerationParameterType():
                return self._transform_enumeration(input)
            case QuantityKind():
                return self._transform_quantity_kind(input)
            case TextParameterType():
                return self._populate(DatatypeDefinitionXHTML(), input)
            case _:
                raise NotSupportedError(f"The {type(input).__name__} type is not supported")

    # ── Variants ─────────────────────────────────────────

    def _transform_enumeration(self, parameter_type: EnumerationParameterType) -> DatatypeDefinitionEnumeration:
        datatype = self._populate(DatatypeDefinitionEnumeration(), parameter_type)

        for index, value_definition in enumerate(parameter_type.value_definition):
            enum_value = self._transform_value_definition(value_definition, index)
            enum_value.datatype_definition_enumeration = datatype.identifier
            datatype.specified_values.append(enum_value)

        return datatype

    def _transform_value_definition(self, value_definition: EnumerationValueDefinition, key: int) -> EnumValue:
        return EnumValue(
            identifier=new_identifier(),
            long_name=value_definition.name,
            last_change=utc_now(),
            alternative_id=self._alternative_id(value_definition),
            properties=EmbeddedValue(key=key, other_content=value_definition.short_name),
        )

    def _transform_quantity_kind(self, quantity_kind: QuantityKind) -> DatatypeDefinition:
        scale = quantity_kind.default_scale
        number_set = scale.number_set if scale is not None else None

        if number_set in _INTEGER_NUMBER_SETS:
            return self._to_integer(quantity_kind, scale)
        if number_set in _REAL_NUMBER_SETS:
            return self._to_real(quantity_kind, scale)

        raise InvalidOperationError(f"The {quantity_kind.name} could not be transformed")

    def _to_integer(self, quantity_kind: QuantityKind, scale: MeasurementScale) -> DatatypeDefinitionInteger:
        datatype = self._populate(DatatypeDefinitionInteger(), quantity_kind)
        datatype.max = _parse_int(scale.maximum_permissible_value)
        datatype.min = _parse_int(scale.minimum_permissible_value)
        return datatype

    def _to_real(self, quantity_kind: QuantityKind, scale: MeasurementScale) -> DatatypeDefinitionReal:
        datatype = self._populate(DatatypeDefinitionReal(), quantity_kind)
        datatype.max = _parse_float(scale.maximum_permissible_value)
        datatype.min = _parse_float(scale.minimum_permissible_value)
        return datatype

    # ── Shared ───────────────────────────────────────────

    def _populate(self, datatype, parameter_type: DefinedThing):
        """Fill in the properties every produced datatype carries."""
        datatype.identifier = new_identifier()
        datatype.long_name = parameter_type.name
        datatype.last_change = utc_now()
        datatype.alternative_id = self._alternative_id(parameter_type)
        datatype.description = parameter_type.first_definition_content() or ""
        return datatype

    def _alternative_id(self, thing: Thing) -> Optional[AlternativeId]:
        if self.exclude_alternative_id:
            return None
        return AlternativeId(identifier=str(thing.iid))


def _parse_int(text: str) -> Optional[int]:
    """Parse a scale bound; an unparsable bound stays unset."""
    try:
        return int(text.strip())
    except (AttributeError, ValueError):
        return None


def _parse_float(text: str) -> Optional[float]:
    try:
        return float(text.strip())
    except (AttributeError, ValueError):
        return None
