"""
Mapping Engine — routes an input object to the rule registered for its type.

Rules are registered explicitly in a dispatch table keyed on input type;
lookup walks the input's MRO so a rule registered for a base class also
serves its subclasses.

The export path does not go through the engine: ReqIFBuilder reuses the
template's datatypes as they are. The engine and ScalarParameterTypeMappingRule
are there for callers that need a ReqIF datatype derived from a parameter type,
for example when a template lacks one.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from reqif_export.exceptions import MappingException
from reqif_export.mapping.rules.base import MappingRule
from reqif_export.mapping.rules.scalar_parameter_type_rule import ScalarParameterTypeMappingRule
from reqif_export.models.source import (
    BooleanParameterType,
    DateParameterType,
    DateTimeParameterType,
    EnumerationParameterType,
    QuantityKind,
    TextParameterType,
)

logger = logging.getLogger(__name__)


def default_rules(exclude_alternative_id: bool = False) -> dict[type, MappingRule]:
    """The dispatch table of the ReqIF export: every supported scalar parameter type."""
    scalar_rule = ScalarParameterTypeMappingRule(exclude_alternative_id=exclude_alternative_id)
    return {
        BooleanParameterType: scalar_rule,
        DateParameterType: scalar_rule,
        DateTimeParameterType: scalar_rule,
        EnumerationParameterType: scalar_rule,
        QuantityKind: scalar_rule,
        TextParameterType: scalar_rule,
    }


class MappingEngine:
    """Maps objects to another type using a statically registered rule table."""

    def __init__(self, rules: Optional[Mapping[type, MappingRule]] = None):
        self.rules: dict[type, MappingRule] = dict(rules or {})

    @classmethod
    def default(cls, exclude_alternative_id: bool = False) -> MappingEngine:
        return cls(default_rules(exclude_alternative_id))

    def register(self, input_type: type, rule: MappingRule) -> None:
        self.rules[input_type] = rule

    def find_rule(self, input: Any) -> Optional[MappingRule]:
        for klass in type(input).__mro__:
            rule = self.rules.get(klass)
            if rule is not None:
                return rule
        return None

    def map(self, input: Any) -> Any:
        """
        Map `input` with the rule registered for its type.
        Returns None when no rules are registered or none matches.
        """
        if not self.rules:
            return None

        rule = self.find_rule(input)
        if rule is None:
            logger.warning(f"Could not map {input!r}, no corresponding mapping rule has been found")
            return None

        try:
            return rule.transform(input)
        except Exception as exc:
            raise MappingException(
                f"Could not map {input!r} to a {rule.output_type.__name__}"
            ) from exc
