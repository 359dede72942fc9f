"""Mapping — rule registry and mapping rules."""

from reqif_export.mapping.engine import MappingEngine, default_rules
from reqif_export.mapping.rules.base import MappingRule
from reqif_export.mapping.rules.scalar_parameter_type_rule import ScalarParameterTypeMappingRule

__all__ = ["MappingEngine", "MappingRule", "ScalarParameterTypeMappingRule", "default_rules"]
