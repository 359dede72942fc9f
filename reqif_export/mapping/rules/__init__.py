from .base import MappingRule
from .scalar_parameter_type_rule import ScalarParameterTypeMappingRule

__all__ = ["MappingRule", "ScalarParameterTypeMappingRule"]
