"""
Tests: MappingEngine rule dispatch.

Run with:
    pytest reqif_export/tests/test_mapping_engine.py -v
"""

import logging

import pytest

from reqif_export.exceptions import MappingException, NotSupportedError
from reqif_export.mapping import MappingEngine, MappingRule, ScalarParameterTypeMappingRule
from reqif_export.models.reqif import DatatypeDefinitionBoolean, DatatypeDefinitionReal
from reqif_export.models.source import (
    BooleanParameterType,
    QuantityKind,
    ScalarParameterType,
    TimeOfDayParameterType,
)


class _FailingRule(MappingRule[str, str]):
    def transform(self, input: str) -> str:
        raise ValueError(f"cannot transform {input}")


class _UpperCaseRule(MappingRule[str, str]):
    input_type = str
    output_type = str

    def transform(self, input: str) -> str:
        return input.upper()


class TestDefaultEngine:
    def test_maps_boolean(self):
        datatype = MappingEngine.default().map(BooleanParameterType(name="flag"))
        assert isinstance(datatype, DatatypeDefinitionBoolean)

    def test_maps_quantity_kind(self, mass_type):
        datatype = MappingEngine.default().map(mass_type)
        assert isinstance(datatype, DatatypeDefinitionReal)
        assert datatype.max == 1000.0

    def test_unregistered_type_returns_none(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = MappingEngine.default().map(TimeOfDayParameterType(name="time"))
        assert result is None
        assert "no corresponding mapping rule" in caplog.text

    def test_failing_rule_is_wrapped(self):
        with pytest.raises(MappingException) as excinfo:
            MappingEngine.default().map(QuantityKind(name="length"))
        assert excinfo.value.__cause__ is not None

    def test_exclude_alternative_id(self):
        datatype = MappingEngine.default(exclude_alternative_id=True).map(BooleanParameterType(name="flag"))
        assert datatype.alternative_id is None


class TestRegistration:
    def test_no_rules_returns_none(self):
        assert MappingEngine().map("anything") is None

    def test_registered_rule_is_used(self):
        engine = MappingEngine()
        engine.register(str, _UpperCaseRule())
        assert engine.map("reqif") == "REQIF"

    def test_base_class_rule_serves_subclasses(self):
        engine = MappingEngine({ScalarParameterType: ScalarParameterTypeMappingRule()})
        assert isinstance(engine.find_rule(BooleanParameterType()), ScalarParameterTypeMappingRule)

    def test_not_supported_variant_is_wrapped(self):
        engine = MappingEngine({ScalarParameterType: ScalarParameterTypeMappingRule()})
        with pytest.raises(MappingException) as excinfo:
            engine.map(TimeOfDayParameterType(name="time"))
        assert isinstance(excinfo.value.__cause__, NotSupportedError)

    def test_rule_without_declared_types_is_wrapped(self):
        engine = MappingEngine({str: _FailingRule()})
        with pytest.raises(MappingException, match="to a object") as excinfo:
            engine.map("reqif")
        assert isinstance(excinfo.value.__cause__, ValueError)
