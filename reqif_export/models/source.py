"""
Source data model — the subset of ECSS-E-TM-10-25 that is exported to ReqIF.

Specifications own a flat list of requirements and a flat list of groups.
The group tree is expressed by each group's `parent` reference and the
placement of a requirement by its `group` reference; `None` means the
object hangs directly under the specification.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Optional, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from .enums import NumberSetKind


def _epoch() -> datetime:
    return datetime(1970, 1, 1)


class Thing(BaseModel):
    """Anything with a stable identity."""
    iid: UUID = Field(default_factory=uuid4)


class Definition(Thing):
    content: str = ""
    language_code: str = ""


class DefinedThing(Thing):
    name: str = ""
    short_name: str = ""
    definition: list[Definition] = []

    def first_definition_content(self) -> Optional[str]:
        """Content of the first definition, None when there is none."""
        if not self.definition:
            return None
        return self.definition[0].content


# ── Reference data ───────────────────────────────────────


class MeasurementScale(DefinedThing):
    number_set: Optional[NumberSetKind] = None
    minimum_permissible_value: str = ""
    maximum_permissible_value: str = ""


class EnumerationValueDefinition(DefinedThing):
    pass


class ScalarParameterType(DefinedThing):
    """Common base of every scalar parameter type variant."""


class BooleanParameterType(ScalarParameterType):
    class_kind: Literal["BooleanParameterType"] = "BooleanParameterType"


class DateParameterType(ScalarParameterType):
    class_kind: Literal["DateParameterType"] = "DateParameterType"


class DateTimeParameterType(ScalarParameterType):
    class_kind: Literal["DateTimeParameterType"] = "DateTimeParameterType"


class EnumerationParameterType(ScalarParameterType):
    class_kind: Literal["EnumerationParameterType"] = "EnumerationParameterType"
    value_definition: list[EnumerationValueDefinition] = []
    allow_multi_select: bool = False


class QuantityKind(ScalarParameterType):
    class_kind: Literal["QuantityKind"] = "QuantityKind"
    default_scale: Optional[MeasurementScale] = None


class TextParameterType(ScalarParameterType):
    class_kind: Literal["TextParameterType"] = "TextParameterType"


class TimeOfDayParameterType(ScalarParameterType):
    """Part of the data model, but has no ReqIF counterpart."""
    class_kind: Literal["TimeOfDayParameterType"] = "TimeOfDayParameterType"


ParameterType = Annotated[
    Union[
        BooleanParameterType,
        DateParameterType,
        DateTimeParameterType,
        EnumerationParameterType,
        QuantityKind,
        TextParameterType,
        TimeOfDayParameterType,
    ],
    Field(discriminator="class_kind"),
]


class ParameterValue(Thing):
    """A value of a parameter type; only the first element of `value` is used."""
    parameter_type: ParameterType
    value: list[str] = []

    def first_value(self) -> Optional[str]:
        return self.value[0] if self.value else None


# ── Requirements ─────────────────────────────────────────


class RequirementsGroup(DefinedThing):
    modified_on: datetime = Field(default_factory=_epoch)
    parent: Optional[UUID] = None
    parameter_values: list[ParameterValue] = []


class Requirement(DefinedThing):
    modified_on: datetime = Field(default_factory=_epoch)
    group: Optional[UUID] = None
    is_deprecated: bool = False
    parameter_values: list[ParameterValue] = []


class RequirementsSpecification(DefinedThing):
    modified_on: datetime = Field(default_factory=_epoch)
    is_deprecated: bool = False
    iteration_iid: UUID = Field(default_factory=uuid4)
    engineering_model_iid: UUID = Field(default_factory=uuid4)
    requirements: list[Requirement] = []
    groups: list[RequirementsGroup] = []
    parameter_values: list[ParameterValue] = []

    def root_requirements(self) -> list[Requirement]:
        return [r for r in self.requirements if r.group is None]

    def root_groups(self) -> list[RequirementsGroup]:
        return [g for g in self.groups if g.parent is None]

    def requirements_in(self, group: RequirementsGroup) -> list[Requirement]:
        return [r for r in self.requirements if r.group == group.iid]

    def subgroups_of(self, group: RequirementsGroup) -> list[RequirementsGroup]:
        return [g for g in self.groups if g.parent == group.iid]
