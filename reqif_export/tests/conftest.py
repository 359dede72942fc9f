"""
Shared fixtures: a template ReqIF document and a small requirements model.

The requirements model is the REQ specification with the group chain
GROUP1 → GROUP2 and the requirements REQ0 (root), REQ1 (in GROUP1) and
REQ2 (in GROUP2).
"""

from datetime import datetime, timezone
from uuid import UUID

import pytest

from reqif_export.models.enums import NumberSetKind
from reqif_export.models.export_settings import AttributeDefinitions, ExportSettings, IdCorrespondence
from reqif_export.models.reqif import (
    AttributeDefinitionBoolean,
    AttributeDefinitionDate,
    AttributeDefinitionEnumeration,
    AttributeDefinitionInteger,
    AttributeDefinitionReal,
    AttributeDefinitionString,
    AttributeDefinitionXHTML,
    DatatypeDefinitionBoolean,
    DatatypeDefinitionDate,
    DatatypeDefinitionEnumeration,
    DatatypeDefinitionInteger,
    DatatypeDefinitionReal,
    DatatypeDefinitionString,
    DatatypeDefinitionXHTML,
    EmbeddedValue,
    EnumValue,
    ReqIF,
    ReqIFContent,
    ReqIFHeader,
    ReqIFToolExtension,
    SpecificationType,
    SpecObjectType,
)
from reqif_export.models.source import (
    BooleanParameterType,
    Definition,
    EnumerationParameterType,
    EnumerationValueDefinition,
    MeasurementScale,
    ParameterValue,
    QuantityKind,
    Requirement,
    RequirementsGroup,
    RequirementsSpecification,
    TextParameterType,
)

ENGINEERING_MODEL_IID = UUID("9ec982e4-ef72-4953-aa85-b158a95d8d56")
ITERATION_IID = UUID("e163c5ad-f32b-4387-b805-f4b34600bc2c")

BOOLEAN_TYPE_IID = UUID("35a9cf05-4eba-4cda-b60c-7cfeaa8f8e12")
ENUM_TYPE_IID = UUID("9e1a4bc0-8d7e-4a0b-a9b2-3a5c7e5c8b11")
MASS_TYPE_IID = UUID("0f7a2d1e-4a4b-4b8e-9d6a-2c1f0e3b9a77")
COUNT_TYPE_IID = UUID("5d1b9c2a-7e3f-4c6d-8a9b-1e2f3a4b5c6d")
COMMENT_TYPE_IID = UUID("a4c2e6f8-1b3d-4f5a-9c7e-2d4f6a8b0c1e")


# ── Template ─────────────────────────────────────────────


@pytest.fixture
def template() -> ReqIF:
    """A template with one SpecificationType and one SpecObjectType."""
    enumeration = DatatypeDefinitionEnumeration(
        identifier="DT-PRIORITY",
        long_name="Priority",
        specified_values=[
            EnumValue(
                identifier="EV-LOW",
                long_name="low",
                properties=EmbeddedValue(key=0, other_content="L"),
                datatype_definition_enumeration="DT-PRIORITY",
            ),
            EnumValue(
                identifier="EV-HIGH",
                long_name="high",
                properties=EmbeddedValue(key=1, other_content="H"),
                datatype_definition_enumeration="DT-PRIORITY",
            ),
        ],
    )

    datatypes = [
        DatatypeDefinitionString(identifier="DT-STRING", long_name="String", max_length=255),
        DatatypeDefinitionXHTML(identifier="DT-XHTML", long_name="XHTML"),
        DatatypeDefinitionBoolean(identifier="DT-BOOLEAN", long_name="Boolean"),
        DatatypeDefinitionDate(identifier="DT-DATE", long_name="Date"),
        DatatypeDefinitionInteger(identifier="DT-INTEGER", long_name="Integer", min=0, max=1000),
        DatatypeDefinitionReal(identifier="DT-REAL", long_name="Real", accuracy=5, min=0.0, max=1000.0),
        enumeration,
    ]

    spec_object_type = SpecObjectType(
        identifier="SOT-REQUIREMENT",
        long_name="Requirement",
        spec_attributes=[
            AttributeDefinitionXHTML(identifier="AD-TEXT", long_name="Text", datatype_ref="DT-XHTML"),
            AttributeDefinitionString(identifier="AD-NAME", long_name="Name", datatype_ref="DT-STRING"),
            AttributeDefinitionBoolean(identifier="AD-DELETED", long_name="Deleted", datatype_ref="DT-BOOLEAN"),
            AttributeDefinitionDate(identifier="AD-MODIFIED", long_name="Modified On", datatype_ref="DT-DATE"),
            AttributeDefinitionEnumeration(
                identifier="AD-PRIORITY", long_name="Priority", datatype_ref="DT-PRIORITY"
            ),
            AttributeDefinitionReal(identifier="AD-MASS", long_name="Mass", datatype_ref="DT-REAL"),
            AttributeDefinitionInteger(identifier="AD-COUNT", long_name="Count", datatype_ref="DT-INTEGER"),
            AttributeDefinitionXHTML(identifier="AD-COMMENT", long_name="Comment", datatype_ref="DT-XHTML"),
            AttributeDefinitionBoolean(identifier="AD-FLAG", long_name="Flag", datatype_ref="DT-BOOLEAN"),
        ],
    )

    specification_type = SpecificationType(
        identifier="ST-SPECIFICATION",
        long_name="Specification",
        spec_attributes=[
            AttributeDefinitionXHTML(identifier="AD-SPEC-TEXT", long_name="Text", datatype_ref="DT-XHTML"),
            AttributeDefinitionString(identifier="AD-SPEC-NAME", long_name="Name", datatype_ref="DT-STRING"),
            AttributeDefinitionBoolean(
                identifier="AD-SPEC-DELETED", long_name="Deleted", datatype_ref="DT-BOOLEAN"
            ),
        ],
    )

    return ReqIF(
        the_header=ReqIFHeader(identifier="TEMPLATE-HEADER", title="Template"),
        core_content=ReqIFContent(
            datatypes=datatypes,
            spec_types=[specification_type, spec_object_type],
        ),
        tool_extensions=[ReqIFToolExtension(content="<VENDOR-SETTINGS>keep</VENDOR-SETTINGS>")],
        lang="en",
    )


# ── Export settings ──────────────────────────────────────


@pytest.fixture
def export_settings() -> ExportSettings:
    return ExportSettings(
        title="Exported requirements",
        requirement_attribute_definitions=AttributeDefinitions(
            text_attribute_definition_id="AD-TEXT",
            name_attribute_definition_id="AD-NAME",
            foreign_deleted_attribute_definition_id="AD-DELETED",
            foreign_modified_on_attribute_definition_id="AD-MODIFIED",
        ),
        specification_attribute_definitions=AttributeDefinitions(
            text_attribute_definition_id="AD-SPEC-TEXT",
            name_attribute_definition_id="AD-SPEC-NAME",
            foreign_deleted_attribute_definition_id="AD-SPEC-DELETED",
        ),
        external_identifier_map=[
            IdCorrespondence(internal_thing=BOOLEAN_TYPE_IID, external_id="AD-FLAG"),
            IdCorrespondence(internal_thing=ENUM_TYPE_IID, external_id="AD-PRIORITY"),
            IdCorrespondence(internal_thing=MASS_TYPE_IID, external_id="AD-MASS"),
            IdCorrespondence(internal_thing=COUNT_TYPE_IID, external_id="AD-COUNT"),
            IdCorrespondence(internal_thing=COMMENT_TYPE_IID, external_id="AD-COMMENT"),
        ],
        add_xhtml_tags=True,
    )


# ── Source model ─────────────────────────────────────────


@pytest.fixture
def boolean_type() -> BooleanParameterType:
    return BooleanParameterType(iid=BOOLEAN_TYPE_IID, name="is compliant", short_name="compliant")


@pytest.fixture
def enum_type() -> EnumerationParameterType:
    return EnumerationParameterType(
        iid=ENUM_TYPE_IID,
        name="priority",
        short_name="prio",
        value_definition=[
            EnumerationValueDefinition(name="low", short_name="L"),
            EnumerationValueDefinition(name="high", short_name="H"),
        ],
    )


@pytest.fixture
def mass_type() -> QuantityKind:
    return QuantityKind(
        iid=MASS_TYPE_IID,
        name="mass",
        short_name="m",
        default_scale=MeasurementScale(
            name="kilogram",
            short_name="kg",
            number_set=NumberSetKind.REAL_NUMBER_SET,
            minimum_permissible_value="0",
            maximum_permissible_value="1000",
        ),
    )


@pytest.fixture
def count_type() -> QuantityKind:
    return QuantityKind(
        iid=COUNT_TYPE_IID,
        name="count",
        short_name="n",
        default_scale=MeasurementScale(name="count", short_name="-", number_set=NumberSetKind.NATURAL_NUMBER_SET),
    )


@pytest.fixture
def comment_type() -> TextParameterType:
    return TextParameterType(iid=COMMENT_TYPE_IID, name="comment", short_name="comment")


@pytest.fixture
def specification(boolean_type, enum_type, mass_type, count_type, comment_type) -> RequirementsSpecification:
    group1 = RequirementsGroup(name="Group 1", short_name="GROUP1")
    group2 = RequirementsGroup(name="Group 2", short_name="GROUP2", parent=group1.iid)

    modified_on = datetime(2023, 5, 17, 9, 30, tzinfo=timezone.utc)

    req0 = Requirement(
        name="Requirement 0",
        short_name="REQ0",
        modified_on=modified_on,
        definition=[Definition(content="The system shall be <safe> & sound", language_code="en")],
        parameter_values=[
            ParameterValue(parameter_type=boolean_type, value=["true"]),
            ParameterValue(parameter_type=enum_type, value=["high"]),
            ParameterValue(parameter_type=mass_type, value=["12.5"]),
            ParameterValue(parameter_type=count_type, value=["3"]),
            ParameterValue(parameter_type=comment_type, value=["needs review"]),
        ],
    )
    req1 = Requirement(
        name="Requirement 1",
        short_name="REQ1",
        group=group1.iid,
        is_deprecated=True,
        definition=[Definition(content="The system shall log every export")],
    )
    req2 = Requirement(name="Requirement 2", short_name="REQ2", group=group2.iid)

    return RequirementsSpecification(
        name="Requirements",
        short_name="REQ",
        modified_on=modified_on,
        iteration_iid=ITERATION_IID,
        engineering_model_iid=ENGINEERING_MODEL_IID,
        definition=[Definition(content="Top level requirements")],
        requirements=[req0, req1, req2],
        groups=[group1, group2],
    )


# ── COMET DTOs ───────────────────────────────────────────

SITE_DIRECTORY_IID = "f13de6f8-b03a-46e7-a492-53b2f260f294"
MODEL_SETUP_IID = "116f6253-89bb-47d4-aa24-d11d197e43c9"
OLD_ITERATION_IID = "5c9b7a3e-2f1d-4e6a-8b0c-9d7e5f3a1b2c"


@pytest.fixture
def site_directory_things() -> list[dict]:
    """SiteDirectory deep response: one model with a deleted and two live iterations."""
    return [
        {
            "classKind": "SiteDirectory",
            "iid": SITE_DIRECTORY_IID,
            "model": [MODEL_SETUP_IID],
        },
        {
            "classKind": "EngineeringModelSetup",
            "iid": MODEL_SETUP_IID,
            "engineeringModelIid": str(ENGINEERING_MODEL_IID),
            "iterationSetup": ["is-1", "is-2", "is-3"],
        },
        {"classKind": "IterationSetup", "iid": "is-1", "iterationIid": OLD_ITERATION_IID,
         "iterationNumber": 1, "isDeleted": False},
        {"classKind": "IterationSetup", "iid": "is-2", "iterationIid": str(ITERATION_IID),
         "iterationNumber": 2, "isDeleted": False},
        {"classKind": "IterationSetup", "iid": "is-3", "iterationIid": "0d6f3c2a-8b1e-4f7d-9a5c-3e2b1d0f9a8c",
         "iterationNumber": 3, "isDeleted": True},
    ]


@pytest.fixture
def iteration_things() -> list[dict]:
    """Iteration deep response with reference data."""
    return [
        {
            "classKind": "Iteration",
            "iid": str(ITERATION_IID),
            "requirementsSpecification": ["8a4b7c1d-0000-4000-8000-000000000001"],
        },
        {
            "classKind": "RequirementsSpecification",
            "iid": "8a4b7c1d-0000-4000-8000-000000000001",
            "name": "Requirements",
            "shortName": "REQ",
            "modifiedOn": "2023-05-17T09:30:00.000Z",
            "isDeprecated": False,
            "definition": [],
            "requirement": [
                "8a4b7c1d-0000-4000-8000-000000000010",
                "8a4b7c1d-0000-4000-8000-000000000011",
            ],
            "group": ["8a4b7c1d-0000-4000-8000-000000000020"],
            "parameterValue": [],
        },
        {
            "classKind": "RequirementsGroup",
            "iid": "8a4b7c1d-0000-4000-8000-000000000020",
            "name": "Group 1",
            "shortName": "GROUP1",
            "group": ["8a4b7c1d-0000-4000-8000-000000000021"],
        },
        {
            "classKind": "RequirementsGroup",
            "iid": "8a4b7c1d-0000-4000-8000-000000000021",
            "name": "Group 2",
            "shortName": "GROUP2",
            "group": [],
        },
        {
            "classKind": "Requirement",
            "iid": "8a4b7c1d-0000-4000-8000-000000000010",
            "name": "Requirement 0",
            "shortName": "REQ0",
            "group": None,
            "isDeprecated": False,
            "definition": ["8a4b7c1d-0000-4000-8000-000000000030"],
            "parameterValue": [
                {"k": 2, "v": "8a4b7c1d-0000-4000-8000-000000000041"},
                {"k": 1, "v": "8a4b7c1d-0000-4000-8000-000000000040"},
                {"k": 3, "v": "8a4b7c1d-0000-4000-8000-000000000042"},
            ],
        },
        {
            "classKind": "Requirement",
            "iid": "8a4b7c1d-0000-4000-8000-000000000011",
            "name": "Requirement 2",
            "shortName": "REQ2",
            "group": "8a4b7c1d-0000-4000-8000-000000000021",
            "isDeprecated": True,
        },
        {
            "classKind": "Definition",
            "iid": "8a4b7c1d-0000-4000-8000-000000000030",
            "content": "The system shall be safe",
            "languageCode": "en",
        },
        {
            "classKind": "SimpleParameterValue",
            "iid": "8a4b7c1d-0000-4000-8000-000000000040",
            "parameterType": str(BOOLEAN_TYPE_IID),
            "value": '["true"]',
        },
        {
            "classKind": "SimpleParameterValue",
            "iid": "8a4b7c1d-0000-4000-8000-000000000041",
            "parameterType": str(MASS_TYPE_IID),
            "value": '["12.5"]',
        },
        {
            "classKind": "SimpleParameterValue",
            "iid": "8a4b7c1d-0000-4000-8000-000000000042",
            "parameterType": "8a4b7c1d-0000-4000-8000-000000000050",
            "value": '["-"]',
        },
        {
            "classKind": "BooleanParameterType",
            "iid": str(BOOLEAN_TYPE_IID),
            "name": "is compliant",
            "shortName": "compliant",
        },
        {
            "classKind": "SimpleQuantityKind",
            "iid": str(MASS_TYPE_IID),
            "name": "mass",
            "shortName": "m",
            "defaultScale": "8a4b7c1d-0000-4000-8000-000000000060",
        },
        {
            "classKind": "RatioScale",
            "iid": "8a4b7c1d-0000-4000-8000-000000000060",
            "name": "kilogram",
            "shortName": "kg",
            "numberSet": "REAL_NUMBER_SET",
            "minimumPermissibleValue": "0",
            "maximumPermissibleValue": "1000",
        },
        {
            "classKind": "CompoundParameterType",
            "iid": "8a4b7c1d-0000-4000-8000-000000000050",
            "name": "position",
            "shortName": "pos",
        },
    ]
