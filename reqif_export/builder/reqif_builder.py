"""
ReqIF Builder — converts RequirementsSpecifications into a ReqIF document that
conforms to the schema (datatypes, spec types, attribute definitions) of a
template ReqIF document.

Flow:
  1. Create the target document; datatypes, spec types and tool extensions
     are shared by reference with the template.
  2. Resolve the SpecificationType and SpecObjectType to use.
  3. Convert every non-deprecated specification: a Specification, then one
     SpecObject + SpecHierarchy per requirement and group, mirroring the
     group/requirement containment of the source.
  4. Populate attribute values from the export settings: the per-role
     attribute definitions and the ExternalIdentifierMap.

Failure policy:
  - a configured attribute definition missing from the template is logged
    and that attribute is skipped;
  - a parameter type without (resolvable) correspondence, or an enumeration
    literal that the destination datatype does not define, is skipped
    without notice;
  - any error while creating the attributes of one entity is logged with the
    entity's short name and aborts the whole build.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from reqif_export.builder.attribute_values import (
    coerce_parameter_value,
    create_attribute_value,
    text_for,
)
from reqif_export.builder.context import ConversionContext
from reqif_export.config import get_settings
from reqif_export.exceptions import NotSupportedError
from reqif_export.models.export_settings import AttributeDefinitions, ExportSettings
from reqif_export.models.reqif import (
    AttributeDefinition,
    ReqIF,
    ReqIFContent,
    ReqIFHeader,
    SpecElementWithAttributes,
    SpecHierarchy,
    Specification,
    SpecificationType,
    SpecObject,
    SpecObjectType,
    SpecType,
    SpecTypeT,
)
from reqif_export.models.source import (
    ParameterValue,
    Requirement,
    RequirementsGroup,
    RequirementsSpecification,
)
from reqif_export.utils.identifiers import new_identifier, utc_now

logger = logging.getLogger(__name__)

SourceEntity = Union[RequirementsSpecification, RequirementsGroup, Requirement]


class ReqIFBuilder:
    """Builds a ReqIF document from ECSS-E-TM-10-25 requirements."""

    def __init__(self):
        self.settings = get_settings()

    # ── Public entry point ───────────────────────────────

    def build(
        self,
        template: ReqIF,
        specifications: Iterable[RequirementsSpecification],
        export_settings: Optional[ExportSettings] = None,
        exclude_alternative_id: bool = False,
    ) -> ReqIF:
        """
        Build a new ReqIF document for `specifications` based on `template`.
        The template is not modified.
        """
        if template is None:
            raise ValueError("The template ReqIF document may not be None")
        if specifications is None:
            raise ValueError("The requirements specifications may not be None")

        specifications = list(specifications)
        if not specifications:
            raise ValueError("At least one RequirementsSpecification is required")

        _assert_single_iteration(specifications)

        export_settings = export_settings or ExportSettings()
        logger.info(
            f"Building ReqIF for {len(specifications)} RequirementsSpecification(s) "
            f"(alternative ids {'excluded' if exclude_alternative_id else 'included'})"
        )

        target = self._create_target(template, specifications[0], export_settings)

        context = ConversionContext(
            target=target,
            specification_type=_select_single(target.core_content, SpecificationType),
            spec_object_type=_select_single(target.core_content, SpecObjectType),
            export_settings=export_settings,
            exclude_alternative_id=exclude_alternative_id,
        )

        for specification in specifications:
            if specification.is_deprecated:
                continue
            self._convert_specification(specification, context.for_specification(specification))

        content = target.core_content
        logger.info(
            f"ReqIF {target.the_header.identifier} built: "
            f"{len(content.specifications)} Specification(s), {len(content.spec_objects)} SpecObject(s)"
        )
        return target

    # ── Document shell ───────────────────────────────────

    def _create_target(
        self,
        template: ReqIF,
        first_specification: RequirementsSpecification,
        export_settings: ExportSettings,
    ) -> ReqIF:
        header = ReqIFHeader(
            identifier=new_identifier(),
            creation_time=utc_now(),
            repository_id=(
                f"EngineeringModel/{first_specification.engineering_model_iid}"
                f"/iteration/{first_specification.iteration_iid}"
            ),
            req_if_tool_id=self.settings.reqif_tool_id,
            req_if_version=self.settings.reqif_version,
            source_tool_id=self.settings.reqif_source_tool_id,
            title=export_settings.title,
        )

        # Spec objects, specifications, relations and relation groups of the
        # template are never carried over.
        content = ReqIFContent(
            datatypes=template.core_content.datatypes,
            spec_types=template.core_content.spec_types,
        )

        return ReqIF(
            the_header=header,
            core_content=content,
            tool_extensions=template.tool_extensions,
            lang=template.lang,
        )

    # ── Tree walk ────────────────────────────────────────

    def _convert_specification(self, source: RequirementsSpecification, context: ConversionContext) -> None:
        specification = Specification(
            identifier=new_identifier(),
            alternative_id=context.alternative_id(source),
            long_name=source.name,
            last_change=source.modified_on,
            type_ref=context.specification_type.identifier,
        )

        self._create_attributes(
            specification,
            source,
            context.specification_type,
            context.specification_attribute_definitions,
            source.name,
            context,
        )

        for requirement in source.root_requirements():
            specification.children.append(self._convert_requirement(requirement, context))

        for group in source.root_groups():
            specification.children.append(self._convert_group(group, context))

        context.target.core_content.specifications.append(specification)

    def _convert_group(self, group: RequirementsGroup, context: ConversionContext) -> SpecHierarchy:
        hierarchy = self._create_hierarchy(self._create_spec_object(group, group.name, context))

        for requirement in context.specification.requirements_in(group):
            hierarchy.children.append(self._convert_requirement(requirement, context))

        for subgroup in context.specification.subgroups_of(group):
            hierarchy.children.append(self._convert_group(subgroup, context))

        return hierarchy

    def _convert_requirement(self, requirement: Requirement, context: ConversionContext) -> SpecHierarchy:
        text = requirement.first_definition_content() or ""
        return self._create_hierarchy(self._create_spec_object(requirement, text, context))

    def _create_spec_object(self, source: SourceEntity, text: str, context: ConversionContext) -> SpecObject:
        spec_object = SpecObject(
            identifier=new_identifier(),
            alternative_id=context.alternative_id(source),
            long_name=source.name,
            last_change=source.modified_on,
            type_ref=context.spec_object_type.identifier,
        )

        self._create_attributes(
            spec_object,
            source,
            context.spec_object_type,
            context.requirement_attribute_definitions,
            text,
            context,
        )

        context.target.core_content.spec_objects.append(spec_object)
        return spec_object

    def _create_hierarchy(self, spec_object: SpecObject) -> SpecHierarchy:
        return SpecHierarchy(
            identifier=new_identifier(),
            last_change=utc_now(),
            object_ref=spec_object.identifier,
        )

    # ── Attributes ───────────────────────────────────────

    def _create_attributes(
        self,
        element: SpecElementWithAttributes,
        source: SourceEntity,
        spec_type: SpecType,
        attribute_definitions: Optional[AttributeDefinitions],
        text: str,
        context: ConversionContext,
    ) -> None:
        try:
            if attribute_definitions is not None:
                self._create_role_attributes(element, source, spec_type, attribute_definitions, text, context)

            for parameter_value in source.parameter_values:
                self._create_parameter_value_attributes(element, parameter_value, spec_type, context)
        except Exception:
            logger.exception(f"The attributes of {source.short_name} could not be created")
            raise

    def _create_role_attributes(
        self,
        element: SpecElementWithAttributes,
        source: SourceEntity,
        spec_type: SpecType,
        attribute_definitions: AttributeDefinitions,
        text: str,
        context: ConversionContext,
    ) -> None:
        add_xhtml_tags = context.export_settings.add_xhtml_tags

        definition = _resolve(spec_type, attribute_definitions.text_attribute_definition_id, "text")
        if definition is not None:
            element.values.append(create_attribute_value(definition, text_for(definition, text, add_xhtml_tags)))

        definition = _resolve(
            spec_type, attribute_definitions.foreign_modified_on_attribute_definition_id, "foreign modified-on"
        )
        if definition is not None:
            element.values.append(create_attribute_value(definition, source.modified_on))

        if source.name:
            definition = _resolve(spec_type, attribute_definitions.name_attribute_definition_id, "name")
            if definition is not None:
                element.values.append(
                    create_attribute_value(definition, text_for(definition, source.name, add_xhtml_tags))
                )

        if isinstance(source, (Requirement, RequirementsSpecification)):
            definition = _resolve(
                spec_type, attribute_definitions.foreign_deleted_attribute_definition_id, "foreign deleted"
            )
            if definition is not None:
                is_deleted = source.is_deprecated or context.specification.is_deprecated
                element.values.append(create_attribute_value(definition, is_deleted))

    def _create_parameter_value_attributes(
        self,
        element: SpecElementWithAttributes,
        parameter_value: ParameterValue,
        spec_type: SpecType,
        context: ConversionContext,
    ) -> None:
        parameter_type = parameter_value.parameter_type
        raw = parameter_value.first_value()

        for correspondence in context.export_settings.correspondences_for(parameter_type.iid):
            definition = spec_type.find_attribute_definition(correspondence.external_id)
            if definition is None or raw is None:
                continue

            value = coerce_parameter_value(
                parameter_type,
                raw,
                definition,
                context.target.core_content,
                context.export_settings.add_xhtml_tags,
            )
            if value is None:
                continue

            element.values.append(create_attribute_value(definition, value))


# ── Helpers (module-level) ───────────────────────────────


def _assert_single_iteration(specifications: list[RequirementsSpecification]) -> None:
    """The repository id of the output names one iteration; mixed input is rejected."""
    origins = {(s.engineering_model_iid, s.iteration_iid) for s in specifications}
    if len(origins) > 1:
        raise ValueError(
            "All RequirementsSpecifications must belong to the same iteration; "
            f"found {len(origins)} different iterations"
        )


def _select_single(content: ReqIFContent, kind: type[SpecTypeT]) -> SpecTypeT:
    candidates = content.spec_types_of(kind)
    if not candidates:
        raise NotSupportedError(f"The template ReqIF does not contain a {kind.__name__}")

    if len(candidates) > 1:
        logger.warning(
            f"The template ReqIF contains {len(candidates)} {kind.__name__} instances; "
            f"the first one ({candidates[0].identifier}) is used"
        )

    return candidates[0]


def _resolve(spec_type: SpecType, identifier: Optional[str], role: str) -> Optional[AttributeDefinition]:
    if not identifier:
        return None

    definition = spec_type.find_attribute_definition(identifier)
    if definition is None:
        logger.warning(
            f"The {role} AttributeDefinition {identifier} does not exist on "
            f"{type(spec_type).__name__} {spec_type.identifier}; the attribute is skipped"
        )
    return definition
