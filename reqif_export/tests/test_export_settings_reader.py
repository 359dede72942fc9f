"""
Tests: ExportSettingsReader and the ExportSettings model.

Run with:
    pytest reqif_export/tests/test_export_settings_reader.py -v
"""

from uuid import UUID

import pytest
from pydantic import ValidationError

from reqif_export.services.export_settings_reader import ExportSettingsReader

SETTINGS_JSON = """
{
  "title": "Mission requirements",
  "addXhtmlTags": true,
  "requirementAttributeDefinitions": {
    "textAttributeDefinitionId": "AD-TEXT",
    "foreignDeletedAttributeDefinitionId": "AD-DELETED",
    "foreignModifiedOnAttributeDefinitionId": "AD-MODIFIED",
    "nameAttributeDefinitionId": "AD-NAME"
  },
  "specificationAttributeDefinitions": {
    "textAttributeDefinitionId": "AD-SPEC-TEXT"
  },
  "externalIdentifierMap": {
    "correspondence": [
      {"internalThing": "35a9cf05-4eba-4cda-b60c-7cfeaa8f8e12", "externalId": "AD-FLAG"},
      {"internalThing": "35a9cf05-4eba-4cda-b60c-7cfeaa8f8e12", "externalId": "AD-FLAG-COPY"},
      {"internalThing": "9e1a4bc0-8d7e-4a0b-a9b2-3a5c7e5c8b11", "externalId": "AD-PRIORITY"}
    ]
  }
}
"""


class TestExportSettingsReader:
    def test_read(self):
        settings = ExportSettingsReader().read(SETTINGS_JSON)
        assert settings.title == "Mission requirements"
        assert settings.add_xhtml_tags is True
        assert settings.requirement_attribute_definitions.text_attribute_definition_id == "AD-TEXT"
        assert settings.requirement_attribute_definitions.name_attribute_definition_id == "AD-NAME"
        assert settings.specification_attribute_definitions.text_attribute_definition_id == "AD-SPEC-TEXT"
        assert settings.specification_attribute_definitions.name_attribute_definition_id is None
        assert len(settings.external_identifier_map) == 3

    def test_correspondences_in_map_order(self):
        settings = ExportSettingsReader().read(SETTINGS_JSON)
        correspondences = settings.correspondences_for(UUID("35a9cf05-4eba-4cda-b60c-7cfeaa8f8e12"))
        assert [c.external_id for c in correspondences] == ["AD-FLAG", "AD-FLAG-COPY"]
        assert settings.correspondences_for(UUID(int=0)) == []

    def test_map_as_plain_list(self):
        settings = ExportSettingsReader().read(
            '{"externalIdentifierMap": [{"internalThing": "9e1a4bc0-8d7e-4a0b-a9b2-3a5c7e5c8b11",'
            ' "externalId": "AD-PRIORITY"}]}'
        )
        assert settings.external_identifier_map[0].external_id == "AD-PRIORITY"

    def test_defaults(self):
        settings = ExportSettingsReader().read("{}")
        assert settings.title == ""
        assert settings.add_xhtml_tags is False
        assert settings.requirement_attribute_definitions is None
        assert settings.external_identifier_map == []

    def test_null_map(self):
        assert ExportSettingsReader().read('{"externalIdentifierMap": null}').external_identifier_map == []

    def test_invalid_json(self):
        with pytest.raises(ValidationError):
            ExportSettingsReader().read("{not json")

    def test_read_file(self, tmp_path):
        location = tmp_path / "export-settings.json"
        # Files written by Windows tools often carry a BOM
        location.write_text("\ufeff" + SETTINGS_JSON, encoding="utf-8")
        assert ExportSettingsReader().read_file(location).title == "Mission requirements"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ExportSettingsReader().read_file(tmp_path / "missing.json")
