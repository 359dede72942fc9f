"""
Export Settings Reader — reads the export settings JSON document.
"""

from __future__ import annotations

import logging
from pathlib import Path

from reqif_export.models.export_settings import ExportSettings

logger = logging.getLogger(__name__)


class ExportSettingsReader:
    """Deserializes camelCase export settings JSON into ExportSettings."""

    def read_file(self, path: str | Path) -> ExportSettings:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Export settings file not found: {path}")

        export_settings = self.read(path.read_text(encoding="utf-8-sig"))
        logger.info(f"Export settings read from {path}")
        return export_settings

    def read(self, json_text: str) -> ExportSettings:
        return ExportSettings.model_validate_json(json_text)
