"""
Template Based ReqIF Builder — loads the template document from disk and
hands it to a fresh ReqIFBuilder.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from reqif_export.builder import ReqIFBuilder
from reqif_export.models.export_settings import ExportSettings
from reqif_export.models.reqif import ReqIF
from reqif_export.models.source import RequirementsSpecification
from reqif_export.services.reqif_loader import ReqIFLoader

logger = logging.getLogger(__name__)


class TemplateBasedReqIFBuilder:
    def __init__(self, loader: Optional[ReqIFLoader] = None):
        self.loader = loader or ReqIFLoader()

    def build(
        self,
        template_path: str | Path,
        specifications: Iterable[RequirementsSpecification],
        export_settings: Optional[ExportSettings] = None,
        exclude_alternative_id: bool = False,
    ) -> ReqIF:
        template = self.loader.load(template_path)
        logger.info(f"Template ReqIF {template.the_header.identifier} loaded from {template_path}")

        return ReqIFBuilder().build(
            template,
            specifications,
            export_settings=export_settings,
            exclude_alternative_id=exclude_alternative_id,
        )
