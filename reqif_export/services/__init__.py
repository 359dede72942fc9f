"""Services — ReqIF I/O, export settings, COMET data retrieval and the template-based builder."""

from reqif_export.services.export_settings_reader import ExportSettingsReader
from reqif_export.services.reqif_loader import ReqIFLoader
from reqif_export.services.reqif_writer import ReqIFWriter
from reqif_export.services.session_data_retriever import SessionDataRetriever
from reqif_export.services.source_data_assembler import SourceDataAssembler
from reqif_export.services.template_based_builder import TemplateBasedReqIFBuilder

__all__ = [
    "ExportSettingsReader",
    "ReqIFLoader",
    "ReqIFWriter",
    "SessionDataRetriever",
    "SourceDataAssembler",
    "TemplateBasedReqIFBuilder",
]
