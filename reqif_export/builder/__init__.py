"""Builder — converts requirements specifications into a ReqIF document."""

from reqif_export.builder.context import ConversionContext
from reqif_export.builder.reqif_builder import ReqIFBuilder

__all__ = ["ConversionContext", "ReqIFBuilder"]
