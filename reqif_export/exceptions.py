"""
Exception hierarchy for the ReqIF export.

Precondition violations (missing template, empty input) are plain ValueErrors;
everything raised by the conversion itself derives from ReqIFExportError.
"""

from __future__ import annotations


class ReqIFExportError(Exception):
    """Base class for all conversion errors."""


class MappingException(ReqIFExportError):
    """A matched mapping rule failed; the original error is kept on __cause__."""


class NotSupportedError(ReqIFExportError):
    """The input uses a construct the converter cannot express in ReqIF."""


class InvalidOperationError(ReqIFExportError):
    """The input is of a supported kind but is internally inconsistent."""


class DataRetrievalError(ReqIFExportError):
    """The COMET data source could not deliver the requested data."""
