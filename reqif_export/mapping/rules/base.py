"""
Base class of the mapping rules used by the MappingEngine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Generic, TypeVar

TInput = TypeVar("TInput")
TOutput = TypeVar("TOutput")


class MappingRule(ABC, Generic[TInput, TOutput]):
    """Transforms one input object into one output object."""

    input_type: ClassVar[type] = object
    output_type: ClassVar[type] = object

    @abstractmethod
    def transform(self, input: TInput) -> TOutput:
        ...
