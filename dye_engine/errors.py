"""Exceptions raised by the dye engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import Filter, FilterOperation, FilterTarget, FilterType


class ConfigError(ValueError):
    """Raised when a color configuration cannot be parsed or validated."""


class InvalidFilterCombination(ValueError):
    """Raised when a filter's target and operation have no defined meaning.

    The offending ``kind``, ``target`` and ``operation`` are kept on the
    exception so callers can report which filter of which color is broken.
    """

    def __init__(self, kind: FilterType, target: FilterTarget,
                 operation: FilterOperation) -> None:
        self.kind = kind
        self.target = target
        self.operation = operation
        super().__init__(
            f"invalid combination ({target.value}, {operation.value}) "
            f"for {kind.value} filter"
        )

    @classmethod
    def from_filter(cls, filter_: Filter) -> InvalidFilterCombination:
        return cls(filter_.kind, filter_.target, filter_.operation)
