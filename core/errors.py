# core/errors.py
from __future__ import annotations

from typing import Any


class ChangepointError(Exception):
    """Base class for caller-recoverable failures."""


class InvalidValue(ChangepointError):
    """
    Raw input that cannot become a TotalOrderFloat.
    reason is one of "nan", "infinite", "unparseable".
    """

    def __init__(self, value: Any, reason: str, index: int | None = None) -> None:
        super().__init__(value, reason, index)
        self.value = value
        self.reason = reason
        self.index = index

    def __str__(self) -> str:
        where = f" at index {self.index}" if self.index is not None else ""
        if self.reason == "unparseable":
            return f"{self.value!r}{where} is not a number"
        return f"{self.value!r}{where} is not a finite floating point number ({self.reason})"


class NotEnoughValues(ChangepointError):
    def __init__(self, length: int, delta: int) -> None:
        super().__init__(length, delta)
        self.length = length
        self.delta = delta

    def __str__(self) -> str:
        return (
            f"The collection has {self.length} elements, but it needs to have at least "
            f"{self.delta * 2} elements to be used with the given value of {self.delta} for delta"
        )


class PermutationScanFailed(ChangepointError):
    """A detector call on one shuffled copy failed; the whole test is void."""

    def __init__(self, permutation_index: int, cause: BaseException) -> None:
        super().__init__(permutation_index, cause)
        self.permutation_index = permutation_index
        self.cause = cause

    def __str__(self) -> str:
        return f"permutation {self.permutation_index} failed: {self.cause}"


class EngineInvariantError(RuntimeError):
    """Raised for states the engine's own bookkeeping makes impossible."""
