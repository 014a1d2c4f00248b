# core/numeric.py
from __future__ import annotations

import sys
from collections.abc import Sequence
from math import copysign, fmod, isfinite, isnan
from typing import Any, Protocol, TypeVar

import numpy as np

from core.errors import InvalidValue

_MAX = sys.float_info.max
_MIN_POSITIVE = sys.float_info.min  # smallest positive normal double


class Numeric(Protocol):
    """
    What the heap pair and the EDM-X scan need from a value type:
    total order, additive/multiplicative identity, + - * / and negation,
    and a way to lift a plain float (the split weight) into the type.
    """

    def __lt__(self, other: Any) -> bool: ...
    def __le__(self, other: Any) -> bool: ...
    def __add__(self: N, other: N) -> N: ...
    def __sub__(self: N, other: N) -> N: ...
    def __mul__(self: N, other: N) -> N: ...
    def __truediv__(self: N, other: N) -> N: ...
    def __neg__(self: N) -> N: ...

    @classmethod
    def zero(cls: type[N]) -> N: ...

    @classmethod
    def one(cls: type[N]) -> N: ...

    @classmethod
    def from_float(cls: type[N], value: float) -> N: ...


N = TypeVar("N", bound=Numeric)


def _reason(raw: float) -> str:
    return "nan" if isnan(raw) else "infinite"


def clip_to_finite(raw: float) -> float:
    """Map +/-inf to the largest finite double of the same sign."""
    if raw == float("inf"):
        return _MAX
    if raw == float("-inf"):
        return -_MAX
    return raw


def as_divisor(candidate: float) -> float:
    """Replace a zero divisor by the smallest normal magnitude, keeping its sign."""
    if candidate == 0.0:
        return copysign(_MIN_POSITIVE, candidate)
    return candidate


class TotalOrderFloat:
    """
    A finite float. Construction rejects NaN and +/-inf, and every arithmetic
    result is clipped back into the finite range, so comparisons between two
    instances are always total.
    """

    __slots__ = ("_value",)

    def __init__(self, value: float) -> None:
        v = float(value)
        if not isfinite(v):
            raise InvalidValue(v, _reason(v))
        self._value = v

    @classmethod
    def new(cls, value: float) -> TotalOrderFloat | None:
        v = float(value)
        if not isfinite(v):
            return None
        return cls(v)

    @classmethod
    def parse(cls, text: str) -> TotalOrderFloat:
        try:
            v = float(text)
        except (TypeError, ValueError):
            raise InvalidValue(text, "unparseable") from None
        if not isfinite(v):
            raise InvalidValue(text, _reason(v))
        return cls(v)

    @classmethod
    def zero(cls) -> TotalOrderFloat:
        return cls(0.0)

    @classmethod
    def one(cls) -> TotalOrderFloat:
        return cls(1.0)

    @classmethod
    def from_float(cls, value: float) -> TotalOrderFloat:
        return cls(clip_to_finite(float(value)))

    @property
    def value(self) -> float:
        return self._value

    def is_zero(self) -> bool:
        return self._value == 0.0

    # pickling (slots, no __dict__)
    def __getstate__(self) -> float:
        return self._value

    def __setstate__(self, state: float) -> None:
        self._value = state

    #  ordering
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TotalOrderFloat):
            return NotImplemented
        return self._value == other._value

    def __lt__(self, other: TotalOrderFloat) -> bool:
        if not isinstance(other, TotalOrderFloat):
            return NotImplemented
        return self._value < other._value

    def __le__(self, other: TotalOrderFloat) -> bool:
        if not isinstance(other, TotalOrderFloat):
            return NotImplemented
        return self._value <= other._value

    def __gt__(self, other: TotalOrderFloat) -> bool:
        if not isinstance(other, TotalOrderFloat):
            return NotImplemented
        return self._value > other._value

    def __ge__(self, other: TotalOrderFloat) -> bool:
        if not isinstance(other, TotalOrderFloat):
            return NotImplemented
        return self._value >= other._value

    def __hash__(self) -> int:
        return hash(self._value)

    #  closed arithmetic
    def __add__(self, other: TotalOrderFloat) -> TotalOrderFloat:
        if not isinstance(other, TotalOrderFloat):
            return NotImplemented
        return TotalOrderFloat(clip_to_finite(self._value + other._value))

    def __sub__(self, other: TotalOrderFloat) -> TotalOrderFloat:
        if not isinstance(other, TotalOrderFloat):
            return NotImplemented
        return self + (-other)

    def __mul__(self, other: TotalOrderFloat) -> TotalOrderFloat:
        if not isinstance(other, TotalOrderFloat):
            return NotImplemented
        return TotalOrderFloat(clip_to_finite(self._value * other._value))

    def __truediv__(self, other: TotalOrderFloat) -> TotalOrderFloat:
        if not isinstance(other, TotalOrderFloat):
            return NotImplemented
        return TotalOrderFloat(clip_to_finite(self._value / as_divisor(other._value)))

    def __mod__(self, other: TotalOrderFloat) -> TotalOrderFloat:
        if not isinstance(other, TotalOrderFloat):
            return NotImplemented
        # truncated remainder: sign follows the dividend, |r| < |divisor|
        return TotalOrderFloat(clip_to_finite(fmod(self._value, as_divisor(other._value))))

    def __neg__(self) -> TotalOrderFloat:
        return TotalOrderFloat(-self._value)

    def __abs__(self) -> TotalOrderFloat:
        return TotalOrderFloat(abs(self._value))

    def __float__(self) -> float:
        return self._value

    def __repr__(self) -> str:
        return f"TotalOrderFloat({self._value!r})"


def to_total_order_floats(raw_values: Sequence[float] | np.ndarray) -> list[TotalOrderFloat]:
    """
    Convert a batch of raw floats. Fails the whole batch on the first NaN or
    infinite element, reporting its index.
    """
    arr = np.asarray(raw_values, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"expected a 1-D sequence of floats, got shape {arr.shape}")
    bad = np.flatnonzero(~np.isfinite(arr))
    if bad.size:
        idx = int(bad[0])
        v = float(arr[idx])
        raise InvalidValue(v, _reason(v), index=idx)
    return [TotalOrderFloat(v) for v in arr.tolist()]
