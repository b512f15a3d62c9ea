"""Percent value type used for zoom levels and window-fit factors."""

from __future__ import annotations
import math
import re
from dataclasses import dataclass
from fractions import Fraction
from typing import Callable, Union, overload

_PERCENT_RE = re.compile(r"^(0|[1-9][0-9]*)%$")


class PercentError(ValueError):
    """Raised when a value can't be turned into a Percent."""


@dataclass(frozen=True, order=True)
class Percent:
    """A ratio that is never negative.

    The ratio is stored exactly, so stepping by a whole percentage never
    accumulates float error. ``Percent.from_integer_percent(50)`` holds 1/2.
    Subtraction bottoms out at zero.
    """
    ratio: Fraction = Fraction(0)

    def __post_init__(self):
        if self.ratio < 0:
            raise PercentError(f"Can't create negative percentages: {self.ratio} is negative")

    @classmethod
    def from_integer_percent(cls, n: int) -> Percent:
        """Build from a whole percentage, e.g. 25 -> 25%."""
        if n < 0:
            raise PercentError(f"Can't create negative percentages: {n} is negative")
        return cls(Fraction(int(n), 100))

    @classmethod
    def try_from_float(cls, f: float) -> Percent:
        """Build from a plain ratio, e.g. 0.5 -> 50%."""
        f = float(f)
        if not math.isfinite(f) or f < 0:
            raise PercentError(f"Can't create percentage from this float: {f}")
        return cls(Fraction(f))

    @classmethod
    def parse(cls, s: str) -> Percent:
        """Parse ``"<digits>%"``. No sign, no decimals, no leading zeros."""
        m = _PERCENT_RE.match(s) if isinstance(s, str) else None
        if m is None:
            raise PercentError(f"Can't parse percentage from {s!r}")
        return cls.from_integer_percent(int(m.group(1)))

    def _step(self, minimum: Percent, rhs: Percent,
              op: Callable[[Percent, Percent], Percent]) -> Percent:
        if rhs.ratio == 0:
            return minimum
        ret = op(self, rhs)
        # round() on a Fraction rounds half to even
        quantized = Percent(round(ret.ratio / rhs.ratio) * rhs.ratio)
        return minimum if quantized < minimum else quantized

    def step_next(self, minimum: Percent, inc: Percent) -> Percent:
        """Add ``inc`` and snap to the nearest multiple of it, never below ``minimum``."""
        return self._step(minimum, inc, lambda a, b: a + b)

    def step_prev(self, minimum: Percent, dec: Percent) -> Percent:
        """Subtract ``dec`` and snap to the nearest multiple of it, never below ``minimum``."""
        return self._step(minimum, dec, lambda a, b: a - b)

    def __add__(self, other: Percent) -> Percent:
        if not isinstance(other, Percent):
            return NotImplemented
        return Percent(self.ratio + other.ratio)

    def __sub__(self, other: Percent) -> Percent:
        if not isinstance(other, Percent):
            return NotImplemented
        diff = self.ratio - other.ratio
        return Percent(diff if diff > 0 else Fraction(0))

    @overload
    def __mul__(self, other: int) -> int: ...

    @overload
    def __mul__(self, other: float) -> float: ...

    def __mul__(self, other: Union[int, float]) -> Union[int, float]:
        if isinstance(other, bool):
            return NotImplemented
        if isinstance(other, int):
            # int() on a Fraction truncates toward zero
            return int(other * self.ratio)
        if isinstance(other, float):
            return other * float(self.ratio)
        return NotImplemented

    __rmul__ = __mul__

    def __float__(self) -> float:
        return float(self.ratio)

    def __str__(self) -> str:
        pct = self.ratio * 100
        if pct.denominator == 1:
            return f"{pct.numerator}%"
        return f"{float(pct):.2f}%"

    def __repr__(self) -> str:
        return f"Percent({self})"
