"""Operand builder and number formatting.

An operand is built one keypad character at a time.  Rather than
accumulating a string and re-parsing it, the builder keeps the sign, the
integer digits and the (optional) fraction digits apart, and only joins
them for display.  Operands seeded from a computed answer carry the
float directly and are spelled out as digits only when edited.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal

from config import ERROR_TOKEN, NonFiniteMode

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_PLAIN_DECIMAL = re.compile(r"^(-?)(\d+)(?:\.(\d*))?$")


def format_number(value: float, mode: NonFiniteMode = NonFiniteMode.PROPAGATE) -> str:
    """Render a computed value for display.

    Whole numbers that survive truncation to a 64-bit integer lose their
    trailing ``.0``; everything else keeps Python's shortest float repr.
    """
    if not math.isfinite(value):
        if mode == NonFiniteMode.ERROR:
            return ERROR_TOKEN
        return repr(value)
    if value.is_integer() and INT64_MIN <= value <= INT64_MAX:
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class Operand:
    negative: bool = False
    integer: str = ""
    fraction: str | None = None
    computed: float | None = None

    # -- construction -------------------------------------------------------

    @classmethod
    def zero(cls) -> Operand:
        return cls(integer="0")

    @classmethod
    def from_value(cls, value: float) -> Operand:
        """An operand holding a computed answer."""
        return cls(computed=float(value))

    @classmethod
    def parse(cls, text: str) -> Operand:
        """Build an operand from a plain decimal such as ``-12.5`` or ``3.``."""
        m = _PLAIN_DECIMAL.match(text)
        if m is None:
            raise ValueError(f"Not a plain decimal: {text!r}")
        sign, integer, fraction = m.groups()
        return cls(negative=bool(sign), integer=integer, fraction=fraction)

    # -- views --------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return self.computed is None and not self.integer and self.fraction is None

    @property
    def is_computed(self) -> bool:
        return self.computed is not None

    @property
    def has_decimal(self) -> bool:
        if self.computed is not None:
            return self.editable().fraction is not None
        return self.fraction is not None

    @property
    def digit_count(self) -> int:
        return len(self.integer) + len(self.fraction or "")

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.value)

    @property
    def text(self) -> str:
        if self.computed is not None:
            return format_number(self.computed)
        sign = "-" if self.negative and (self.integer or self.fraction) else ""
        if self.fraction is None:
            return f"{sign}{self.integer}"
        return f"{sign}{self.integer}.{self.fraction}"

    @property
    def value(self) -> float:
        if self.computed is not None:
            return self.computed
        if self.is_empty:
            return 0.0
        return float(self.text)

    def render(self, mode: NonFiniteMode) -> str:
        if self.computed is not None:
            return format_number(self.computed, mode)
        return self.text

    # -- editing ------------------------------------------------------------

    def editable(self) -> Operand:
        """Convert a computed operand into digits that can be edited.

        Answers in exponent form (``1e-05``) are spelled out in full;
        ``inf`` and ``nan`` have no digits and give an empty operand.
        """
        if self.computed is None:
            return self
        if not math.isfinite(self.computed):
            return Operand()
        try:
            return Operand.parse(self.text)
        except ValueError:
            return Operand.parse(format(Decimal(repr(self.computed)), "f"))

    def push(self, char: str) -> Operand:
        """Append a digit or the decimal point."""
        base = self.editable()
        if char == ".":
            if base.fraction is not None:
                return base
            return Operand(base.negative, base.integer or "0", "")
        if not char.isdigit() or len(char) != 1:
            raise ValueError(f"Not a digit: {char!r}")
        if base.fraction is not None:
            return Operand(base.negative, base.integer, base.fraction + char)
        if base.integer == "0":
            return Operand(base.negative, char, None)
        return Operand(base.negative, base.integer + char, None)

    def pop(self) -> Operand:
        """Drop the last character."""
        base = self.editable()
        if base.fraction is not None:
            if base.fraction:
                return Operand(base.negative, base.integer, base.fraction[:-1])
            return Operand(base.negative, base.integer, None)
        integer = base.integer[:-1]
        if not integer:
            return Operand()
        return Operand(base.negative, integer, None)
