"""Engine configuration.

The configuration decides how the engine treats values that leave the
finite range (division by zero, square root of a negative number) and
whether operands are capped at a number of digits.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class NonFiniteMode(Enum):
    """What the display shows for inf/nan results."""

    PROPAGATE = auto()   # Render the IEEE value as-is: inf, -inf, nan
    ERROR = auto()       # Render the "Error" token and refuse to chain


ERROR_TOKEN = "Error"


@dataclass(frozen=True)
class CalculatorConfig:
    non_finite: NonFiniteMode = NonFiniteMode.PROPAGATE
    max_digits: int | None = None

    def __post_init__(self):
        if self.max_digits is not None and self.max_digits < 1:
            raise ValueError(f"max_digits ({self.max_digits}) must be >= 1")

    def allows_digit(self, digit_count: int) -> bool:
        """True if an operand holding ``digit_count`` digits may grow."""
        return self.max_digits is None or digit_count < self.max_digits


DEFAULT_CONFIG = CalculatorConfig()

# Hardened preset: non-finite results show "Error", operands cap at 12 digits
STRICT = CalculatorConfig(non_finite=NonFiniteMode.ERROR, max_digits=12)
