"""Keypad and display models.

The keypad is the set of buttons the presentation layer offers; a
button press travels to the engine as a ``Key``.  What comes back is a
``DisplaySnapshot`` -- an immutable view of everything a renderer needs
to draw the two display labels.  This module holds data models only; the
state machine lives in ``engine``.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Operators and operand slots
# ---------------------------------------------------------------------------

class Operator(str, Enum):
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]


_GLYPHS = {
    Operator.ADD: "+",
    Operator.SUBTRACT: "-",
    Operator.MULTIPLY: "×",
    Operator.DIVIDE: "÷",
}


class ActiveOperand(str, Enum):
    FIRST = "first"
    SECOND = "second"


# ---------------------------------------------------------------------------
# Keypad
# ---------------------------------------------------------------------------

class Key(str, Enum):
    """A keypad button, valued by its label."""

    SQUARE = "x²"
    SQUARE_ROOT = "√"
    CLEAR_ENTRY = "CE"
    ALL_CLEAR = "AC"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    DIVIDE = "÷"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    MULTIPLY = "×"
    ONE = "1"
    TWO = "2"
    THREE = "3"
    SUBTRACT = "-"
    DECIMAL = "."
    ZERO = "0"
    EQUALS = "="
    ADD = "+"

    @property
    def is_digit(self) -> bool:
        return self.value in DIGITS

    @property
    def operator(self) -> Operator | None:
        return _KEY_OPERATORS.get(self)


DIGITS = frozenset("0123456789.")

_KEY_OPERATORS = {
    Key.ADD: Operator.ADD,
    Key.SUBTRACT: Operator.SUBTRACT,
    Key.MULTIPLY: Operator.MULTIPLY,
    Key.DIVIDE: Operator.DIVIDE,
}

# ASCII spellings accepted from keyboards and HTTP clients
KEY_ALIASES: dict[str, Key] = {
    "*": Key.MULTIPLY,
    "x": Key.MULTIPLY,
    "/": Key.DIVIDE,
    "sqrt": Key.SQUARE_ROOT,
    "x^2": Key.SQUARE,
    "sq": Key.SQUARE,
    "del": Key.CLEAR_ENTRY,
    "backspace": Key.CLEAR_ENTRY,
    "c": Key.ALL_CLEAR,
    "enter": Key.EQUALS,
}

KEYPAD_LAYOUT: list[list[Key]] = [
    [Key.SQUARE, Key.SQUARE_ROOT, Key.CLEAR_ENTRY, Key.ALL_CLEAR],
    [Key.SEVEN, Key.EIGHT, Key.NINE, Key.DIVIDE],
    [Key.FOUR, Key.FIVE, Key.SIX, Key.MULTIPLY],
    [Key.ONE, Key.TWO, Key.THREE, Key.SUBTRACT],
    [Key.DECIMAL, Key.ZERO, Key.EQUALS, Key.ADD],
]


def parse_key(label: str) -> Key:
    """Resolve a button label or one of its ASCII aliases to a ``Key``."""
    try:
        return Key(label)
    except ValueError:
        pass
    try:
        return KEY_ALIASES[label.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown key: {label!r}") from None


class KeyPress(BaseModel):
    """Payload for pressing one keypad button."""

    key: Key

    @field_validator("key", mode="before")
    @classmethod
    def resolve_alias(cls, v: object) -> object:
        if isinstance(v, str) and not isinstance(v, Key):
            return parse_key(v)
        return v


# ---------------------------------------------------------------------------
# Display snapshot
# ---------------------------------------------------------------------------

class DisplaySnapshot(BaseModel):
    """Everything the presentation layer renders, frozen at one instant."""

    model_config = ConfigDict(frozen=True)

    display: str = Field(..., description="Primary display, e.g. '15 + 2'")
    caption: str = Field(
        default="", description="Previous equation or 'Ans = ...' annotation"
    )
    equation: str = ""
    result: str = "0"
    pending_operator: Operator | None = None
    active_operand: ActiveOperand = ActiveOperand.FIRST
    just_completed: bool = False
    decimal_entered: bool = False
    operator_entered: bool = False

    @property
    def copy_text(self) -> str | None:
        """Clipboard text, offered only right after a completed equation."""
        return self.display if self.just_completed else None


class SessionView(BaseModel):
    """A calculator session as returned by the API."""

    id: str
    snapshot: DisplaySnapshot
    created_at: datetime
    updated_at: datetime


class CopyResponse(BaseModel):
    text: str
