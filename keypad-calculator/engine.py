"""Calculator engine: the keypad state machine.

The engine takes in a first number, then an operator, then a second
number, and keeps the answer updated as the second number grows.  With
a first number of 10 and the add operator, typing 1, 2, 3 computes and
stores the answers to "10 + 1", "10 + 12" and "10 + 123" before equals
is ever pressed.

Square and square root act on the first number alone.  After equals,
pressing an operator reuses the answer as the next first number, while
pressing a digit starts a new equation.

Every transition is a pure function ``CalculatorState -> CalculatorState``;
``Calculator`` holds the current state and answers each key press with a
``DisplaySnapshot``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Callable

from config import DEFAULT_CONFIG, CalculatorConfig, NonFiniteMode
from logs import get_logger
from models import DIGITS, ActiveOperand, DisplaySnapshot, Key, Operator, parse_key
from operand import Operand, format_number

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------

def calculate(a: float, op: Operator, b: float) -> float:
    """IEEE-754 binary operation; never raises on division by zero."""
    if op is Operator.ADD:
        return a + b
    if op is Operator.SUBTRACT:
        return a - b
    if op is Operator.MULTIPLY:
        return a * b
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def square(value: float) -> float:
    return value * value


def square_root(value: float) -> float:
    if value < 0:
        return math.nan
    return math.sqrt(value)


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CalculatorState:
    first: Operand = field(default_factory=Operand)
    second: Operand = field(default_factory=Operand)
    pending: Operator | None = None
    active: ActiveOperand = ActiveOperand.FIRST
    result: float = 0.0
    # Replaces the first operand in the equation trace once the first
    # operand is itself an answer (chained or squared).
    trace_head: str | None = None
    caption: str = ""
    answer_text: str = ""
    just_completed: bool = False
    operator_entered: bool = False

    @property
    def active_operand(self) -> Operand:
        if self.active is ActiveOperand.SECOND:
            return self.second
        return self.first

    @property
    def decimal_entered(self) -> bool:
        return self.active_operand.has_decimal

    @property
    def equation(self) -> str:
        head = self.trace_head if self.trace_head is not None else self.first.text
        if self.pending is None:
            return head
        return f"{head} {self.pending.glyph} {self.second.text}".rstrip()

    def display(self, mode: NonFiniteMode = NonFiniteMode.PROPAGATE) -> str:
        first = self.first.render(mode)
        if self.pending is None:
            return first or "0"
        return f"{first} {self.pending.glyph} {self.second.render(mode)}"


def live_result(state: CalculatorState) -> float:
    """The answer so far: the binary operation once a second number exists."""
    if state.pending is None or state.second.is_empty:
        return state.first.value
    answer = calculate(state.first.value, state.pending, state.second.value)
    logger.debug(
        "first number: %s, second number: %s, answer: %s",
        state.first.text,
        state.second.text,
        format_number(answer),
    )
    return answer


def _answer_text(value: float, config: CalculatorConfig) -> str:
    return f"Ans = {format_number(value, config.non_finite)}"


def _recompute(state: CalculatorState, config: CalculatorConfig) -> CalculatorState:
    """Refresh the result, and the "Ans = ..." caption once an operation ran."""
    answer = live_result(state)
    if state.pending is None or state.second.is_empty:
        return replace(state, result=answer)
    return replace(state, result=answer, answer_text=_answer_text(answer, config))


def _blocked(operand: Operand, config: CalculatorConfig) -> bool:
    """True if ``operand`` holds an error that must not be carried on."""
    return (
        config.non_finite == NonFiniteMode.ERROR
        and not operand.is_empty
        and not operand.is_finite
    )


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def press_digit(
    state: CalculatorState, char: str, config: CalculatorConfig = DEFAULT_CONFIG
) -> CalculatorState:
    if char not in DIGITS:
        raise ValueError(f"Not a digit or decimal point: {char!r}")

    if state.just_completed and state.active is ActiveOperand.FIRST:
        # A digit right after an answer starts a new equation.
        state = replace(
            state,
            first=Operand(),
            result=0.0,
            trace_head=None,
            caption=state.answer_text,
            just_completed=False,
        )

    operand = state.active_operand
    if char == "." and operand.has_decimal:
        return state
    digits = operand.editable()
    replaces_zero = digits.integer == "0" and digits.fraction is None
    if char != "." and not replaces_zero and not config.allows_digit(digits.digit_count):
        return state

    grown = operand.push(char)
    if state.active is ActiveOperand.FIRST:
        state = replace(state, first=grown, trace_head=None)
    else:
        state = replace(state, second=grown)
    return replace(_recompute(state, config), operator_entered=False)


def press_operator(
    state: CalculatorState, op: Operator, config: CalculatorConfig = DEFAULT_CONFIG
) -> CalculatorState:
    if _blocked(state.first, config):
        return state

    if state.active is ActiveOperand.SECOND and not state.second.is_empty:
        # The second number is complete: its answer starts the next equation.
        if config.non_finite == NonFiniteMode.ERROR and not math.isfinite(state.result):
            return state
        state = replace(
            state,
            first=Operand.from_value(state.result),
            second=Operand(),
            pending=None,
            active=ActiveOperand.FIRST,
            trace_head=state.equation,
            answer_text=_answer_text(state.result, config),
        )

    if state.first.is_empty:
        state = replace(state, first=Operand.zero(), result=0.0)

    return replace(
        state,
        pending=op,
        active=ActiveOperand.SECOND,
        just_completed=False,
        operator_entered=True,
    )


def press_equals(
    state: CalculatorState, config: CalculatorConfig = DEFAULT_CONFIG
) -> CalculatorState:
    answer = live_result(state)
    equation = state.equation or format_number(answer)
    return CalculatorState(
        first=Operand.from_value(answer),
        result=answer,
        trace_head=equation,
        caption=f"{equation} = ",
        answer_text=_answer_text(answer, config),
        just_completed=True,
    )


def press_clear_entry(
    state: CalculatorState, config: CalculatorConfig = DEFAULT_CONFIG
) -> CalculatorState:
    if state.active is ActiveOperand.FIRST:
        if state.first.is_empty:
            return state
        first = state.first.pop()
        if first.is_empty:
            first = Operand.zero()
        return replace(state, first=first, result=first.value, trace_head=None)

    if state.second.is_empty:
        # Only the operator has been entered: take it back.
        return replace(
            state,
            pending=None,
            active=ActiveOperand.FIRST,
            result=state.first.value,
            trace_head=None,
            operator_entered=False,
        )

    return _recompute(replace(state, second=state.second.pop()), config)


def press_all_clear(
    state: CalculatorState, config: CalculatorConfig = DEFAULT_CONFIG
) -> CalculatorState:
    return CalculatorState(caption=state.answer_text, answer_text=state.answer_text)


def _press_unary(
    state: CalculatorState,
    config: CalculatorConfig,
    fn: Callable[[float], float],
    trace: Callable[[str], str],
) -> CalculatorState:
    if state.active is not ActiveOperand.FIRST or state.first.is_empty:
        return state
    if _blocked(state.first, config):
        return state
    answer = fn(state.first.value)
    return replace(
        state,
        first=Operand.from_value(answer),
        result=answer,
        trace_head=trace(state.first.text),
        answer_text=_answer_text(answer, config),
        just_completed=True,
        operator_entered=False,
    )


def press_square(
    state: CalculatorState, config: CalculatorConfig = DEFAULT_CONFIG
) -> CalculatorState:
    return _press_unary(state, config, square, lambda t: f"{t}²")


def press_square_root(
    state: CalculatorState, config: CalculatorConfig = DEFAULT_CONFIG
) -> CalculatorState:
    return _press_unary(state, config, square_root, lambda t: f"√{t}")


def snapshot(
    state: CalculatorState, config: CalculatorConfig = DEFAULT_CONFIG
) -> DisplaySnapshot:
    mode = config.non_finite
    return DisplaySnapshot(
        display=state.display(mode),
        caption=state.caption,
        equation=state.equation,
        result=format_number(state.result, mode),
        pending_operator=state.pending,
        active_operand=state.active,
        just_completed=state.just_completed,
        decimal_entered=state.decimal_entered,
        operator_entered=state.operator_entered,
    )


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

_KEY_ACTIONS: dict[Key, Callable[[CalculatorState, CalculatorConfig], CalculatorState]] = {
    Key.EQUALS: press_equals,
    Key.CLEAR_ENTRY: press_clear_entry,
    Key.ALL_CLEAR: press_all_clear,
    Key.SQUARE: press_square,
    Key.SQUARE_ROOT: press_square_root,
}


class Calculator:
    """One calculator: current state plus the configuration it runs under."""

    def __init__(
        self,
        config: CalculatorConfig = DEFAULT_CONFIG,
        state: CalculatorState | None = None,
    ) -> None:
        self.config = config
        self._state = state if state is not None else CalculatorState()

    @property
    def state(self) -> CalculatorState:
        return self._state

    def _apply(self, new_state: CalculatorState) -> DisplaySnapshot:
        self._state = new_state
        return self.snapshot()

    # -- operations ---------------------------------------------------------

    def digit(self, char: str) -> DisplaySnapshot:
        return self._apply(press_digit(self._state, char, self.config))

    def operator(self, op: Operator) -> DisplaySnapshot:
        return self._apply(press_operator(self._state, Operator(op), self.config))

    def equals(self) -> DisplaySnapshot:
        return self._apply(press_equals(self._state, self.config))

    def clear_entry(self) -> DisplaySnapshot:
        return self._apply(press_clear_entry(self._state, self.config))

    def all_clear(self) -> DisplaySnapshot:
        return self._apply(press_all_clear(self._state, self.config))

    def square(self) -> DisplaySnapshot:
        return self._apply(press_square(self._state, self.config))

    def square_root(self) -> DisplaySnapshot:
        return self._apply(press_square_root(self._state, self.config))

    # -- dispatch -----------------------------------------------------------

    def press(self, key: Key | str) -> DisplaySnapshot:
        """Dispatch one keypad button by its ``Key`` or label."""
        if not isinstance(key, Key):
            key = parse_key(key)
        if key.is_digit:
            return self.digit(key.value)
        if key.operator is not None:
            return self.operator(key.operator)
        return self._apply(_KEY_ACTIONS[key](self._state, self.config))

    def press_all(self, keys: str | list[Key | str]) -> DisplaySnapshot:
        """Press a sequence of keys; a plain string is pressed char by char."""
        snap = self.snapshot()
        for key in keys:
            snap = self.press(key)
        return snap

    def snapshot(self) -> DisplaySnapshot:
        return snapshot(self._state, self.config)

    def copy_text(self) -> str | None:
        """Text to place on the clipboard, only right after an answer."""
        return self.snapshot().copy_text
