"""Calculator state rules.

Defines the invariants that every ``CalculatorState`` must satisfy after
any key press. The rules are executable -- each is a callable predicate
that returns True/False, so the session store and the conformance tests
can check any state the engine produces.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from engine import CalculatorState, live_result
from models import ActiveOperand
from operand import Operand


# ---------------------------------------------------------------------------
# Rule: a named, executable predicate over a calculator state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Rule:
    """A named validation rule for calculator states."""

    id: str
    name: str
    description: str
    check: Callable[[CalculatorState], bool]


# ---------------------------------------------------------------------------
# Invariants
# ---------------------------------------------------------------------------

def _pending_iff_second_active(s: CalculatorState) -> bool:
    return (s.pending is not None) == (s.active is ActiveOperand.SECOND)


def _second_empty_without_operator(s: CalculatorState) -> bool:
    return s.pending is not None or s.second.is_empty


def _single_decimal_point(s: CalculatorState) -> bool:
    return all(op.text.count(".") <= 1 for op in (s.first, s.second))


def _no_leading_zero(op: Operand) -> bool:
    if op.is_computed:
        return True
    return op.integer == "0" or not op.integer.startswith("0")


def _operands_have_no_leading_zeros(s: CalculatorState) -> bool:
    return _no_leading_zero(s.first) and _no_leading_zero(s.second)


def _same_float(a: float, b: float) -> bool:
    if math.isnan(a) or math.isnan(b):
        return math.isnan(a) and math.isnan(b)
    return a == b


def _result_is_live(s: CalculatorState) -> bool:
    """While a second number is typed the result tracks first {op} second."""
    if s.pending is None or s.second.is_empty:
        return True
    return _same_float(s.result, live_result(s))


def _completed_only_on_first(s: CalculatorState) -> bool:
    return not s.just_completed or s.active is ActiveOperand.FIRST


def _completed_has_answer(s: CalculatorState) -> bool:
    return not s.just_completed or not s.first.is_empty


# ---------------------------------------------------------------------------
# Spec: collection of all rules
# ---------------------------------------------------------------------------

STATE_RULES: list[Rule] = [
    Rule(
        id="STATE-PENDING",
        name="pending_iff_second_active",
        description="An operator is pending if and only if the second operand is active",
        check=_pending_iff_second_active,
    ),
    Rule(
        id="STATE-SECOND-EMPTY",
        name="second_empty_without_operator",
        description="The second operand is empty while no operator is pending",
        check=_second_empty_without_operator,
    ),
    Rule(
        id="STATE-DECIMAL",
        name="single_decimal_point",
        description="Each operand holds at most one decimal point",
        check=_single_decimal_point,
    ),
    Rule(
        id="STATE-LEADING-ZERO",
        name="operands_have_no_leading_zeros",
        description="Typed operands never start with a redundant zero",
        check=_operands_have_no_leading_zeros,
    ),
    Rule(
        id="STATE-LIVE-RESULT",
        name="result_is_live",
        description="The result is recomputed after every second-operand digit",
        check=_result_is_live,
    ),
    Rule(
        id="STATE-COMPLETED-FIRST",
        name="completed_only_on_first",
        description="A just-completed equation leaves the first operand active",
        check=_completed_only_on_first,
    ),
    Rule(
        id="STATE-COMPLETED-ANSWER",
        name="completed_has_answer",
        description="A just-completed equation seeds the first operand with the answer",
        check=_completed_has_answer,
    ),
]


@dataclass(frozen=True)
class ValidationResult:
    rule_id: str
    rule_name: str
    passed: bool
    description: str


@dataclass(frozen=True)
class ValidationReport:
    results: list[ValidationResult]

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def failures(self) -> list[ValidationResult]:
        return [r for r in self.results if not r.passed]

    def summary(self) -> str:
        total = len(self.results)
        failed = len(self.failures)
        if failed == 0:
            return f"All {total} rules passed"
        lines = [f"{failed}/{total} rules failed:"]
        for f in self.failures:
            lines.append(f"  [{f.rule_id}] {f.rule_name}: {f.description}")
        return "\n".join(lines)


def validate_state(state: CalculatorState) -> ValidationReport:
    """Run all rules against a calculator state and return a report."""
    results = []
    for rule in STATE_RULES:
        try:
            passed = rule.check(state)
        except Exception:
            passed = False
        results.append(
            ValidationResult(
                rule_id=rule.id,
                rule_name=rule.name,
                passed=passed,
                description=rule.description,
            )
        )
    return ValidationReport(results=results)
