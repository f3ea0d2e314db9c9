"""Shared fixtures for calculator tests."""

from __future__ import annotations

import pytest

from config import CalculatorConfig, NonFiniteMode
from engine import Calculator
from store import SessionStore


@pytest.fixture
def calc() -> Calculator:
    return Calculator()


@pytest.fixture
def strict_calc() -> Calculator:
    """A calculator that shows 'Error' instead of inf/nan."""
    return Calculator(CalculatorConfig(non_finite=NonFiniteMode.ERROR))


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()
