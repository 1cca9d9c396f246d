"""Shared fixtures: user-defined operators and functions."""

from __future__ import annotations

from decimal import Decimal

import pytest

from infixeval.errors import DomainError
from infixeval.models import (
    PRECEDENCE_ADDITION,
    PRECEDENCE_DIVISION,
    PRECEDENCE_POWER,
    Function,
    Operator,
)


def _factorial(operand: Decimal) -> Decimal:
    result = Decimal(1)
    for i in range(1, int(operand) + 1):
        result *= i
    return result


def _reciprocal(operand: Decimal) -> Decimal:
    if operand.is_zero():
        raise DomainError("Division by zero!")
    return 1 / operand


@pytest.fixture
def factorial():
    return Operator(
        symbol="!",
        operand_count=1,
        left_associative=True,
        precedence=PRECEDENCE_POWER + 1,
        apply=_factorial,
    )


@pytest.fixture
def reciprocal():
    return Operator(
        symbol="$",
        operand_count=1,
        left_associative=True,
        precedence=PRECEDENCE_DIVISION,
        apply=_reciprocal,
    )


@pytest.fixture
def greater_equal():
    return Operator(
        symbol=">=",
        operand_count=2,
        left_associative=True,
        precedence=PRECEDENCE_ADDITION - 1,
        apply=lambda left, right: Decimal(1) if left >= right else Decimal(0),
    )


@pytest.fixture
def beta():
    return Function(name="beta", argument_count=2, apply=lambda a, b: b - a)


@pytest.fixture
def gamma():
    return Function(name="gamma", argument_count=3, apply=lambda a, b, c: a * b / c)


@pytest.fixture
def eta():
    return Function(name="eta", argument_count=7, apply=lambda *args: sum(args, Decimal(0)))


@pytest.fixture
def now():
    return Function(name="now", argument_count=0, apply=lambda: Decimal(1700000000))
