"""Built-in operator table."""

from __future__ import annotations

import math
from decimal import Decimal

from infixeval.errors import DomainError
from infixeval.models import (
    MATH_CONTEXT,
    PRECEDENCE_ADDITION,
    PRECEDENCE_DIVISION,
    PRECEDENCE_MODULO,
    PRECEDENCE_MULTIPLICATION,
    PRECEDENCE_POWER,
    PRECEDENCE_SUBTRACTION,
    PRECEDENCE_UNARY_MINUS,
    PRECEDENCE_UNARY_PLUS,
    Operator,
)

DIVISION_SIGN = "÷"


def decimal_from_float(value: float, what: str) -> Decimal:
    """Convert a float result back to Decimal, rejecting NaN and infinities."""
    if not math.isfinite(value):
        raise DomainError(f"{what} produced a non-finite result: {value!r}")
    return Decimal(repr(value))


def _divide(left: Decimal, right: Decimal) -> Decimal:
    if right.is_zero():
        raise DomainError("Division by zero!")
    return MATH_CONTEXT.divide(left, right)


def _power(base: Decimal, exponent: Decimal) -> Decimal:
    # Float on purpose: there is no closed-form decimal power here.
    try:
        result = math.pow(float(base), float(exponent))
    except (ValueError, OverflowError) as e:
        raise DomainError(f"Cannot raise {base} to the power of {exponent}: {e}") from e
    return decimal_from_float(result, "'^'")


def _modulo(left: Decimal, right: Decimal) -> Decimal:
    if right.is_zero():
        raise DomainError("Division by zero!")
    # fmod keeps the sign of the dividend.
    return decimal_from_float(math.fmod(float(left), float(right)), "'%'")


ADDITION = Operator(
    symbol="+",
    operand_count=2,
    left_associative=True,
    precedence=PRECEDENCE_ADDITION,
    apply=MATH_CONTEXT.add,
)
SUBTRACTION = Operator(
    symbol="-",
    operand_count=2,
    left_associative=True,
    precedence=PRECEDENCE_SUBTRACTION,
    apply=MATH_CONTEXT.subtract,
)
MULTIPLICATION = Operator(
    symbol="*",
    operand_count=2,
    left_associative=True,
    precedence=PRECEDENCE_MULTIPLICATION,
    apply=MATH_CONTEXT.multiply,
)
DIVISION = Operator(
    symbol="/",
    operand_count=2,
    left_associative=True,
    precedence=PRECEDENCE_DIVISION,
    apply=_divide,
)
POWER = Operator(
    symbol="^",
    operand_count=2,
    left_associative=False,
    precedence=PRECEDENCE_POWER,
    apply=_power,
)
MODULO = Operator(
    symbol="%",
    operand_count=2,
    left_associative=True,
    precedence=PRECEDENCE_MODULO,
    apply=_modulo,
)
UNARY_MINUS = Operator(
    symbol="-",
    operand_count=1,
    left_associative=False,
    precedence=PRECEDENCE_UNARY_MINUS,
    apply=lambda operand: operand.copy_negate(),
)
UNARY_PLUS = Operator(
    symbol="+",
    operand_count=1,
    left_associative=False,
    precedence=PRECEDENCE_UNARY_PLUS,
    apply=lambda operand: operand,
)

# Keyed by (symbol, operand count); "+" and "-" exist in both arities.
_BUILTIN_OPERATORS: dict[tuple[str, int], Operator] = {
    ("+", 2): ADDITION,
    ("-", 2): SUBTRACTION,
    ("+", 1): UNARY_PLUS,
    ("-", 1): UNARY_MINUS,
}

_ARITY_INDEPENDENT: dict[str, Operator] = {
    "*": MULTIPLICATION,
    "/": DIVISION,
    DIVISION_SIGN: DIVISION,
    "^": POWER,
    "%": MODULO,
}

BUILTIN_OPERATOR_SYMBOLS: frozenset[str] = frozenset(
    {symbol for symbol, _ in _BUILTIN_OPERATORS} | set(_ARITY_INDEPENDENT)
)


def get_builtin_operator(symbol: str, operand_count: int) -> Operator | None:
    """Look up a built-in operator by its single-character symbol.

    ``operand_count`` only matters for ``+`` and ``-``; any value other than
    1 selects the binary form.
    """
    if symbol in _ARITY_INDEPENDENT:
        return _ARITY_INDEPENDENT[symbol]
    return _BUILTIN_OPERATORS.get((symbol, 1 if operand_count == 1 else 2))
