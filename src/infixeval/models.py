"""Pydantic v2 models for operators and functions usable in expressions."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Callable

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from infixeval.errors import ConfigurationError

# Arithmetic context for the decimal operators (+, -, *, /).
MATH_CONTEXT = Context(prec=34, rounding=ROUND_HALF_UP)

ALLOWED_OPERATOR_CHARS: frozenset[str] = frozenset(
    {
        "+",
        "-",
        "*",
        "/",
        "%",
        "^",
        "!",
        "#",
        "§",
        "$",
        "&",
        ";",
        ":",
        "~",
        "<",
        ">",
        "|",
        "=",
        "÷",
        "√",
        "∛",
        "⌊",
        "⌈",
    }
)

PRECEDENCE_ADDITION = 500
PRECEDENCE_SUBTRACTION = PRECEDENCE_ADDITION
PRECEDENCE_MULTIPLICATION = 1000
PRECEDENCE_DIVISION = PRECEDENCE_MULTIPLICATION
PRECEDENCE_MODULO = PRECEDENCE_DIVISION
PRECEDENCE_POWER = 10000
PRECEDENCE_UNARY_MINUS = 5000
PRECEDENCE_UNARY_PLUS = PRECEDENCE_UNARY_MINUS


def is_allowed_operator_char(ch: str) -> bool:
    """Return True if ``ch`` may appear in an operator symbol."""
    return ch in ALLOWED_OPERATOR_CHARS


def is_valid_function_name(name: str) -> bool:
    """A letter or underscore, followed by letters, digits or underscores."""
    if not name:
        return False
    for i, ch in enumerate(name):
        if ch.isalpha() or ch == "_":
            continue
        if ch.isdecimal() and i > 0:
            continue
        return False
    return True


class Operator(BaseModel):
    """A prefix, postfix or infix operator.

    ``apply`` receives ``operand_count`` Decimal operands (left to right) and
    returns a Decimal. It may raise ``DomainError``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    symbol: str
    operand_count: int
    left_associative: bool
    precedence: int
    apply: Callable[..., Decimal]

    @field_validator("symbol")
    @classmethod
    def _check_symbol(cls, value: str) -> str:
        if not value or not all(is_allowed_operator_char(ch) for ch in value):
            raise ConfigurationError(f"The operator symbol {value!r} is invalid")
        return value

    @field_validator("operand_count")
    @classmethod
    def _check_operand_count(cls, value: int) -> int:
        if value not in (1, 2):
            raise ConfigurationError(
                f"Operators may take one or two operands, got {value}"
            )
        return value

    @property
    def is_unary(self) -> bool:
        return self.operand_count == 1


class Function(BaseModel):
    """A named function taking a fixed number of arguments.

    A function declared with zero arguments behaves as a value producer, e.g.
    ``now()``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    argument_count: int = 1
    apply: Callable[..., Decimal]

    @model_validator(mode="after")
    def _check_signature(self) -> Function:
        if self.argument_count < 0:
            raise ConfigurationError(
                f"The number of function arguments can not be less than 0 for {self.name!r}"
            )
        if not is_valid_function_name(self.name):
            raise ConfigurationError(f"The function name {self.name!r} is invalid")
        return self
