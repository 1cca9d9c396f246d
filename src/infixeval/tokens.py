"""Token kinds produced by the tokenizer and consumed by the converter and evaluator."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from infixeval.models import Function, Operator


@dataclass(frozen=True)
class NumberToken:
    value: Decimal

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class VariableToken:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class OperatorToken:
    operator: Operator

    def __str__(self) -> str:
        return self.operator.symbol


@dataclass(frozen=True)
class FunctionToken:
    function: Function

    def __str__(self) -> str:
        return self.function.name


@dataclass(frozen=True)
class OpenParenToken:
    def __str__(self) -> str:
        return "("


@dataclass(frozen=True)
class CloseParenToken:
    def __str__(self) -> str:
        return ")"


@dataclass(frozen=True)
class ArgumentSeparatorToken:
    def __str__(self) -> str:
        return ","


Token = Union[
    NumberToken,
    VariableToken,
    OperatorToken,
    FunctionToken,
    OpenParenToken,
    CloseParenToken,
    ArgumentSeparatorToken,
]

# Tokens after which a value-producing token implies multiplication.
IMPLICIT_MULTIPLICATION_BLOCKERS: tuple[type, ...] = (
    OperatorToken,
    OpenParenToken,
    FunctionToken,
    ArgumentSeparatorToken,
)


def format_rpn(tokens: list[Token] | tuple[Token, ...]) -> str:
    """Render a token sequence space separated, e.g. ``2 3 +``."""
    return " ".join(str(token) for token in tokens)
