"""Static (non-evaluating) structural validation of RPN token sequences."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal

from infixeval.tokens import (
    ArgumentSeparatorToken,
    CloseParenToken,
    FunctionToken,
    NumberToken,
    OpenParenToken,
    OperatorToken,
    Token,
    VariableToken,
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a structural check: ``valid`` plus human-readable errors."""

    valid: bool
    errors: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return self.valid


SUCCESS = ValidationResult(valid=True)


def validate_rpn(
    tokens: Iterable[Token],
    variables: Mapping[str, Decimal],
    check_variables: bool = True,
) -> ValidationResult:
    """Check operand, operator and argument counts without evaluating.

    A running ``depth`` counts the values the evaluator would hold. It must
    stay at least 1 after every token and end at exactly 1. Scanning stops at
    the first point where it drops below 1.
    """
    errors: list[str] = []
    depth = 0
    for token in tokens:
        if isinstance(token, NumberToken):
            depth += 1
        elif isinstance(token, VariableToken):
            depth += 1
            if check_variables and token.name not in variables:
                errors.append(f"The variable {token.name!r} has not been set")
        elif isinstance(token, FunctionToken):
            func = token.function
            if depth < func.argument_count:
                errors.append(f"Not enough arguments for {func.name!r}")
            if func.argument_count > 1:
                depth -= func.argument_count - 1
            elif func.argument_count == 0:
                depth += 1
        elif isinstance(token, OperatorToken):
            if token.operator.operand_count == 2:
                depth -= 1
        elif isinstance(token, (OpenParenToken, CloseParenToken, ArgumentSeparatorToken)):
            raise TypeError(f"{type(token).__name__} can not appear in an RPN sequence")
        else:
            raise TypeError(f"Unknown token type: {type(token).__name__}")

        if depth < 1:
            errors.append("Too many operators")
            return ValidationResult(valid=False, errors=tuple(errors))

    if depth < 1:
        errors.append("Too many operators")
    elif depth > 1:
        errors.append("Too many operands")
    if errors:
        return ValidationResult(valid=False, errors=tuple(errors))
    return SUCCESS
