"""Shunting-yard conversion of infix expressions to reverse polish notation."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Set

from infixeval.errors import ParseError
from infixeval.models import Function, Operator
from infixeval.tokenizer import Tokenizer
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

logger = logging.getLogger(__name__)


def convert_to_rpn(
    expression: str,
    user_functions: Mapping[str, Function] | None = None,
    user_operators: Mapping[str, Operator] | None = None,
    variable_names: Set[str] | None = None,
    implicit_multiplication: bool = True,
) -> list[Token]:
    """Convert an infix expression to a list of tokens in RPN order.

    Args:
        expression: The infix expression text.
        user_functions: Functions available in addition to the built-ins.
        user_operators: Operators available in addition to the built-ins.
        variable_names: Names to be recognised as variables.
        implicit_multiplication: Insert ``*`` between adjacent values (``2x``).

    Returns:
        The postfix token sequence.

    Raises:
        ParseError: On empty input, tokenizer errors, misplaced argument
            separators, mismatched parentheses or bare brackets such as "()".
    """
    if not expression or not expression.strip():
        raise ParseError("Expression can not be empty")

    stack: list[Token] = []
    output: list[Token] = []

    tokenizer = Tokenizer(
        expression, user_functions, user_operators, variable_names, implicit_multiplication
    )
    for token in tokenizer:
        if isinstance(token, (NumberToken, VariableToken)):
            output.append(token)
        elif isinstance(token, FunctionToken):
            stack.append(token)
        elif isinstance(token, ArgumentSeparatorToken):
            while stack and not isinstance(stack[-1], OpenParenToken):
                output.append(stack.pop())
            if not stack:
                raise ParseError(
                    "Misplaced function separator ',' or mismatched parentheses "
                    f"in expression {expression!r}"
                )
        elif isinstance(token, OperatorToken):
            _push_operator(token, stack, output)
        elif isinstance(token, OpenParenToken):
            stack.append(token)
        elif isinstance(token, CloseParenToken):
            while stack and not isinstance(stack[-1], OpenParenToken):
                output.append(stack.pop())
            if not stack:
                raise ParseError(f"Mismatched parentheses in expression {expression!r}")
            stack.pop()
            if stack and isinstance(stack[-1], FunctionToken):
                output.append(stack.pop())
        else:
            raise TypeError(f"Unknown token type: {type(token).__name__}")

    while stack:
        token = stack.pop()
        if isinstance(token, (OpenParenToken, CloseParenToken)):
            raise ParseError(
                f"Mismatched parentheses detected in expression {expression!r}. "
                "Please check the expression"
            )
        output.append(token)

    if not output:
        raise ParseError(f"Expression {expression!r} has no operands")

    logger.debug("Converted %r to %d RPN tokens", expression, len(output))
    return output


def _push_operator(token: OperatorToken, stack: list[Token], output: list[Token]) -> None:
    """Pop operators that bind tighter than ``token`` to the output, then push it."""
    o1 = token.operator
    while stack and isinstance(stack[-1], OperatorToken):
        o2 = stack[-1].operator
        if o1.is_unary and not o2.is_unary:
            # A prefix operator never displaces the pending binary operator.
            break
        if (o1.left_associative and o1.precedence <= o2.precedence) or (
            o1.precedence < o2.precedence
        ):
            output.append(stack.pop())
        else:
            break
    stack.append(token)
