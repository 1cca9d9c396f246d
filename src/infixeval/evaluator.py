"""Stack machine that executes RPN token sequences."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from decimal import Decimal

from infixeval.errors import ArityError, DomainError, ExpressionError, UnsetVariableError
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


class ValueStack:
    """Array-backed stack of Decimals that grows by ~20% plus one slot when full."""

    def __init__(self, initial_capacity: int = 5) -> None:
        if initial_capacity <= 0:
            raise ValueError("Stack's capacity must be positive")
        self._data: list[Decimal | None] = [None] * initial_capacity
        self._size = 0

    def __len__(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        return len(self._data)

    def push(self, value: Decimal) -> None:
        if self._size == len(self._data):
            self._data.extend([None] * (int(len(self._data) * 1.2) + 1 - len(self._data)))
        self._data[self._size] = value
        self._size += 1

    def pop(self) -> Decimal:
        if self._size == 0:
            raise IndexError("pop from empty stack")
        self._size -= 1
        value = self._data[self._size]
        self._data[self._size] = None
        return value


def _apply(what: str, apply: Callable[..., Decimal], args: list[Decimal]) -> Decimal:
    """Call a user or built-in apply() and normalise its failures to DomainError."""
    try:
        return apply(*args)
    except ExpressionError:
        raise
    except (ArithmeticError, ValueError) as e:
        raise DomainError(f"{what} failed: {e}") from e


def evaluate_rpn(tokens: Iterable[Token], variables: Mapping[str, Decimal]) -> Decimal:
    """Evaluate an RPN token sequence against variable bindings.

    Raises:
        UnsetVariableError: If a referenced variable has no value.
        ArityError: If an operator or function lacks operands, or more than
            one value remains at the end.
        DomainError: If an operator or function is applied outside its domain.
    """
    output = ValueStack()
    for token in tokens:
        if isinstance(token, NumberToken):
            output.push(token.value)
        elif isinstance(token, VariableToken):
            value = variables.get(token.name)
            if value is None:
                raise UnsetVariableError(token.name)
            output.push(value)
        elif isinstance(token, OperatorToken):
            op = token.operator
            if len(output) < op.operand_count:
                raise ArityError(f"Invalid number of operands available for {op.symbol!r} operator")
            if op.operand_count == 2:
                right = output.pop()
                left = output.pop()
                output.push(_apply(f"Operator {op.symbol!r}", op.apply, [left, right]))
            else:
                output.push(_apply(f"Operator {op.symbol!r}", op.apply, [output.pop()]))
        elif isinstance(token, FunctionToken):
            func = token.function
            if len(output) < func.argument_count:
                raise ArityError(
                    f"Invalid number of arguments available for {func.name!r} function"
                )
            args = [output.pop() for _ in range(func.argument_count)]
            args.reverse()
            output.push(_apply(f"Function {func.name!r}", func.apply, args))
        elif isinstance(token, (OpenParenToken, CloseParenToken, ArgumentSeparatorToken)):
            raise TypeError(f"{type(token).__name__} can not appear in an RPN sequence")
        else:
            raise TypeError(f"Unknown token type: {type(token).__name__}")

    if len(output) > 1:
        raise ArityError(
            "Invalid number of items on the output queue. "
            "Might be caused by an invalid number of arguments for a function."
        )
    if len(output) == 0:
        raise ArityError("Expression produced no value")
    return output.pop()
