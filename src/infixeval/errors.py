"""Custom exception hierarchy for infixeval."""

from __future__ import annotations


class ExpressionError(Exception):
    """Base exception for all infixeval errors."""


class ConfigurationError(ExpressionError):
    """Raised when operators, functions or variable names are misconfigured."""


class ParseError(ExpressionError):
    """Raised when expression text cannot be tokenized or converted to RPN."""


class NumberFormatError(ParseError):
    """Raised when a numeric literal is malformed (e.g. ``1e2e3``)."""


class UnknownNameError(ParseError):
    """Raised when a name resolves to neither a declared variable nor a function."""

    def __init__(self, expression: str, position: int, length: int) -> None:
        self.expression = expression
        self.position = position
        self.length = length
        self.token = expression[position : position + length]
        super().__init__(
            f"Unknown function or variable {self.token!r} at pos {position} "
            f"in expression {expression!r}"
        )


class ArityError(ExpressionError):
    """Raised when operators or functions do not find enough (or find too many) operands."""


class EvaluationError(ExpressionError):
    """Raised when evaluating a compiled expression fails."""


class UnsetVariableError(EvaluationError):
    """Raised when a referenced variable has no bound value."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No value has been set for the variable {name!r}")


class DomainError(EvaluationError):
    """Raised when an operator or function is applied outside its domain."""
