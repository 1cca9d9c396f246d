"""infixeval: compile infix math expressions once, evaluate them many times."""

__version__ = "0.1.0"

from infixeval.builder import ExpressionBuilder  # noqa: E402
from infixeval.errors import (  # noqa: E402
    ArityError,
    ConfigurationError,
    DomainError,
    EvaluationError,
    ExpressionError,
    NumberFormatError,
    ParseError,
    UnknownNameError,
    UnsetVariableError,
)
from infixeval.expression import DEFAULT_CONSTANTS, Expression  # noqa: E402
from infixeval.models import Function, Operator  # noqa: E402
from infixeval.validation import ValidationResult  # noqa: E402

__all__ = [
    "DEFAULT_CONSTANTS",
    "ArityError",
    "ConfigurationError",
    "DomainError",
    "EvaluationError",
    "Expression",
    "ExpressionBuilder",
    "ExpressionError",
    "Function",
    "NumberFormatError",
    "Operator",
    "ParseError",
    "UnknownNameError",
    "UnsetVariableError",
    "ValidationResult",
    "__version__",
]
