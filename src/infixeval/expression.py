"""Compiled expressions: an immutable RPN program plus mutable variable bindings."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from concurrent.futures import Executor, Future
from decimal import Decimal
from types import MappingProxyType
from typing import Union

from infixeval.errors import ConfigurationError
from infixeval.evaluator import evaluate_rpn
from infixeval.functions import get_builtin_function
from infixeval.tokens import Token, VariableToken, format_rpn
from infixeval.validation import ValidationResult, validate_rpn

Number = Union[Decimal, int, float]

DEFAULT_CONSTANTS: Mapping[str, Decimal] = MappingProxyType(
    {
        "pi": Decimal(repr(math.pi)),
        "π": Decimal(repr(math.pi)),
        "φ": Decimal("1.61803398874"),
        "e": Decimal(repr(math.e)),
    }
)


def to_decimal(value: Number) -> Decimal:
    """Convert a binding value to Decimal; floats go through their shortest repr."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("Booleans are not valid variable values")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Variable values must be finite, got {value!r}")
        return Decimal(repr(value))
    raise TypeError(f"Unsupported variable value type: {type(value).__name__}")


class Expression:
    """An expression compiled to RPN, ready to be evaluated repeatedly.

    The token sequence is immutable and may be shared between threads. The
    variable bindings are not synchronized: evaluating while another thread
    calls ``set_variable`` on the same instance gives undefined results. Use
    ``copy()`` per task instead.
    """

    def __init__(self, tokens: Iterable[Token], user_function_names: Iterable[str] = ()) -> None:
        self._tokens: tuple[Token, ...] = tuple(tokens)
        self._variables: dict[str, Decimal] = dict(DEFAULT_CONSTANTS)
        self._user_function_names: set[str] = set(user_function_names)

    @property
    def tokens(self) -> tuple[Token, ...]:
        return self._tokens

    @property
    def variables(self) -> Mapping[str, Decimal]:
        """Read-only view of the current bindings."""
        return MappingProxyType(self._variables)

    def __repr__(self) -> str:
        return f"Expression({format_rpn(self._tokens)!r})"

    def set_variable(self, name: str, value: Number) -> Expression:
        self._check_variable_name(name)
        self._variables[name] = to_decimal(value)
        return self

    def set_variables(self, variables: Mapping[str, Number]) -> Expression:
        for name, value in variables.items():
            self.set_variable(name, value)
        return self

    def clear_variables(self) -> Expression:
        """Remove every binding, including the default constants."""
        self._variables.clear()
        return self

    def _check_variable_name(self, name: str) -> None:
        if name in self._user_function_names or get_builtin_function(name) is not None:
            raise ConfigurationError(
                f"The variable name {name!r} is invalid. "
                "Since there exists a function with the same name"
            )

    def variable_names(self) -> set[str]:
        """Names of the variables referenced by the expression."""
        return {t.name for t in self._tokens if isinstance(t, VariableToken)}

    def validate(self, check_variables: bool = True) -> ValidationResult:
        return validate_rpn(self._tokens, self._variables, check_variables)

    def evaluate(self) -> Decimal:
        return evaluate_rpn(self._tokens, self._variables)

    def evaluate_async(self, executor: Executor) -> Future[Decimal]:
        """Submit ``evaluate()`` to ``executor``. In-flight evaluation can not be cancelled."""
        return executor.submit(self.evaluate)

    def copy(self) -> Expression:
        """Return a copy with independent bindings sharing the same tokens."""
        clone = Expression.__new__(Expression)
        clone._tokens = self._tokens
        clone._variables = dict(self._variables)
        clone._user_function_names = set(self._user_function_names)
        return clone

    def __copy__(self) -> Expression:
        return self.copy()

    def __deepcopy__(self, memo: dict) -> Expression:
        return self.copy()
