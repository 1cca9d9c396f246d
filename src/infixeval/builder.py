"""Fluent construction of compiled expressions."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from infixeval.errors import ConfigurationError, ParseError
from infixeval.expression import DEFAULT_CONSTANTS, Expression
from infixeval.functions import get_builtin_function
from infixeval.models import Function, Operator
from infixeval.operators import BUILTIN_OPERATOR_SYMBOLS
from infixeval.shunting_yard import convert_to_rpn
from infixeval.warning_policy import WarningPolicy, emit_warning

logger = logging.getLogger(__name__)


class ExpressionBuilder:
    """Collect functions, operators and variable names, then compile an expression.

    Example::

        expr = ExpressionBuilder("3x + sin(y)").variables("x", "y").build()
        expr.set_variable("x", 2).set_variable("y", 0).evaluate()
    """

    def __init__(self, expression: str) -> None:
        if expression is None or not expression.strip():
            raise ParseError("Expression can not be empty")
        self._expression = expression
        self._user_functions: dict[str, Function] = {}
        self._user_operators: dict[str, Operator] = {}
        self._variable_names: set[str] = set()
        self._implicit_multiplication = True
        self._warning_policy: WarningPolicy | None = None

    def function(self, function: Function) -> ExpressionBuilder:
        self._user_functions[function.name] = function
        return self

    def functions(self, *functions: Function | Iterable[Function]) -> ExpressionBuilder:
        for function in _flatten(functions):
            self.function(function)
        return self

    def variable(self, name: str) -> ExpressionBuilder:
        self._variable_names.add(name)
        return self

    def variables(self, *names: str | Iterable[str]) -> ExpressionBuilder:
        for name in names:
            if isinstance(name, str):
                self._variable_names.add(name)
            else:
                self._variable_names.update(name)
        return self

    def operator(self, operator: Operator) -> ExpressionBuilder:
        self._user_operators[operator.symbol] = operator
        return self

    def operators(self, *operators: Operator | Iterable[Operator]) -> ExpressionBuilder:
        for operator in _flatten(operators):
            self.operator(operator)
        return self

    def implicit_multiplication(self, enabled: bool) -> ExpressionBuilder:
        self._implicit_multiplication = enabled
        return self

    def warning_policy(self, policy: WarningPolicy | None) -> ExpressionBuilder:
        self._warning_policy = policy
        return self

    def build(self) -> Expression:
        """Compile the expression.

        Raises:
            ConfigurationError: If a variable name collides with a function name,
                or a warning code configured as an error is triggered.
            ParseError: If the expression text is not a valid expression.
        """
        self._warn_on_shadowing()

        variable_names = set(self._variable_names) | set(DEFAULT_CONSTANTS)
        for name in sorted(variable_names):
            if get_builtin_function(name) is not None or name in self._user_functions:
                raise ConfigurationError(
                    f"A variable can not have the same name as a function [{name}]"
                )

        logger.debug(
            "Building %r with %d variables, %d functions, %d operators",
            self._expression,
            len(variable_names),
            len(self._user_functions),
            len(self._user_operators),
        )
        tokens = convert_to_rpn(
            self._expression,
            self._user_functions,
            self._user_operators,
            variable_names,
            self._implicit_multiplication,
        )
        return Expression(tokens, self._user_functions.keys())

    def _warn_on_shadowing(self) -> None:
        policy = self._warning_policy
        for name in sorted(self._user_functions):
            if get_builtin_function(name) is not None:
                emit_warning("W01", name, policy=policy)
        for symbol in sorted(self._user_operators):
            if symbol in BUILTIN_OPERATOR_SYMBOLS:
                emit_warning("W02", symbol, policy=policy)
        for name in sorted(self._variable_names.intersection(DEFAULT_CONSTANTS)):
            emit_warning("W03", name, policy=policy)


def _flatten(items: tuple) -> Iterable:
    for item in items:
        if isinstance(item, (Function, Operator)):
            yield item
        else:
            yield from item
