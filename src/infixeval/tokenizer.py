"""Context-sensitive tokenizer for infix expressions."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Set
from decimal import Decimal, InvalidOperation

from infixeval.errors import NumberFormatError, ParseError, UnknownNameError
from infixeval.functions import get_builtin_function
from infixeval.models import Function, Operator, is_allowed_operator_char
from infixeval.operators import MULTIPLICATION, get_builtin_operator
from infixeval.tokens import (
    IMPLICIT_MULTIPLICATION_BLOCKERS,
    ArgumentSeparatorToken,
    CloseParenToken,
    FunctionToken,
    NumberToken,
    OpenParenToken,
    OperatorToken,
    Token,
    VariableToken,
)

OPEN_BRACKETS = frozenset("({[")
CLOSE_BRACKETS = frozenset(")}]")
ARGUMENT_SEPARATOR = ","
EXPONENT_MARKERS = frozenset("eE")

# Token kinds that start a value and therefore may be preceded by an implicit "*".
_VALUE_STARTS = (NumberToken, VariableToken, FunctionToken, OpenParenToken)


def is_name_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def is_name_char(ch: str) -> bool:
    return ch.isalpha() or ch.isdecimal() or ch == "_" or ch == "."


class Tokenizer:
    """Single-pass, forward-only scanner over one expression.

    Not reusable and not safe to share between threads. When implicit
    multiplication applies, the real token is classified first, a synthetic
    ``*`` is returned, and the real token is held in a one-slot buffer for the
    following call.
    """

    def __init__(
        self,
        expression: str,
        user_functions: Mapping[str, Function] | None = None,
        user_operators: Mapping[str, Operator] | None = None,
        variable_names: Set[str] | None = None,
        implicit_multiplication: bool = True,
    ) -> None:
        self._expression = expression.strip()
        self._length = len(self._expression)
        self._user_functions = user_functions or {}
        self._user_operators = user_operators or {}
        self._variable_names = variable_names or frozenset()
        self._implicit_multiplication = implicit_multiplication
        self._pos = 0
        self._last_token: Token | None = None
        self._pending: Token | None = None

    def has_next(self) -> bool:
        return self._pending is not None or self._pos < self._length

    def __iter__(self) -> Iterator[Token]:
        while self.has_next():
            yield self.next_token()

    def next_token(self) -> Token:
        """Return the next token and advance past it.

        Raises:
            ParseError: On unparseable characters, unknown operators or names.
            NumberFormatError: On malformed numeric literals.
        """
        if self._pending is not None:
            token, self._pending = self._pending, None
            self._last_token = token
            return token
        if self._pos >= self._length:
            raise ParseError(f"Unexpected end of expression {self._expression!r}")

        while self._expression[self._pos].isspace():
            self._pos += 1

        token = self._scan()
        if self._implies_multiplication(token):
            self._pending = token
            token = OperatorToken(MULTIPLICATION)
        self._last_token = token
        return token

    def _implies_multiplication(self, token: Token) -> bool:
        return (
            self._implicit_multiplication
            and self._last_token is not None
            and isinstance(token, _VALUE_STARTS)
            and not isinstance(self._last_token, IMPLICIT_MULTIPLICATION_BLOCKERS)
        )

    def _scan(self) -> Token:
        ch = self._expression[self._pos]
        if ch.isdecimal() or ch == ".":
            if isinstance(self._last_token, NumberToken):
                raise self._unparseable(ch)
            return self._scan_number()
        if ch == ARGUMENT_SEPARATOR:
            self._pos += 1
            return ArgumentSeparatorToken()
        if ch in OPEN_BRACKETS:
            self._pos += 1
            return OpenParenToken()
        if ch in CLOSE_BRACKETS:
            self._pos += 1
            return CloseParenToken()
        if is_allowed_operator_char(ch):
            return self._scan_operator()
        if is_name_start(ch):
            return self._scan_name()
        raise self._unparseable(ch)

    def _unparseable(self, ch: str) -> ParseError:
        return ParseError(f"Unable to parse char {ch!r} (Code:{ord(ch)}) at [{self._pos}]")

    def _scan_number(self) -> NumberToken:
        offset = self._pos
        end = offset + 1
        source = self._expression
        while end < self._length and self._is_numeric(source[end], source[end - 1]):
            end += 1
        # A trailing exponent marker belongs to whatever follows, e.g. "2e" -> 2 * e.
        if end - offset > 1 and source[end - 1] in EXPONENT_MARKERS:
            end -= 1
        text = source[offset:end]
        try:
            value = Decimal(text)
        except InvalidOperation as e:
            raise NumberFormatError(f"Invalid number {text!r} at [{offset}]") from e
        self._pos = end
        return NumberToken(value)

    @staticmethod
    def _is_numeric(ch: str, previous: str) -> bool:
        return (
            ch.isdecimal()
            or ch == "."
            or ch in EXPONENT_MARKERS
            or (previous in EXPONENT_MARKERS and ch in "+-")
        )

    def _scan_operator(self) -> OperatorToken:
        offset = self._pos
        end = offset + 1
        while end < self._length and is_allowed_operator_char(self._expression[end]):
            end += 1
        # Maximal munch, shrinking from the right until a registered operator matches.
        symbol = self._expression[offset:end]
        while symbol:
            operator = self._get_operator(symbol)
            if operator is not None:
                self._pos += len(symbol)
                return OperatorToken(operator)
            symbol = symbol[:-1]
        raise ParseError(
            f"Unknown operator {self._expression[offset:end]!r} at [{offset}] "
            f"in expression {self._expression!r}"
        )

    def _get_operator(self, symbol: str) -> Operator | None:
        operator = self._user_operators.get(symbol)
        if operator is None and len(symbol) == 1:
            operator = get_builtin_operator(symbol, self._contextual_operand_count())
        return operator

    def _contextual_operand_count(self) -> int:
        """1 where no left operand can exist, 2 otherwise."""
        last = self._last_token
        if last is None or isinstance(last, (OpenParenToken, ArgumentSeparatorToken)):
            return 1
        if isinstance(last, OperatorToken):
            op = last.operator
            if op.operand_count == 2 or (op.is_unary and not op.left_associative):
                return 1
        return 2

    def _scan_name(self) -> VariableToken | FunctionToken:
        offset = self._pos
        end = offset
        best_length = 0
        best_token: VariableToken | FunctionToken | None = None
        while end < self._length and is_name_char(self._expression[end]):
            end += 1
            candidate = self._expression[offset:end]
            if candidate in self._variable_names:
                best_length, best_token = end - offset, VariableToken(candidate)
                continue
            function = self._get_function(candidate)
            if function is not None:
                best_length, best_token = end - offset, FunctionToken(function)
        if best_token is None:
            raise UnknownNameError(self._expression, offset, end - offset)
        self._pos = offset + best_length
        return best_token

    def _get_function(self, name: str) -> Function | None:
        function = self._user_functions.get(name)
        if function is None:
            function = get_builtin_function(name)
        return function
