"""Built-in function catalog.

Transcendental functions are computed in double precision and converted back
to Decimal. ``abs``, ``signum``, ``ceil`` and ``floor`` stay exact.
"""

from __future__ import annotations

import math
from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal
from typing import Callable

from infixeval.errors import DomainError
from infixeval.models import Function
from infixeval.operators import decimal_from_float


def _cbrt(x: float) -> float:
    return math.copysign(abs(x) ** (1.0 / 3.0), x)


def _float_function(
    name: str, fn: Callable[..., float], argument_count: int = 1
) -> Function:
    """Wrap a float function as a Function over Decimals."""

    def apply(*args: Decimal) -> Decimal:
        try:
            result = fn(*(float(a) for a in args))
        except ZeroDivisionError as e:
            raise DomainError(f"Division by zero in {name}()") from e
        except (ValueError, OverflowError) as e:
            raise DomainError(f"{name}({', '.join(str(a) for a in args)}): {e}") from e
        return decimal_from_float(result, f"{name}()")

    return Function(name=name, argument_count=argument_count, apply=apply)


_FLOAT_FUNCTIONS: list[tuple[str, Callable[..., float], int]] = [
    ("sin", math.sin, 1),
    ("cos", math.cos, 1),
    ("tan", math.tan, 1),
    ("cot", lambda x: 1.0 / math.tan(x), 1),
    ("csc", lambda x: 1.0 / math.sin(x), 1),
    ("sec", lambda x: 1.0 / math.cos(x), 1),
    ("asin", math.asin, 1),
    ("acos", math.acos, 1),
    ("atan", math.atan, 1),
    ("sinh", math.sinh, 1),
    ("cosh", math.cosh, 1),
    ("tanh", math.tanh, 1),
    ("csch", lambda x: 1.0 / math.sinh(x), 1),
    ("sech", lambda x: 1.0 / math.cosh(x), 1),
    ("coth", lambda x: math.cosh(x) / math.sinh(x), 1),
    ("log", math.log, 1),
    ("log2", math.log2, 1),
    ("log10", math.log10, 1),
    ("log1p", math.log1p, 1),
    ("logb", lambda x, base: math.log(x) / math.log(base), 2),
    ("exp", math.exp, 1),
    ("expm1", math.expm1, 1),
    ("sqrt", math.sqrt, 1),
    ("cbrt", _cbrt, 1),
    ("pow", math.pow, 2),
    ("toradian", math.radians, 1),
    ("todegree", math.degrees, 1),
]

_BUILTIN_FUNCTIONS: dict[str, Function] = {
    name: _float_function(name, fn, argument_count) for name, fn, argument_count in _FLOAT_FUNCTIONS
}
_BUILTIN_FUNCTIONS.update(
    {
        "abs": Function(name="abs", apply=lambda x: x.copy_abs()),
        "signum": Function(name="signum", apply=lambda x: Decimal((x > 0) - (x < 0))),
        "ceil": Function(name="ceil", apply=lambda x: x.to_integral_value(rounding=ROUND_CEILING)),
        "floor": Function(name="floor", apply=lambda x: x.to_integral_value(rounding=ROUND_FLOOR)),
    }
)

BUILTIN_FUNCTION_NAMES: frozenset[str] = frozenset(_BUILTIN_FUNCTIONS)


def get_builtin_function(name: str) -> Function | None:
    """Return the built-in function called ``name``, or None."""
    return _BUILTIN_FUNCTIONS.get(name)
