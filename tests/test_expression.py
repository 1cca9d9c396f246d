"""Tests for compiled expressions: bindings, evaluation, copies and validation."""

import copy
import math
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest

from infixeval.builder import ExpressionBuilder
from infixeval.errors import (
    ArityError,
    ConfigurationError,
    DomainError,
    ParseError,
    UnsetVariableError,
)
from infixeval.expression import DEFAULT_CONSTANTS, to_decimal


def _build(expression, *variables):
    return ExpressionBuilder(expression).variables(*variables).build()


class TestToDecimal:
    def test_int(self):
        assert to_decimal(3) == Decimal(3)

    def test_float_uses_shortest_repr(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_decimal_passthrough(self):
        value = Decimal("1.5")
        assert to_decimal(value) is value

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            to_decimal(True)

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_rejected(self, value):
        with pytest.raises(ValueError, match="finite"):
            to_decimal(value)

    def test_string_rejected(self):
        with pytest.raises(TypeError):
            to_decimal("1")


class TestDefaultConstants:
    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_CONSTANTS["pi"] = Decimal(3)

    @pytest.mark.parametrize("name", ["pi", "π"])
    def test_pi(self, name):
        assert _build(name).evaluate() == Decimal(repr(math.pi))

    def test_e(self):
        assert _build("e").evaluate() == Decimal(repr(math.e))

    def test_golden_ratio(self):
        assert _build("φ").evaluate() == Decimal("1.61803398874")

    def test_combined(self):
        expected = 2 * math.pi + math.e + 1.61803398874
        assert float(_build("2π + e + φ").evaluate()) == pytest.approx(expected)

    def test_constant_can_be_rebound(self):
        assert _build("pi").set_variable("pi", 3).evaluate() == 3


class TestBindings:
    def test_set_variable_chains(self):
        expr = _build("x + y", "x", "y")
        assert expr.set_variable("x", 1).set_variable("y", 2) is expr
        assert expr.evaluate() == 3

    def test_set_variables(self):
        expr = _build("x * y", "x", "y").set_variables({"x": 4, "y": Decimal("0.5")})
        assert expr.evaluate() == 2

    def test_variables_view_is_read_only(self):
        expr = _build("x", "x").set_variable("x", 1)
        assert expr.variables["x"] == 1
        with pytest.raises(TypeError):
            expr.variables["x"] = Decimal(2)

    def test_builtin_function_name_rejected(self):
        with pytest.raises(ConfigurationError, match="exists a function with the same name"):
            _build("x", "x").set_variable("sin", 1)

    def test_user_function_name_rejected(self, beta):
        expr = ExpressionBuilder("beta(1, 2)").function(beta).build()
        with pytest.raises(ConfigurationError, match="'beta' is invalid"):
            expr.set_variable("beta", 1)

    def test_clear_variables_removes_constants(self):
        expr = _build("pi")
        expr.clear_variables()
        assert dict(expr.variables) == {}
        with pytest.raises(UnsetVariableError, match="'pi'"):
            expr.evaluate()

    def test_variable_names(self):
        expr = _build("x*y + pi - x", "x", "y")
        assert expr.variable_names() == {"x", "y", "pi"}

    def test_variable_names_excludes_functions(self):
        assert _build("sin(1)").variable_names() == set()

    def test_repr(self):
        assert repr(_build("2+3")) == "Expression('2 3 +')"


class TestEvaluation:
    def test_addition(self):
        assert _build("2+3").evaluate() == 5

    def test_variable(self):
        assert _build("3*x", "x").set_variable("x", 4).evaluate() == 12

    def test_unary_minus_binds_looser_than_power(self):
        assert _build("-3^2").evaluate() == -9
        assert _build("(-3)^2").evaluate() == 9

    def test_implicit_multiplication(self):
        assert _build("2x", "x").set_variable("x", 3).evaluate() == 6
        assert _build("2x2", "x").set_variable("x", 3).evaluate() == 12
        assert _build("cos(x)2", "x").set_variable("x", 0).evaluate() == 2

    def test_unset_variable(self):
        with pytest.raises(UnsetVariableError) as excinfo:
            _build("x + 1", "x").evaluate()
        assert excinfo.value.name == "x"

    @pytest.mark.parametrize("expression", ["1/0", "14%0"])
    def test_division_by_zero(self, expression):
        with pytest.raises(DomainError):
            _build(expression).evaluate()

    def test_zero_argument_function(self, now):
        expr = ExpressionBuilder("14*now()").function(now).build()
        assert expr.evaluate() == 14 * 1700000000

    def test_evaluate_async(self):
        expr = _build("x^2", "x").set_variable("x", 3)
        with ThreadPoolExecutor(max_workers=1) as executor:
            assert expr.evaluate_async(executor).result() == 9

    def test_evaluate_async_propagates_errors(self):
        expr = _build("1/0")
        with ThreadPoolExecutor(max_workers=1) as executor:
            future = expr.evaluate_async(executor)
            with pytest.raises(DomainError):
                future.result()


class TestCopy:
    def test_copy_has_independent_bindings(self):
        original = _build("x + 1", "x").set_variable("x", 1)
        clone = original.copy()
        clone.set_variable("x", 2)
        assert original.evaluate() == 2
        assert clone.evaluate() == 3

    def test_copy_shares_tokens(self):
        original = _build("x + 1", "x")
        assert original.copy().tokens is original.tokens

    @pytest.mark.parametrize("copier", [copy.copy, copy.deepcopy])
    def test_copy_module(self, copier):
        original = _build("x", "x").set_variable("x", 1)
        clone = copier(original)
        clone.set_variable("x", 5)
        assert original.evaluate() == 1
        assert clone.evaluate() == 5

    def test_copy_keeps_function_name_check(self, beta):
        clone = ExpressionBuilder("beta(1, 2)").function(beta).build().copy()
        with pytest.raises(ConfigurationError):
            clone.set_variable("beta", 1)

    def test_copies_evaluate_concurrently(self):
        template = _build("x * 2", "x")
        copies = [template.copy().set_variable("x", i) for i in range(20)]
        with ThreadPoolExecutor(max_workers=4) as executor:
            results = [f.result() for f in [c.evaluate_async(executor) for c in copies]]
        assert results == [Decimal(i * 2) for i in range(20)]


class TestValidThenEvaluates:
    @pytest.mark.parametrize(
        "expression",
        [
            "1",
            "x",
            "x*y*z",
            "sin(x) + cos(y)",
            "-x^2",
            "2x(y + 1)",
            "pow(x, 2) % 3",
            "sin()",
            "1 +",
            "x y z",
            "logb(8)",
            "logb(8, 2, 4)",
        ],
    )
    def test_valid_implies_single_value(self, expression):
        expr = _build(expression, "x", "y", "z").set_variables({"x": 2, "y": 3, "z": 4})
        if expr.validate().valid:
            assert isinstance(expr.evaluate(), Decimal)
        else:
            with pytest.raises(ArityError):
                expr.evaluate()

    @pytest.mark.parametrize("expression", ["()", "[]", "{}"])
    def test_bare_brackets_rejected_before_validation(self, expression):
        with pytest.raises(ParseError, match="has no operands"):
            _build(expression)
