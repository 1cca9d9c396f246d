"""Tests for CLI entry point."""

from click.testing import CliRunner

from infixeval.cli import main


class TestCLI:
    def test_version_flag(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_help_lists_commands(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("eval", "validate", "rpn"):
            assert command in result.output


class TestEval:
    def test_constant_expression(self):
        runner = CliRunner()
        result = runner.invoke(main, ["eval", "2+3"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "5"

    def test_define(self):
        runner = CliRunner()
        result = runner.invoke(main, ["eval", "2x", "-D", "x=3"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "6"

    def test_vars_file(self, tmp_path):
        runner = CliRunner()
        vars_file = tmp_path / "vars.yaml"
        vars_file.write_text("a: 2\nb: 3\n")
        result = runner.invoke(main, ["eval", "a*b", "--vars", str(vars_file)])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "6"

    def test_define_overrides_vars_file(self, tmp_path):
        runner = CliRunner()
        vars_file = tmp_path / "vars.yaml"
        vars_file.write_text("a: 2\nb: 3\n")
        result = runner.invoke(main, ["eval", "a*b", "--vars", str(vars_file), "-D", "a=5"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "15"

    def test_missing_vars_file(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["eval", "a", "--vars", str(tmp_path / "missing.yaml")])
        assert result.exit_code != 0

    def test_division_by_zero(self):
        runner = CliRunner()
        result = runner.invoke(main, ["eval", "1/0"])
        assert result.exit_code == 1
        assert "Division by zero" in result.output

    def test_unset_variable(self):
        runner = CliRunner()
        result = runner.invoke(main, ["eval", "x+1", "-V", "x"])
        assert result.exit_code == 1
        assert "No value has been set for the variable 'x'" in result.output

    def test_unknown_name(self):
        runner = CliRunner()
        result = runner.invoke(main, ["eval", "3*foo"])
        assert result.exit_code == 1
        assert "Unknown function or variable 'foo'" in result.output

    def test_malformed_define(self):
        runner = CliRunner()
        result = runner.invoke(main, ["eval", "x", "-D", "x"])
        assert result.exit_code == 1
        assert "Expected NAME=VALUE" in result.output

    def test_variable_named_like_function(self):
        runner = CliRunner()
        result = runner.invoke(main, ["eval", "sin", "-D", "sin=3"])
        assert result.exit_code == 1
        assert "same name as a function" in result.output

    def test_no_implicit_multiplication(self):
        runner = CliRunner()
        result = runner.invoke(main, ["eval", "2x", "-D", "x=3", "--no-implicit-multiplication"])
        assert result.exit_code == 1
        assert "Invalid number of items" in result.output

    def test_verbose(self):
        runner = CliRunner()
        result = runner.invoke(main, ["-v", "eval", "1+1"])
        assert result.exit_code == 0, result.output
        assert "2" in result.output


class TestWarningOptions:
    def test_warn_as_error(self):
        runner = CliRunner()
        result = runner.invoke(main, ["eval", "pi", "-D", "pi=3", "--warn-as-error", "W03"])
        assert result.exit_code == 1
        assert "[W03]" in result.output

    def test_suppress_warning(self):
        runner = CliRunner()
        result = runner.invoke(main, ["eval", "pi", "-D", "pi=3", "--suppress-warning", "W03"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "3"

    def test_unknown_code(self):
        runner = CliRunner()
        result = runner.invoke(main, ["eval", "1", "--warn-as-error", "W99"])
        assert result.exit_code == 1
        assert "Unknown warning code" in result.output


class TestValidate:
    def test_valid(self):
        runner = CliRunner()
        result = runner.invoke(main, ["validate", "x*y", "-D", "x=1", "-D", "y=2"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "valid"

    def test_unset_variables(self):
        runner = CliRunner()
        result = runner.invoke(main, ["validate", "x*y*z", "-V", "x", "-V", "y", "-V", "z"])
        assert result.exit_code == 1
        assert result.output.strip().splitlines() == [
            "The variable 'x' has not been set",
            "The variable 'y' has not been set",
            "The variable 'z' has not been set",
        ]

    def test_no_check_variables(self):
        runner = CliRunner()
        result = runner.invoke(
            main, ["validate", "x*y*z", "-V", "x", "-V", "y", "-V", "z", "--no-check-variables"]
        )
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "valid"

    def test_too_many_operators(self):
        runner = CliRunner()
        result = runner.invoke(main, ["validate", "1 +"])
        assert result.exit_code == 1
        assert "Too many operators" in result.output

    def test_syntax_error(self):
        runner = CliRunner()
        result = runner.invoke(main, ["validate", "(1*2"])
        assert result.exit_code == 1
        assert "Mismatched parentheses" in result.output


class TestRpn:
    def test_unary_minus_and_power(self):
        runner = CliRunner()
        result = runner.invoke(main, ["rpn", "--", "-3^2"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "3 2 ^ -"

    def test_implicit_multiplication(self):
        runner = CliRunner()
        result = runner.invoke(main, ["rpn", "2x", "-V", "x"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "2 x *"
