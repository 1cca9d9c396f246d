"""Click CLI entry point for infixeval."""

from __future__ import annotations

import logging
from collections.abc import Callable
from decimal import Decimal
from pathlib import Path

import click

from infixeval import __version__
from infixeval.builder import ExpressionBuilder
from infixeval.errors import ExpressionError
from infixeval.expression import Expression
from infixeval.parser import load_variables, parse_assignment
from infixeval.tokens import format_rpn
from infixeval.warning_policy import WarningPolicy


def _collect_bindings(defines: tuple[str, ...], vars_file: Path | None) -> dict[str, Decimal]:
    """Merge ``--vars`` file bindings with ``-D`` assignments (the latter win)."""
    bindings: dict[str, Decimal] = {}
    if vars_file is not None:
        bindings.update(load_variables(vars_file))
    for raw in defines:
        name, value = parse_assignment(raw)
        bindings[name] = value
    return bindings


def _compile(
    expression: str,
    defines: tuple[str, ...],
    vars_file: Path | None,
    declared: tuple[str, ...],
    implicit_multiplication: bool,
    warn_as_error: str | None,
    suppress_warning: str | None,
) -> Expression:
    """Build the expression and bind every variable given on the command line."""
    try:
        policy = WarningPolicy.from_options(warn_as_error, suppress_warning)
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    bindings = _collect_bindings(defines, vars_file)
    compiled = (
        ExpressionBuilder(expression)
        .variables(bindings.keys(), declared)
        .implicit_multiplication(implicit_multiplication)
        .warning_policy(policy)
        .build()
    )
    return compiled.set_variables(bindings)


def _expression_options(command: Callable) -> Callable:
    """Options shared by every command that compiles an expression."""
    options = [
        click.argument("expression"),
        click.option(
            "-D",
            "--define",
            "defines",
            multiple=True,
            metavar="NAME=VALUE",
            help="Declare a variable and bind a value to it. May be repeated.",
        ),
        click.option(
            "--vars",
            "vars_file",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            default=None,
            help="YAML file mapping variable names to values.",
        ),
        click.option(
            "-V",
            "--variable",
            "declared",
            multiple=True,
            metavar="NAME",
            help="Declare a variable without binding a value. May be repeated.",
        ),
        click.option(
            "--implicit-multiplication/--no-implicit-multiplication",
            default=True,
            show_default=True,
            help="Treat adjacent values such as '2x' as a product.",
        ),
        click.option(
            "--warn-as-error",
            "warn_as_error",
            type=str,
            default=None,
            help="Comma-separated W-codes to treat as errors (e.g. W01,W02).",
        ),
        click.option(
            "--suppress-warning",
            "suppress_warning",
            type=str,
            default=None,
            help="Comma-separated W-codes to suppress (e.g. W03).",
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


@click.group()
@click.version_option(version=__version__, prog_name="infixeval")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def main(verbose: bool = False) -> None:
    """infixeval: compile and evaluate infix math expressions."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@main.command(name="eval")
@_expression_options
def eval_command(
    expression: str,
    defines: tuple[str, ...] = (),
    vars_file: Path | None = None,
    declared: tuple[str, ...] = (),
    implicit_multiplication: bool = True,
    warn_as_error: str | None = None,
    suppress_warning: str | None = None,
) -> None:
    """Evaluate EXPRESSION and print the result."""
    try:
        compiled = _compile(
            expression,
            defines,
            vars_file,
            declared,
            implicit_multiplication,
            warn_as_error,
            suppress_warning,
        )
        click.echo(str(compiled.evaluate()))
    except ExpressionError as e:
        raise click.ClickException(str(e))


@main.command()
@_expression_options
@click.option(
    "--check-variables/--no-check-variables",
    default=True,
    show_default=True,
    help="Report variables that have no bound value.",
)
def validate(
    expression: str,
    defines: tuple[str, ...] = (),
    vars_file: Path | None = None,
    declared: tuple[str, ...] = (),
    implicit_multiplication: bool = True,
    warn_as_error: str | None = None,
    suppress_warning: str | None = None,
    check_variables: bool = True,
) -> None:
    """Check EXPRESSION structurally without evaluating it.

    Exits with code 1 if the expression is invalid.
    """
    try:
        compiled = _compile(
            expression,
            defines,
            vars_file,
            declared,
            implicit_multiplication,
            warn_as_error,
            suppress_warning,
        )
    except ExpressionError as e:
        raise click.ClickException(str(e))

    result = compiled.validate(check_variables)
    if result.valid:
        click.echo("valid")
        return
    for error in result.errors:
        click.echo(error)
    raise click.exceptions.Exit(1)


@main.command()
@_expression_options
def rpn(
    expression: str,
    defines: tuple[str, ...] = (),
    vars_file: Path | None = None,
    declared: tuple[str, ...] = (),
    implicit_multiplication: bool = True,
    warn_as_error: str | None = None,
    suppress_warning: str | None = None,
) -> None:
    """Print EXPRESSION in reverse polish notation."""
    try:
        compiled = _compile(
            expression,
            defines,
            vars_file,
            declared,
            implicit_multiplication,
            warn_as_error,
            suppress_warning,
        )
    except ExpressionError as e:
        raise click.ClickException(str(e))
    click.echo(format_rpn(compiled.tokens))
