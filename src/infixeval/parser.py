"""Loading of variable bindings from YAML files and ``name=value`` assignments."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from infixeval.errors import ParseError
from infixeval.expression import to_decimal


def parse_value(raw: object, name: str) -> Decimal:
    """Convert a YAML scalar or CLI string to Decimal."""
    if isinstance(raw, str):
        try:
            value = Decimal(raw.strip())
        except InvalidOperation as e:
            raise ParseError(f"Value for {name!r} is not a number: {raw!r}") from e
        if not value.is_finite():
            raise ParseError(f"Value for {name!r} must be finite: {raw!r}")
        return value
    try:
        return to_decimal(raw)
    except (TypeError, ValueError) as e:
        raise ParseError(f"Value for {name!r} is not a number: {raw!r}") from e


def load_variables(path: Path) -> dict[str, Decimal]:
    """Load a ``name: value`` mapping of variable bindings from a YAML file.

    Raises:
        ParseError: If the file can not be read, on YAML syntax errors or
            duplicate keys, for a non-mapping document or non-numeric values.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ParseError(f"Cannot read file: {e}") from e

    loader = YAML(typ="safe")
    loader.allow_duplicate_keys = False
    try:
        data = loader.load(text)
    except YAMLError as e:
        raise ParseError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParseError("Top-level YAML value must be a mapping")

    return {str(name): parse_value(raw, str(name)) for name, raw in data.items()}


def parse_assignment(raw: str) -> tuple[str, Decimal]:
    """Parse a ``name=value`` string as given to ``-D`` on the command line."""
    name, sep, value = raw.partition("=")
    name = name.strip()
    if not sep or not name:
        raise ParseError(f"Expected NAME=VALUE, got {raw!r}")
    return name, parse_value(value, name)
