"""Coded diagnostics raised while building an expression."""

from __future__ import annotations

import logging
import warnings
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from infixeval.errors import ConfigurationError

logger = logging.getLogger(__name__)

WARNING_CODES: Mapping[str, str] = MappingProxyType(
    {
        "W01": "user function shadows a built-in function",
        "W02": "user operator shadows a built-in operator",
        "W03": "declared variable shadows a default constant",
    }
)
KNOWN_CODES: frozenset[str] = frozenset(WARNING_CODES)


class ExpressionWarning(UserWarning):
    """A build diagnostic tagged with one of ``WARNING_CODES``."""

    def __init__(self, code: str, subject: str) -> None:
        self.code = code
        self.subject = subject
        super().__init__(format_warning(code, subject))


def format_warning(code: str, subject: str) -> str:
    return f"[{code}] {subject!r}: {WARNING_CODES[code]}"


@dataclass(frozen=True)
class WarningPolicy:
    """Per-code handling: raise, drop, or (by default) warn."""

    warn_as_error: frozenset[str] = frozenset()
    suppress: frozenset[str] = frozenset()

    @classmethod
    def from_options(
        cls, warn_as_error: str | None = None, suppress: str | None = None
    ) -> WarningPolicy | None:
        """Build a policy from comma-separated code lists, or None if both are unset.

        Raises ``ValueError`` for unknown codes.
        """
        if warn_as_error is None and suppress is None:
            return None
        return cls(
            warn_as_error=parse_code_list(warn_as_error or ""),
            suppress=parse_code_list(suppress or ""),
        )


def emit_warning(code: str, subject: str, *, policy: WarningPolicy | None = None) -> None:
    """Report ``code`` for ``subject`` (a function, operator or variable name).

    Suppression takes priority over ``warn_as_error``, which raises
    ``ConfigurationError``.
    """
    if policy is not None and code in policy.suppress:
        logger.debug("Suppressed %s", format_warning(code, subject))
        return
    if policy is not None and code in policy.warn_as_error:
        raise ConfigurationError(format_warning(code, subject))
    warnings.warn(ExpressionWarning(code, subject), stacklevel=3)


def parse_code_list(raw: str) -> frozenset[str]:
    """Parse ``"W01, W03"`` into a set of codes, ignoring empty items."""
    codes = frozenset(item.strip() for item in raw.split(",") if item.strip())
    unknown = sorted(codes - KNOWN_CODES)
    if unknown:
        known = ", ".join(sorted(KNOWN_CODES))
        raise ValueError(f"Unknown warning code(s): {', '.join(unknown)} (known: {known})")
    return codes
