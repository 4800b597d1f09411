"""
Validation reports for Daybook configs.

Provides a structured, machine-readable summary of what a config would do
before it is simulated, with errors and warnings kept apart so the CLI can
map them onto exit codes.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ValidationReport:
    """
    Structured validation report for a simulation config.

    Errors make a config unusable; warnings describe generators that are
    legal but probably not what the author meant (a trigger day that some
    months lack, a zero-rate interest rule, ...).
    """

    source: str = "<memory>"
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    accounts: list[str] = field(default_factory=list)
    generator_count: int = 0

    def has_errors(self) -> bool:
        return bool(self.errors)

    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def is_valid(self) -> bool:
        """Check if validation passed (no errors, warnings are OK)."""
        return not self.has_errors()

    def get_exit_code(self) -> int:
        """
        Get appropriate CLI exit code.

        Returns:
            0: Valid (no errors)
            1: Errors present
            2: Warnings only
        """
        if self.has_errors():
            return 1
        elif self.has_warnings():
            return 2
        else:
            return 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "source": self.source,
            "errors": self.errors,
            "warnings": self.warnings,
            "accounts": self.accounts,
            "generator_count": self.generator_count,
            "has_errors": self.has_errors(),
            "has_warnings": self.has_warnings(),
            "is_valid": self.is_valid(),
            "exit_code": self.get_exit_code(),
        }

    def __str__(self) -> str:
        """Human-readable string representation."""
        lines = []

        if self.is_valid():
            lines.append(f"Validation passed: {self.source}")
        else:
            lines.append(f"Validation failed: {self.source}")

        if self.accounts:
            lines.append(f"Accounts: {', '.join(self.accounts)}")
        lines.append(f"Generators: {self.generator_count}")

        for error in self.errors:
            lines.append(f"ERROR: {error}")
        for warning in self.warnings:
            lines.append(f"WARNING: {warning}")

        return "\n".join(lines)
