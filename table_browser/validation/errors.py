from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationIssue:
    code: str
    message: str


class ValidationError(Exception):
    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        super().__init__("\n".join(f"{i.code}: {i.message}" for i in issues))


class TableWarning(UserWarning):
    """Base category for recoverable table problems. Logged, never raised."""


class ValidationWarning(TableWarning):
    """Row/header shape mismatch."""


class RangeWarning(TableWarning):
    """Out-of-range page or page size, auto-corrected."""
