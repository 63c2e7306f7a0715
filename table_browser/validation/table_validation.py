from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Mapping, Optional, TypeVar

from table_browser.validation.errors import ValidationError, ValidationIssue, ValidationWarning

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def collect_table_issues(headers: Any, rows: Any) -> list[ValidationIssue]:
    """
    Shape checks for a header/row grid.

    A row whose length differs from the header count is reported once per row.
    Nothing here is fatal: rows that do not line up are still displayed and
    filtered, missing cells simply never match a filter.
    """
    issues: list[ValidationIssue] = []

    headers_ok = _is_sequence(headers)
    rows_ok = _is_sequence(rows)

    if not headers_ok:
        issues.append(
            ValidationIssue(
                "TABLE_HEADERS_NOT_SEQUENCE",
                f"headers must be a sequence, got {type(headers).__name__}.",
            )
        )
    if not rows_ok:
        issues.append(
            ValidationIssue(
                "TABLE_ROWS_NOT_SEQUENCE",
                f"rows must be a sequence, got {type(rows).__name__}.",
            )
        )

    if not (headers_ok and rows_ok):
        return issues

    n_headers = len(headers)
    for idx, row in enumerate(rows):
        if not _is_sequence(row):
            issues.append(
                ValidationIssue(
                    "TABLE_ROW_NOT_SEQUENCE",
                    f"row {idx} must be a sequence of cells, got {type(row).__name__}.",
                )
            )
            continue
        if len(row) != n_headers:
            issues.append(
                ValidationIssue(
                    "TABLE_ROW_LENGTH",
                    f"row {idx} has {len(row)} cells, expected {n_headers}.",
                )
            )

    return issues


def ensure_valid_table(headers: Any, rows: Any) -> None:
    """Raise ValidationError listing every shape problem found."""
    issues = collect_table_issues(headers, rows)
    if issues:
        raise ValidationError(issues)


def validate_table(headers: Any, rows: Any, *, table: Optional[str] = None) -> bool:
    """
    Warn-only validation. Returns True when the grid is consistent.

    Never blocks the caller: the table keeps rendering whatever it was given.
    """
    try:
        ensure_valid_table(headers, rows)
    except ValidationError as e:
        logger.warning(
            "Table shape validation failed: %s",
            "; ".join(f"{issue.code}: {issue.message}" for issue in e.issues),
            extra={
                "table": table,
                "warning": ValidationWarning.__name__,
                "n_issues": len(e.issues),
            },
        )
        return False
    return True


def handle_fault(
    fault: BaseException,
    fallback: T,
    context: Optional[Mapping[str, Any]] = None,
) -> T:
    """
    Fault-containment boundary for engine operations.

    Logs the fault (with traceback) and hands back the fallback so the table
    degrades to showing more data rather than less.
    """
    ctx = dict(context or {})
    operation = ctx.pop("operation", "table operation")
    logger.error(
        "Unexpected fault in %s; using fallback",
        operation,
        exc_info=(type(fault), fault, fault.__traceback__),
        extra={"operation": operation, "fault": repr(fault), **ctx},
    )
    return fallback
