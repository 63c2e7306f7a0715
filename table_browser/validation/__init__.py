"""
Non-fatal diagnostics for table data: shape checks and the fault boundary
used by the filter, pagination and selection stages.
"""

from .errors import ValidationError, ValidationIssue
from .table_validation import collect_table_issues, handle_fault, validate_table

__all__ = [
    "ValidationError",
    "ValidationIssue",
    "collect_table_issues",
    "handle_fault",
    "validate_table",
]
