"""
Core domain layer: table data model, the filter/paginate/select pipeline,
sort-direction coordination and the filter dropdown state machine
"""

from .models import CellValue, HeaderDefinition, SelectionType, SortDirection
from .table_engine import TableEngine, TableOptions, TableView
from .table_state import ControlledValues, TableState, apply_command

__all__ = [
    "CellValue",
    "ControlledValues",
    "HeaderDefinition",
    "SelectionType",
    "SortDirection",
    "TableEngine",
    "TableOptions",
    "TableState",
    "TableView",
    "apply_command",
]
