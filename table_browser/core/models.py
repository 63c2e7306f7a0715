from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence

from table_browser.core.exceptions import ConfigError


class SortDirection(str, Enum):
    NONE = "none"
    ASC = "asc"
    DESC = "desc"


class SelectionType(str, Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"


@dataclass(frozen=True)
class CellValue:
    """
    One cell of a row.

    Fields:

    - text: canonical value used for filtering and comparison
    - html: optional caller-trusted markup, rendered instead of text
    - id: optional identifier for the cell
    """
    text: str
    html: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_value(cls, value: Any) -> CellValue:
        if isinstance(value, CellValue):
            return value
        if isinstance(value, dict):
            return cls.from_dict(value)
        if value is None:
            return cls(text="")
        return cls(text=str(value))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CellValue:
        return cls(
            text=str(data.get("text", "")),
            html=data.get("html"),
            id=data.get("id"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"text": self.text}
        if self.html is not None:
            out["html"] = self.html
        if self.id is not None:
            out["id"] = self.id
        return out


@dataclass(frozen=True)
class HeaderDefinition:
    """
    Column metadata. Header order is the column-index space used by filters,
    selection and sorting.

    Fields:

    - text: column label
    - html: optional caller-trusted markup for the label
    - id: optional identifier for the column
    - sortable: whether clicking the header requests a sort
    - filterable: False opts the column out of header filters,
                  None defers to the table-level configuration
    - sort_direction: current direction, owned by the caller
    """
    text: str
    html: Optional[str] = None
    id: Optional[str] = None
    sortable: bool = False
    filterable: Optional[bool] = None
    sort_direction: SortDirection = SortDirection.NONE

    def with_sort_direction(self, direction: SortDirection) -> HeaderDefinition:
        return replace(self, sort_direction=SortDirection(direction))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> HeaderDefinition:
        direction = data.get("sort_direction", data.get("sortDirection")) or SortDirection.NONE
        try:
            direction = SortDirection(direction)
        except ValueError as e:
            raise ConfigError(f"Header {data.get('text')!r}: invalid sort direction {direction!r}") from e
        return cls(
            text=str(data.get("text", "")),
            html=data.get("html"),
            id=data.get("id"),
            sortable=bool(data.get("sortable", False)),
            filterable=data.get("filterable"),
            sort_direction=direction,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "html": self.html,
            "id": self.id,
            "sortable": self.sortable,
            "filterable": self.filterable,
            "sort_direction": self.sort_direction.value,
        }


# A row is an ordered sequence of cells, nominally one per header.
RowRecord = Sequence[CellValue]

# Sparse column index -> filter text. Blank values are never stored.
FilterValues = Mapping[int, str]


def normalise_filter_values(raw: Optional[Mapping[Any, Any]]) -> Dict[int, str]:
    """
    Coerce a filter mapping into canonical form.

    JSON stores hand back column indices as strings, so keys are converted to
    int. Blank or whitespace-only values are dropped (no filter on that column).
    Raises ValueError for keys that are not column indices.
    """
    if not raw:
        return {}

    out: Dict[int, str] = {}
    for key, value in raw.items():
        if value is None:
            continue
        text = str(value)
        if not text.strip():
            continue
        out[int(key)] = text
    return out
