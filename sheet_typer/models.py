"""Column and dataset model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence

from sheet_typer.errors import RaggedRowsError


class DataType(str, Enum):
    TEXT = "text"
    NUMBER_EU = "number-eu"
    NUMBER_US = "number-us"
    # Declared vocabulary only; no parser produces these yet.
    DATE_YYYY_MM_DD = "date-yyyy-mm-dd"
    DATE_DD_MM_YYYY = "date-dd/mm/yyyy"
    DATE_MM_DD_YYYY = "date-mm/dd/yyyy"

    @property
    def is_numeric(self) -> bool:
        return self in (DataType.NUMBER_EU, DataType.NUMBER_US)


class ColumnRole(str, Enum):
    IDENTIFIER = "identifier"
    CLASSIFIER = "classifier"
    FEATURE = "feature"
    REMARK = "remark"


@dataclass(frozen=True)
class Column:
    name: str = ""
    role: ColumnRole = ColumnRole.REMARK
    datatype: DataType = DataType.TEXT

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "role": self.role.value, "datatype": self.datatype.value}


@dataclass(frozen=True)
class Dataset:
    """Tokenized rows of raw string cells, row 0 possibly a header."""

    rows: tuple[tuple[str, ...], ...] = ()

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[str]]) -> "Dataset":
        return cls(rows=tuple(tuple(row) for row in rows))

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def __len__(self) -> int:
        return len(self.rows)

    def validate(self) -> None:
        width = self.width
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise RaggedRowsError(index, width, len(row))

    def column(self, index: int, *, skip_header: bool = False) -> list[str]:
        rows = self.rows[1:] if skip_header else self.rows
        return [row[index] for row in rows]
