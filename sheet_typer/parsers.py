"""
Cell parsers used for competitive type inference.

Each parser maps one raw cell to a typed value, or to a ParseFailure when
the cell does not fit its grammar. Failures are ordinary values: the
inferrer only counts them, nothing is raised.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Union

from sheet_typer.models import DataType

NUMBER_EU_RE = re.compile(
    r"(?P<sign>[-+]?)(?P<integral>\d{1,3}(?:(?:\.\d{3})*|(?:\d{3})*))(?:,(?P<fraction>\d+))?",
    re.ASCII,
)
NUMBER_US_RE = re.compile(
    r"(?P<sign>[-+]?)(?P<integral>\d{1,3}(?:(?:,\d{3})*|(?:\d{3})*))(?:\.(?P<fraction>\d+))?",
    re.ASCII,
)

FAILURE_LABELS = {
    DataType.NUMBER_EU: "European-formatted number",
    DataType.NUMBER_US: "US-formatted number",
}


@dataclass(frozen=True)
class ParseFailure:
    cell: str
    datatype: DataType

    def __str__(self) -> str:
        label = FAILURE_LABELS.get(self.datatype, self.datatype.value)
        return f"Not a {label}: {self.cell!r}"


Outcome = Union[float, str, ParseFailure]


def is_failure(outcome: Outcome) -> bool:
    return isinstance(outcome, ParseFailure)


def _parse_grouped_number(cell: str, pattern: re.Pattern, grouping: str, datatype: DataType) -> Outcome:
    match = pattern.fullmatch(cell)
    if match is None:
        return ParseFailure(cell, datatype)

    integral = match["integral"].replace(grouping, "")
    # "05" is 0.05; integral parts past float range give inf.
    magnitude = float(f"{integral}.{match['fraction'] or '0'}")
    return -magnitude if match["sign"] == "-" else magnitude


def parse_number_eu(cell: str) -> Outcome:
    """Parse `1.234,5`-style numbers (dot grouping, comma decimals)."""
    return _parse_grouped_number(cell, NUMBER_EU_RE, ".", DataType.NUMBER_EU)


def parse_number_us(cell: str) -> Outcome:
    """Parse `1,234.5`-style numbers (comma grouping, dot decimals)."""
    return _parse_grouped_number(cell, NUMBER_US_RE, ",", DataType.NUMBER_US)


def parse_text(cell: str) -> str:
    return cell


@dataclass(frozen=True)
class CellParser:
    datatype: DataType
    parse: Callable[[str], Outcome]

    def accepts(self, cell: str) -> bool:
        return not is_failure(self.parse(cell))


# Priority order; earlier parsers win ties during inference.
DEFAULT_PARSERS: tuple[CellParser, ...] = (
    CellParser(DataType.NUMBER_EU, parse_number_eu),
    CellParser(DataType.NUMBER_US, parse_number_us),
    CellParser(DataType.TEXT, parse_text),
)

PARSERS_BY_TYPE: dict[DataType, CellParser] = {parser.datatype: parser for parser in DEFAULT_PARSERS}


def parser_for(datatype: DataType) -> CellParser | None:
    return PARSERS_BY_TYPE.get(datatype)
