"""
Competitive per-column type inference.

Every candidate parser is run over every cell of a column; the parser with
the most successes names the column's datatype. Candidates are scanned in
priority order and only a strictly greater count replaces the current best,
so earlier parsers win ties. The text parser accepts everything, which makes
it the fallback whenever no numeric parser does strictly better.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from sheet_typer.models import DataType
from sheet_typer.parsers import DEFAULT_PARSERS, CellParser, is_failure

logger = logging.getLogger(__name__)

SAMPLE_FAILURE_COUNT = 3


def count_successes(cells: Sequence[str], parser: CellParser) -> int:
    return sum(1 for cell in cells if parser.accepts(cell))


def score_column(
    cells: Sequence[str],
    parsers: Sequence[CellParser] = DEFAULT_PARSERS,
) -> dict[DataType, int]:
    """Success count per candidate datatype, in priority order."""
    return {parser.datatype: count_successes(cells, parser) for parser in parsers}


def select_datatype(scores: dict[DataType, int]) -> DataType:
    best_type: DataType | None = None
    best_count = -1
    for datatype, count in scores.items():
        if count > best_count:
            best_type, best_count = datatype, count
    if best_type is None:
        raise ValueError("At least one candidate parser is required")
    return best_type


def infer_datatype(
    cells: Sequence[str],
    parsers: Sequence[CellParser] = DEFAULT_PARSERS,
) -> DataType:
    scores = score_column(cells, parsers)
    datatype = select_datatype(scores)
    logger.debug("Scores %s -> %s", {k.value: v for k, v in scores.items()}, datatype.value)
    return datatype


def compute_numeric_range(values: list[float]) -> tuple[float | None, float | None]:
    if not values:
        return None, None
    return min(values), max(values)


def best_numeric_parser(
    scores: dict[DataType, int],
    parsers: Sequence[CellParser],
) -> CellParser | None:
    """Highest-scoring numeric candidate with at least one success."""
    best: CellParser | None = None
    for parser in parsers:
        if not parser.datatype.is_numeric or scores[parser.datatype] == 0:
            continue
        if best is None or scores[parser.datatype] > scores[best.datatype]:
            best = parser
    return best


def profile_column(
    cells: Sequence[str],
    parsers: Sequence[CellParser] = DEFAULT_PARSERS,
) -> dict[str, Any]:
    """Detected datatype plus the evidence behind it.

    `numeric_candidate` is the best numeric parser even when text won, and
    `sample_failures` lists the first cells it rejected.
    """
    scores = score_column(cells, parsers)
    detected = select_datatype(scores)
    candidate = best_numeric_parser(scores, parsers)

    numeric_values: list[float] = []
    sample_failures: list[str] = []
    if candidate is not None:
        for cell in cells:
            outcome = candidate.parse(cell)
            if not is_failure(outcome):
                numeric_values.append(outcome)
            elif len(sample_failures) < SAMPLE_FAILURE_COUNT:
                sample_failures.append(str(outcome))

    min_value, max_value = None, None
    if detected.is_numeric:
        min_value, max_value = compute_numeric_range(numeric_values)

    return {
        "datatype": detected.value,
        "type_scores": {datatype.value: count for datatype, count in scores.items()},
        "cell_count": len(cells),
        "numeric_candidate": candidate.datatype.value if candidate else None,
        "min_value": min_value,
        "max_value": max_value,
        "sample_failures": sample_failures,
    }
