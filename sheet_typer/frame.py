"""Build a typed pandas DataFrame from an inferred TableState."""

from __future__ import annotations

import pandas as pd

from sheet_typer.engine import TableState
from sheet_typer.models import DataType
from sheet_typer.parsers import is_failure, parser_for


def column_series(cells: list[str], datatype: DataType) -> pd.Series:
    parser = parser_for(datatype) if datatype.is_numeric else None
    if parser is None:
        return pd.Series(cells, dtype=object)
    values = []
    for cell in cells:
        outcome = parser.parse(cell)
        values.append(None if is_failure(outcome) else outcome)
    return pd.Series(values, dtype="float64")


def to_dataframe(state: TableState) -> pd.DataFrame:
    """Effective data rows as a DataFrame, numeric columns converted to float.

    Cells the winning numeric parser rejects become NaN. Columns keep their
    positional order; duplicate or blank header names are preserved as-is.
    """
    rows = state.data_rows
    if rows is None or state.columns is None:
        raise ValueError("No inferred columns to build a frame from; load a clean dataset first")

    series = {
        index: column_series([row[index] for row in rows], column.datatype)
        for index, column in enumerate(state.columns)
    }
    frame = pd.DataFrame(series, index=pd.RangeIndex(len(rows)))
    frame.columns = [column.name for column in state.columns]
    return frame
