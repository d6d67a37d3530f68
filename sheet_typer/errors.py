"""Error taxonomy shared by the engine, loader and CLI."""

from __future__ import annotations


class SheetTyperError(Exception):
    """Base class for sheet-typer failures."""


class RaggedRowsError(SheetTyperError, ValueError):
    def __init__(self, row_index: int, expected: int, actual: int) -> None:
        super().__init__(
            f"Row {row_index} has {actual} cells; expected {expected} "
            "(rows must all have the same length)"
        )
        self.row_index = row_index
        self.expected = expected
        self.actual = actual


class ColumnCountMismatchError(SheetTyperError, ValueError):
    def __init__(self, columns: int, width: int) -> None:
        super().__init__(f"{columns} columns defined for a dataset {width} cells wide")
        self.columns = columns
        self.width = width


class LoadError(SheetTyperError, ValueError):
    """The tokenizer adapter could not produce any rows."""
