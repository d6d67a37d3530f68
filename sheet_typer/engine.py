"""
Header toggle engine.

State is an immutable TableState; `load` and `apply_header_toggle` return a
new state rather than mutating the old one. TableSession wraps the same
transitions for callers that prefer holding one mutable object.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Sequence

from sheet_typer.errors import ColumnCountMismatchError
from sheet_typer.inference import infer_datatype
from sheet_typer.models import Column, Dataset

logger = logging.getLogger(__name__)

DEFAULT_PLACEHOLDER_PREFIX = "Column"


@dataclass(frozen=True)
class TableState:
    dataset: Dataset | None = None
    columns: tuple[Column, ...] | None = None
    header_included: bool = False
    had_errors: bool = False

    @property
    def can_infer(self) -> bool:
        return self.dataset is not None and not self.had_errors

    @property
    def data_rows(self) -> tuple[tuple[str, ...], ...] | None:
        """Rows left once the header (if any) is excluded."""
        if self.dataset is None or self.columns is None:
            return None
        if self.header_included:
            return self.dataset.rows[1:]
        return self.dataset.rows


def placeholder_name(index: int, prefix: str = DEFAULT_PLACEHOLDER_PREFIX) -> str:
    return f"{prefix} {index + 1}"


def placeholder_columns(width: int) -> tuple[Column, ...]:
    return tuple(Column() for _ in range(width))


def load(
    dataset: Dataset,
    had_errors: bool = False,
    *,
    placeholder_prefix: str = DEFAULT_PLACEHOLDER_PREFIX,
) -> TableState:
    """Start a fresh state for newly tokenized rows.

    Columns are reset and the header flag cleared. A clean dataset is typed
    straight away with placeholder names.
    """
    state = TableState(dataset=dataset, columns=None, header_included=False, had_errors=had_errors)
    if had_errors:
        logger.debug("Dataset loaded with tokenization errors; inference disabled")
        return state
    return apply_header_toggle(state, False, placeholder_prefix=placeholder_prefix)


def apply_header_toggle(
    state: TableState,
    included: bool,
    *,
    placeholder_prefix: str = DEFAULT_PLACEHOLDER_PREFIX,
) -> TableState:
    if not state.can_infer:
        logger.debug("Header toggle rejected: no clean dataset loaded")
        return state

    dataset = state.dataset
    dataset.validate()
    width = dataset.width

    columns = state.columns
    if columns is None:
        columns = placeholder_columns(width)
    elif len(columns) != width:
        raise ColumnCountMismatchError(len(columns), width)

    if included:
        names: Sequence[str] = dataset.rows[0] if dataset.rows else ()
    else:
        names = [placeholder_name(index, placeholder_prefix) for index in range(width)]

    updated = []
    for index, column in enumerate(columns):
        cells = dataset.column(index, skip_header=included)
        datatype = infer_datatype(cells)
        logger.debug("Column %d (%r): %s", index + 1, names[index], datatype.value)
        updated.append(replace(column, name=names[index], datatype=datatype))

    return replace(state, columns=tuple(updated), header_included=included)


class TableSession:
    """Mutable holder over TableState for imperative callers."""

    def __init__(self, placeholder_prefix: str = DEFAULT_PLACEHOLDER_PREFIX) -> None:
        self.placeholder_prefix = placeholder_prefix
        self.state = TableState()

    def load(self, dataset: Dataset, had_errors: bool = False) -> TableState:
        self.state = load(dataset, had_errors, placeholder_prefix=self.placeholder_prefix)
        return self.state

    def set_header_included(self, included: bool) -> TableState:
        self.state = apply_header_toggle(self.state, included, placeholder_prefix=self.placeholder_prefix)
        return self.state

    @property
    def header_included(self) -> bool:
        return self.state.header_included

    @property
    def columns(self) -> tuple[Column, ...] | None:
        return self.state.columns

    @property
    def data_rows(self) -> tuple[tuple[str, ...], ...] | None:
        return self.state.data_rows
