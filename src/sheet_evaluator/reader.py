import logging
from decimal import Decimal
from typing import Any

import numpy as np
import pandas as pd
from openpyxl.cell.rich_text import CellRichText
from openpyxl.worksheet.formula import ArrayFormula
from openpyxl.worksheet.worksheet import Worksheet

from sheet_evaluator.interpreter import recalculate
from sheet_evaluator.types import Cell, CellValue, SheetState
from sheet_evaluator.utils import cell_id, column_to_index, index_to_column, split_coordinate


def _to_cell(value: Any) -> Cell | None:
    """Build a cell from a raw workbook or DataFrame value, None for empty values."""
    if value is None:
        return None
    if isinstance(value, ArrayFormula):
        # openpyxl also gives us the range of affected cells, we only need the text
        value = value.text
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, Decimal):
        value = float(value)
    if isinstance(value, CellRichText):
        value = str(value)
    if isinstance(value, float) and np.isnan(value):
        return None
    if isinstance(value, str) and value.startswith("="):
        # The value gets filled in by recalculation
        return Cell(value="", formula=value)
    if not isinstance(value, (str, int, float, bool)):
        logging.warning(
            f"Unsupported cell value of type {type(value).__name__}, storing it as text: {value}"
        )
        value = str(value)
    return Cell(value=value)


def _finish(state: dict[str, Cell], evaluate: bool) -> dict[str, Cell]:
    if evaluate:
        return recalculate(state)
    return state


def sheet_from_worksheet(ws: Worksheet, *, evaluate: bool = True) -> dict[str, Cell]:
    """Read every non-empty cell of an openpyxl worksheet.

    Formulas are kept on their cells. With `evaluate`, their values are
    computed once against the loaded sheet, otherwise they are left empty.
    """
    state: dict[str, Cell] = {}
    for row in ws.iter_rows():
        for ws_cell in row:
            cell = _to_cell(ws_cell.value)
            if cell is not None:
                state[ws_cell.coordinate] = cell
    return _finish(state, evaluate)


def sheet_from_dataframe(
    df: pd.DataFrame, *, header: bool = False, evaluate: bool = True
) -> dict[str, Cell]:
    """Lay out a DataFrame on the grid, starting at A1.

    With `header`, the column names go in the first row and the data starts
    on the second one. Missing values (None, NaN) leave the cell empty.
    """
    state: dict[str, Cell] = {}
    # 0-based
    row = 0
    if header:
        for col, name in enumerate(df.columns):
            cell = _to_cell(str(name))
            if cell is not None:
                state[cell_id(row, col)] = cell
        row += 1

    for values in df.itertuples(index=False, name=None):
        for col, value in enumerate(values):
            cell = _to_cell(value)
            if cell is not None:
                state[cell_id(row, col)] = cell
        row += 1
    return _finish(state, evaluate)


def sheet_to_dataframe(state: SheetState) -> pd.DataFrame:
    """Stored values laid out on the grid.

    Columns are labelled with letters starting at `A`, the index holds the
    1-based row numbers and missing cells are None.
    """
    coords: list[tuple[int, int, CellValue]] = []
    for ref, cell in state.items():
        coordinate = split_coordinate(ref)
        if coordinate is None or coordinate[1] < 1:
            logging.warning(f"Skipping invalid cell identifier: {ref}")
            continue
        col, row = coordinate
        coords.append((row - 1, column_to_index(col), cell.value))

    if not coords:
        return pd.DataFrame()

    height = max(row for row, _, _ in coords) + 1
    width = max(col for _, col, _ in coords) + 1
    grid: list[list[CellValue]] = [[None] * width for _ in range(height)]
    for row, col, value in coords:
        grid[row][col] = value

    return pd.DataFrame(
        grid,
        index=pd.RangeIndex(1, height + 1),
        columns=[index_to_column(col) for col in range(width)],
        dtype=object,
    )
