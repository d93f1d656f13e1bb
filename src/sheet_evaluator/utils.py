import logging
import re
from typing import Iterator

from sheet_evaluator.errors import MalformedRangeError

# Constants
COLUMN_REGEX = re.compile(r"[A-Z]+")
ROW_REGEX = re.compile(r"\d+", re.ASCII)
ARGUMENT_REGEX = re.compile(r"\((.*?)\)")


def column_to_index(col: str) -> int:
    """Convert column letters to a zero-based index (`A` -> 0, `AA` -> 26).

    Only meaningful for non-empty uppercase A-Z strings, nothing is validated.
    """
    value = 0
    for char in col:
        value = value * 26 + ord(char) - ord("A") + 1
    return value - 1


def index_to_column(index: int) -> str:
    """Convert a zero-based index back to column letters (0 -> `A`, 26 -> `AA`).

    Bijective base 26: there is no zero digit, so `Z` is followed by `AA`.
    """
    column = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        column = chr(ord("A") + remainder) + column
    return column


def cell_id(row: int, col: int) -> str:
    "Zero-based (row, col) -> cell identifier such as `B3`"
    return f"{index_to_column(col)}{row + 1}"


def split_coordinate(ref: str) -> tuple[str, int] | None:
    """Find the column letters and the row number in a cell reference.

    Both parts are searched for independently, so `1A` yields `("A", 1)`.
    Returns None if either is missing.
    """
    col_match = COLUMN_REGEX.search(ref)
    row_match = ROW_REGEX.search(ref)
    if not col_match or not row_match:
        return None
    return col_match.group(0), int(row_match.group(0))


def extract_argument(formula: str) -> str:
    "Text between the first `(` and the next `)`, or an empty string"
    match = ARGUMENT_REGEX.search(formula)
    return match.group(1) if match else ""


def parse_range(range_ref: str) -> tuple[int, int, int, int]:
    """Parse `START:END` into zero-based (start_row, start_col, end_row, end_col).

    Anything after a second `:` is ignored. Raises MalformedRangeError when
    the separator is missing or either end lacks a column or a row.
    """
    parts = range_ref.split(":")
    start = split_coordinate(parts[0])
    end = split_coordinate(parts[1]) if len(parts) > 1 else None
    if start is None or end is None:
        logging.debug(f"Malformed range: {range_ref!r}")
        raise MalformedRangeError(f"Invalid range format: {range_ref!r}")

    start_col, start_row = start
    end_col, end_row = end
    return (
        start_row - 1,
        column_to_index(start_col),
        end_row - 1,
        column_to_index(end_col),
    )


def iter_range(
    start_row: int, start_col: int, end_row: int, end_col: int
) -> Iterator[str]:
    """Yield the cell identifiers of a rectangle in row-major order.

    Inverted bounds yield nothing.
    """
    for row in range(start_row, end_row + 1):
        for col in range(start_col, end_col + 1):
            yield cell_id(row, col)
