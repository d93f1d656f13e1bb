from enum import Enum
from typing import Sequence

from sheet_evaluator.types import CellValue, coerce_to_text


class FormulaFunction(Enum):
    """The functions a formula can call, keyed by the prefix that selects them."""

    SUM = "SUM("
    AVERAGE = "AVERAGE("
    MAX = "MAX("
    MIN = "MIN("
    COUNT = "COUNT("
    TRIM = "TRIM("
    UPPER = "UPPER("
    LOWER = "LOWER("
    UNKNOWN = ""


def parse_function(body: str) -> FormulaFunction:
    """Identify the function called by an (uppercased, `=`-less) formula body.

    Prefixes are checked in declaration order and the first match wins.
    """
    for function in FormulaFunction:
        if function is FormulaFunction.UNKNOWN:
            continue
        if body.startswith(function.value):
            return function
    return FormulaFunction.UNKNOWN


class SheetFunctions:
    """Implementations of the supported functions.

    Aggregates receive the numbers resolved from a range, text functions
    receive the raw value stored in a single cell.
    """

    @staticmethod
    def SUM(values: Sequence[float]) -> float:
        return sum(values)

    @staticmethod
    def AVERAGE(values: Sequence[float]) -> float:
        """Arithmetic mean, 0 for an empty range."""
        return sum(values) / len(values) if values else 0

    @staticmethod
    def MAX(values: Sequence[float]) -> float:
        """Largest value, 0 for an empty range."""
        return max(values) if values else 0

    @staticmethod
    def MIN(values: Sequence[float]) -> float:
        """Smallest value, 0 for an empty range."""
        return min(values) if values else 0

    @staticmethod
    def COUNT(values: Sequence[float]) -> int:
        """Count the numeric values.

        Range resolution already coerces every cell to a number, so this is
        the number of cells that were present in the range.
        """
        return sum(
            1
            for value in values
            if isinstance(value, (int, float)) and not isinstance(value, bool)
        )

    @staticmethod
    def TRIM(value: CellValue) -> str:
        return coerce_to_text(value).strip()

    @staticmethod
    def UPPER(value: CellValue) -> str:
        return coerce_to_text(value).upper()

    @staticmethod
    def LOWER(value: CellValue) -> str:
        return coerce_to_text(value).lower()
