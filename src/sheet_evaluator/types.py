import math
import re
from typing import Mapping, NamedTuple

"What a cell can hold. The grid normally stores strings and numbers, bool and None come from imported workbooks."
CellValue = None | int | float | str | bool


class Cell(NamedTuple):
    value: CellValue
    formula: str | None = None

    @property
    def has_formula(self) -> bool:
        # An empty formula string counts as no formula
        return bool(self.formula)


"Cell identifier (e.g. `A1`) -> cell. The evaluator never mutates it."
SheetState = Mapping[str, Cell]

# Decimal, hexadecimal, binary and octal literals, with optional surrounding whitespace
_NUMBER_REGEX = re.compile(
    r"""
    ^\s*(?:
        [+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?
        | [+-]?Infinity
        | 0[xX][0-9a-fA-F]+
        | 0[bB][01]+
        | 0[oO][0-7]+
    )\s*$
    """,
    re.VERBOSE | re.ASCII,
)

# Largest integer a double represents exactly (2 ** 53 - 1)
MAX_SAFE_INTEGER = 2**53 - 1


def _to_double(value: int) -> int | float:
    """Keep integers that a double holds exactly, round the others like a double."""
    if abs(value) <= MAX_SAFE_INTEGER:
        return value
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def parse_number(val: str) -> int | float:
    """Parse a numeric literal the way spreadsheets in the browser do.

    Raises ValueError if the text is not a number. Whitespace-only text is 0.
    """
    text = val.strip()
    if not text:
        return 0
    if not _NUMBER_REGEX.match(text):
        raise ValueError(f"Not a number: {val!r}")
    prefix = text[:2].lower()
    if prefix in ("0x", "0b", "0o"):
        return _to_double(int(text, 0))
    if text.lstrip("+-") == "Infinity":
        return -math.inf if text.startswith("-") else math.inf
    is_float = ("." in text) or ("e" in text) or ("E" in text)
    number = float(text)
    if is_float or abs(number) > MAX_SAFE_INTEGER:
        return number
    return int(text)


def coerce_to_number(val: CellValue) -> int | float:
    """Convert a cell value to a number, substituting 0 for anything that is
    not numeric (including NaN)."""
    if val is None:
        return 0
    if isinstance(val, bool):
        return int(val)
    if isinstance(val, int):
        return _to_double(val)
    if isinstance(val, float):
        return 0 if math.isnan(val) else val
    if isinstance(val, str):
        try:
            return parse_number(val)
        except ValueError:
            return 0
    return 0


def coerce_to_text(value: CellValue) -> str:
    """Convert a stored cell value to the text string functions operate on."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and math.isnan(value):
        return "NaN"
    if isinstance(value, float) and math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
