import logging

from sheet_evaluator.errors import CycleError, EvaluationDepthError
from sheet_evaluator.functions import FormulaFunction, SheetFunctions, parse_function
from sheet_evaluator.types import Cell, CellValue, SheetState, coerce_to_number
from sheet_evaluator.utils import extract_argument, iter_range, parse_range

FormulaResult = str | int | float

# Notes:
# - Nothing is cached: every range lookup re-evaluates the formulas it meets.
# - Text functions read the stored value of the referenced cell, while
#   aggregates evaluate formula cells.
# TODO: make TRIM/UPPER/LOWER go through `evaluate_cell` if product confirms
# they should see the computed value of formula cells.


class EvaluationStack:
    """Tracks the formula cells currently being evaluated."""

    def __init__(self):
        self.stack: list[str] = []

    def __len__(self) -> int:
        return len(self.stack)

    def push(self, ref: str) -> None:
        self.stack.append(ref)

    def pop(self) -> None:
        self.stack.pop()

    def contains(self, ref: str) -> bool:
        return ref in self.stack

    def format_path(self, ref: str) -> str:
        """Format the stack, followed by the cell about to be evaluated."""
        return " -> ".join([*self.stack, ref])


class FormulaEvaluator:
    """Evaluates formulas against a read-only snapshot of the sheet.

    By default, formula cells are evaluated recursively without any guard, so
    a formula that depends on itself ends in a `RecursionError`. Two opt-in
    guards exist:
    - `max_depth`: maximum number of formula cells evaluated inside each
      other, raising `EvaluationDepthError` beyond it.
    - `detect_cycles`: raise `CycleError` when a formula cell is reached
      again while it is still being evaluated.
    """

    def __init__(
        self,
        state: SheetState,
        *,
        max_depth: int | None = None,
        detect_cycles: bool = False,
    ):
        if max_depth is not None and max_depth < 0:
            raise ValueError(f"max_depth must be non-negative or None, got {max_depth}")
        self.state = state
        self.max_depth = max_depth
        self.detect_cycles = detect_cycles
        self.evaluation_stack = EvaluationStack()

    def evaluate(self, formula: str) -> FormulaResult:
        """Evaluate a formula. Text not starting with `=` is returned as-is,
        and so are formulas calling an unsupported function."""
        if not formula.startswith("="):
            return formula

        # Function names are case-insensitive. Arguments get uppercased as well,
        # which is fine since they can only be cell references.
        body = formula[1:].upper()
        argument = extract_argument(body)

        match parse_function(body):
            case FormulaFunction.SUM:
                return SheetFunctions.SUM(self.get_range_values(argument))
            case FormulaFunction.AVERAGE:
                return SheetFunctions.AVERAGE(self.get_range_values(argument))
            case FormulaFunction.MAX:
                return SheetFunctions.MAX(self.get_range_values(argument))
            case FormulaFunction.MIN:
                return SheetFunctions.MIN(self.get_range_values(argument))
            case FormulaFunction.COUNT:
                return SheetFunctions.COUNT(self.get_range_values(argument))
            case FormulaFunction.TRIM:
                return SheetFunctions.TRIM(self.get_stored_value(argument))
            case FormulaFunction.UPPER:
                return SheetFunctions.UPPER(self.get_stored_value(argument))
            case FormulaFunction.LOWER:
                return SheetFunctions.LOWER(self.get_stored_value(argument))
            case FormulaFunction.UNKNOWN:
                logging.debug(f"Unsupported formula, returning it as text: {formula}")
                return formula

    def get_range_values(self, range_ref: str) -> list[int | float]:
        """Resolve every present cell of a range to a number, in row-major order.

        Missing cells are skipped entirely. Present cells are coerced to a
        number, with 0 for anything non-numeric.
        """
        bounds = parse_range(range_ref)
        values: list[int | float] = []
        for ref in iter_range(*bounds):
            cell = self.state.get(ref)
            if cell is None:
                # Missing cells don't count, not even as 0
                continue
            values.append(self._numeric_value(ref, cell))

        if not values:
            logging.debug(f"Range {range_ref} did not resolve to any cell")
        return values

    def get_stored_value(self, ref: str) -> CellValue:
        "Raw value stored in a single cell, an empty string if the cell is missing"
        cell = self.state.get(ref)
        if cell is None:
            return ""
        return cell.value

    def evaluate_cell(self, ref: str) -> CellValue:
        """Current value of a cell: its formula evaluated if it has one,
        otherwise its stored value. Missing cells are an empty string."""
        cell = self.state.get(ref)
        if cell is None:
            return ""
        if cell.has_formula:
            return self._evaluate_formula_cell(ref, cell)
        return cell.value

    def _numeric_value(self, ref: str, cell: Cell) -> int | float:
        if cell.has_formula:
            return coerce_to_number(self._evaluate_formula_cell(ref, cell))
        return coerce_to_number(cell.value)

    def _evaluate_formula_cell(self, ref: str, cell: Cell) -> FormulaResult:
        assert cell.formula is not None
        if self.detect_cycles and self.evaluation_stack.contains(ref):
            cycle_path = self.evaluation_stack.format_path(ref)
            logging.debug(f"Cycle while evaluating {ref}: {cycle_path}")
            raise CycleError(f"Detected cycle: {cycle_path}")
        if self.max_depth is not None and len(self.evaluation_stack) >= self.max_depth:
            path = self.evaluation_stack.format_path(ref)
            logging.debug(f"Maximum depth reached while evaluating {ref}: {path}")
            raise EvaluationDepthError(
                f"Formulas nested deeper than {self.max_depth} cells: {path}"
            )

        self.evaluation_stack.push(ref)
        try:
            return self.evaluate(cell.formula)
        finally:
            self.evaluation_stack.pop()


def evaluate_formula(
    formula: str,
    state: SheetState,
    *,
    max_depth: int | None = None,
    detect_cycles: bool = False,
) -> FormulaResult:
    """Evaluate `formula` against `state`. See `FormulaEvaluator` for the options."""
    evaluator = FormulaEvaluator(
        state, max_depth=max_depth, detect_cycles=detect_cycles
    )
    return evaluator.evaluate(formula)


def recalculate(
    state: SheetState,
    *,
    max_depth: int | None = None,
    detect_cycles: bool = False,
) -> dict[str, Cell]:
    """Return a copy of `state` where each formula cell holds its evaluated value.

    Every formula is evaluated against the original snapshot, in no
    particular order. Text functions referencing another formula cell
    therefore see that cell's value from before the recalculation.
    """
    evaluator = FormulaEvaluator(
        state, max_depth=max_depth, detect_cycles=detect_cycles
    )
    result: dict[str, Cell] = {}
    for ref, cell in state.items():
        if cell.has_formula:
            result[ref] = cell._replace(value=evaluator.evaluate_cell(ref))
        else:
            result[ref] = cell
    return result
