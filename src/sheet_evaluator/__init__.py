from sheet_evaluator.errors import (
    CycleError,
    EvaluationDepthError,
    EvaluationError,
    MalformedRangeError,
)
from sheet_evaluator.functions import FormulaFunction, parse_function
from sheet_evaluator.interpreter import (
    FormulaEvaluator,
    FormulaResult,
    evaluate_formula,
    recalculate,
)
from sheet_evaluator.reader import (
    sheet_from_dataframe,
    sheet_from_worksheet,
    sheet_to_dataframe,
)
from sheet_evaluator.types import Cell, CellValue, SheetState
from sheet_evaluator.utils import cell_id, column_to_index, index_to_column

__all__ = [
    "Cell",
    "CellValue",
    "CycleError",
    "EvaluationDepthError",
    "EvaluationError",
    "FormulaEvaluator",
    "FormulaFunction",
    "FormulaResult",
    "MalformedRangeError",
    "SheetState",
    "cell_id",
    "column_to_index",
    "evaluate_formula",
    "index_to_column",
    "parse_function",
    "recalculate",
    "sheet_from_dataframe",
    "sheet_from_worksheet",
    "sheet_to_dataframe",
]
