class EvaluationError(Exception):
    """Base class for errors raised while evaluating a formula."""


class MalformedRangeError(EvaluationError, ValueError):
    """A range could not be split into a column/row pair on both ends."""


class CycleError(EvaluationError):
    """A formula depends on itself, directly or through other cells."""


class EvaluationDepthError(EvaluationError, RecursionError):
    """Formula cells are nested deeper than the configured maximum."""
