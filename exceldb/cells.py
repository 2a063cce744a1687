"""Spreadsheet cells and their conversion to storage values."""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Optional, Tuple

from .errors import CellCoercionError
from .utils import format_number

logger = logging.getLogger(__name__)

ERROR_LITERAL = "ERROR"


class CellKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    FORMULA = "formula"
    ERROR = "error"
    BLANK = "blank"


@dataclass(frozen=True)
class Cell:
    """One cell of a sheet.

    A FORMULA cell keeps its expression in ``formula`` and the cached result
    of its last evaluation in ``result`` (None when the file holds no cached
    value).
    """

    kind: CellKind
    value: Any = None
    formula: Optional[str] = None
    result: Optional["Cell"] = None

    @property
    def is_blank(self) -> bool:
        return self.kind is CellKind.BLANK


BLANK = Cell(CellKind.BLANK)


def _coerce_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, time):
        return value
    raise CellCoercionError(f"not a date value: {value!r}")


def _coerce_value(cell: Cell):
    if cell.kind is CellKind.TEXT:
        return str(cell.value)
    if cell.kind is CellKind.NUMBER:
        try:
            return float(cell.value)
        except (TypeError, ValueError) as e:
            raise CellCoercionError(f"not a number: {cell.value!r}") from e
    if cell.kind is CellKind.DATE:
        return _coerce_date(cell.value)
    if cell.kind is CellKind.BOOLEAN:
        return bool(cell.value)
    raise CellCoercionError(f"unsupported formula result: {cell.kind.value}")


def _coerce_formula(cell: Cell):
    if cell.result is None:
        raise CellCoercionError("formula has no cached result")
    return _coerce_value(cell.result)


def coerce(cell: Optional[Cell]) -> Tuple[Any, bool]:
    """Convert a cell to the value bound into the insert statement.

    Returns ``(value, is_null)``. Never raises.
    """
    if cell is None:
        return None, True

    kind = cell.kind
    if kind is CellKind.BLANK:
        return None, True
    if kind is CellKind.ERROR:
        return ERROR_LITERAL, False
    if kind is CellKind.FORMULA:
        try:
            return _coerce_formula(cell), False
        except CellCoercionError as e:
            logger.debug("Falling back to formula text for %r: %s", cell.formula, e)
            if cell.formula:
                return cell.formula, False
            return None, True
    try:
        return _coerce_value(cell), False
    except CellCoercionError as e:
        logger.debug("Storing NULL for %r: %s", cell.value, e)
        return None, True


def _display(cell: Cell) -> str:
    kind = cell.kind
    if kind is CellKind.TEXT:
        return str(cell.value)
    if kind is CellKind.NUMBER:
        return format_number(cell.value)
    if kind is CellKind.DATE:
        return str(cell.value)
    if kind is CellKind.BOOLEAN:
        return "true" if cell.value else "false"
    if kind is CellKind.FORMULA:
        if cell.result is not None and cell.result.kind is not CellKind.FORMULA:
            rendered = _display(cell.result)
            if rendered:
                return rendered
        return cell.formula or ""
    return ""


def as_display_string(cell: Optional[Cell]) -> str:
    """Render any cell as text for deriving a column name. Never raises."""
    if cell is None:
        return ""
    try:
        return _display(cell)
    except Exception as e:
        logger.debug("Could not render cell %r: %s", cell, e)
        return cell.formula or ""
