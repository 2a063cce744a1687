"""Read-only view of a workbook as rows of typed cells.

``.xlsx`` files are read with openpyxl, ``.xls`` files with xlrd. Both are
turned into the same ``Workbook`` / ``Sheet`` / ``Cell`` structure so the
import pipeline never touches a reader library directly.
"""
import logging
import zipfile
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Callable, List, Optional, Union

import openpyxl
import xlrd
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.formula import ArrayFormula, DataTableFormula
from xlrd.compdoc import CompDocError
from xlrd.xldate import XLDateError, xldate_as_datetime

from .cells import BLANK, Cell, CellKind
from .errors import SourceError, SourceNotFound, UnsupportedFormat

logger = logging.getLogger(__name__)

XLSX = ".xlsx"
XLS = ".xls"
SUPPORTED_SUFFIXES = (XLSX, XLS)

Row = Optional[List[Cell]]


class Sheet:
    """Rows of one worksheet; row 0 is the header.

    An absent data row (nothing populated in it) is stored as None. The
    header keeps every cell the file holds, styled blanks included, and is
    None only when row 0 has no cells at all. Reading past the end of a row
    gives a blank cell.
    """

    def __init__(self, name: str, rows: List[Row]):
        self.name = name
        self._rows = rows

    @property
    def last_row_index(self) -> int:
        return len(self._rows) - 1

    def row(self, index: int) -> Row:
        if index < 0 or index >= len(self._rows):
            return None
        return self._rows[index]

    def cell(self, row_index: int, column: int) -> Cell:
        row = self.row(row_index)
        if row is None or column >= len(row):
            return BLANK
        return row[column]


class Workbook:
    def __init__(self, sheets: List[Sheet], close: Optional[Callable[[], None]] = None):
        self.sheets = sheets
        self._close = close
        self.closed = False

    @property
    def first_sheet(self) -> Optional[Sheet]:
        return self.sheets[0] if self.sheets else None

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._close is not None:
            self._close()

    def __enter__(self) -> "Workbook":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _header(cells: List[Cell], present: List[bool]) -> Row:
    """Header cells up to the last cell that exists in the file, populated or not."""
    end = len(cells)
    while end and not present[end - 1]:
        end -= 1
    if not end:
        return None
    return cells[:end]


def _trim(cells: List[Cell]) -> Row:
    end = len(cells)
    while end and cells[end - 1].is_blank:
        end -= 1
    if not end:
        return None
    return cells[:end]


# --- xlsx -------------------------------------------------------------------

def _xlsx_value(value, data_type: str) -> Cell:
    if value is None:
        return BLANK
    if data_type == "e":
        return Cell(CellKind.ERROR, value)
    if isinstance(value, bool):
        return Cell(CellKind.BOOLEAN, value)
    if isinstance(value, (datetime, date, time)):
        return Cell(CellKind.DATE, value)
    if isinstance(value, timedelta):
        # duration formats, stored as the serial number of days
        return Cell(CellKind.NUMBER, value.total_seconds() / 86400)
    if isinstance(value, (int, float)):
        return Cell(CellKind.NUMBER, value)
    if value == "":
        return BLANK
    return Cell(CellKind.TEXT, str(value))


def _xlsx_cell(cell, cached) -> Cell:
    value = cell.value
    if isinstance(value, (ArrayFormula, DataTableFormula)) or cell.data_type == "f":
        formula = value if isinstance(value, str) else getattr(value, "text", None)
        if formula and formula.startswith("="):
            formula = formula[1:]
        result = None
        if cached.value is not None:
            result = _xlsx_value(cached.value, cached.data_type)
        return Cell(CellKind.FORMULA, formula=formula, result=result)
    return _xlsx_value(value, cell.data_type)


def _load_xlsx(path: Path) -> Workbook:
    try:
        # formulas from one copy, cached results from the other
        formulas = openpyxl.load_workbook(path, data_only=False)
        values = openpyxl.load_workbook(path, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise SourceError(f"Error reading Excel file {path}: {e}", {"path": str(path)}) from e

    sheets = []
    if formulas.worksheets:
        ws = formulas.worksheets[0]
        cached_ws = values.worksheets[0]
        bounds = dict(min_row=1, max_row=ws.max_row, min_col=1, max_col=ws.max_column)
        rows = []
        for row, cached_row in zip(ws.iter_rows(**bounds), cached_ws.iter_rows(**bounds)):
            cells = [_xlsx_cell(c, cc) for c, cc in zip(row, cached_row)]
            if rows:
                rows.append(_trim(cells))
            else:
                # a styled but empty header cell still names a column
                rows.append(_header(cells, [c.value is not None or c.has_style for c in row]))
        sheets.append(Sheet(ws.title, rows))

    def close():
        formulas.close()
        values.close()

    return Workbook(sheets, close)


# --- xls --------------------------------------------------------------------

def _xls_cell(cell, datemode: int) -> Cell:
    ctype = cell.ctype
    if ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return BLANK
    if ctype == xlrd.XL_CELL_TEXT:
        return Cell(CellKind.TEXT, cell.value) if cell.value != "" else BLANK
    if ctype == xlrd.XL_CELL_NUMBER:
        return Cell(CellKind.NUMBER, cell.value)
    if ctype == xlrd.XL_CELL_DATE:
        try:
            return Cell(CellKind.DATE, xldate_as_datetime(cell.value, datemode))
        except (XLDateError, ValueError, OverflowError):
            return Cell(CellKind.NUMBER, cell.value)
    if ctype == xlrd.XL_CELL_BOOLEAN:
        return Cell(CellKind.BOOLEAN, bool(cell.value))
    if ctype == xlrd.XL_CELL_ERROR:
        return Cell(CellKind.ERROR, xlrd.error_text_from_code.get(cell.value, cell.value))
    return BLANK


def _load_xls(path: Path) -> Workbook:
    try:
        # formatting_info keeps styled blank cells (XL_CELL_BLANK) in the rows
        book = xlrd.open_workbook(str(path), on_demand=True, formatting_info=True)
    except (xlrd.XLRDError, CompDocError, OSError) as e:
        raise SourceError(f"Error reading Excel file {path}: {e}", {"path": str(path)}) from e

    workbook = Workbook([], book.release_resources)
    try:
        if book.nsheets:
            ws = book.sheet_by_index(0)
            rows = []
            for r in range(ws.nrows):
                raw = ws.row(r)
                cells = [_xls_cell(c, book.datemode) for c in raw]
                if rows:
                    rows.append(_trim(cells))
                else:
                    rows.append(_header(cells, [c.ctype != xlrd.XL_CELL_EMPTY for c in raw]))
            workbook.sheets.append(Sheet(ws.name, rows))
    except xlrd.XLRDError as e:
        workbook.close()
        raise SourceError(f"Error reading Excel file {path}: {e}", {"path": str(path)}) from e
    return workbook


def open_workbook(path: Union[str, Path]) -> Workbook:
    """Open ``path`` as a workbook; use it as a context manager."""
    path = Path(path)
    if not path.is_file():
        raise SourceNotFound(str(path))

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise UnsupportedFormat(str(path))

    logger.info("Importing data from Excel file: %s", path)
    if suffix == XLSX:
        return _load_xlsx(path)
    return _load_xls(path)
