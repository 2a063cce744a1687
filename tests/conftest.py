from __future__ import annotations

import re
import zipfile
from pathlib import Path

import pytest
from openpyxl import Workbook
from openpyxl.styles import Font
from sqlalchemy import create_engine

from exceldb.cells import Cell, CellKind
from exceldb.config import Settings, get_settings
from exceldb.workbook import Sheet


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(database_url=f"sqlite:///{tmp_path / 'test.sqlite3'}", _env_file=None)


@pytest.fixture
def engine(settings: Settings):
    engine = create_engine(settings.database_url)
    yield engine
    engine.dispose()


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_xlsx(tmp_path: Path):
    """Write rows (lists of values, None for an empty cell) to a new .xlsx file.

    ``styled`` lists coordinates that get a bold font, so they exist in the
    file even without a value.
    """

    def _make(rows, name: str = "data.xlsx", styled=()) -> Path:
        wb = Workbook()
        ws = wb.active
        for row_number, row in enumerate(rows, start=1):
            for column_number, value in enumerate(row, start=1):
                if value is not None:
                    ws.cell(row=row_number, column=column_number, value=value)
        for coordinate in styled:
            ws[coordinate].font = Font(bold=True)
        path = tmp_path / name
        wb.save(path)
        return path

    return _make


def set_cached_formula_value(path: Path, formula: str, cached: str) -> None:
    """Store a cached result for ``formula`` the way Excel does after a recalc."""
    with zipfile.ZipFile(path) as zf:
        contents = {name: zf.read(name) for name in zf.namelist()}

    sheet_xml = contents["xl/worksheets/sheet1.xml"].decode("utf-8")
    pattern = r"<f>" + re.escape(formula) + r"</f>\s*(<v\s*/>|<v>\s*</v>)?"
    sheet_xml = re.sub(pattern, f"<f>{formula}</f><v>{cached}</v>", sheet_xml)
    contents["xl/worksheets/sheet1.xml"] = sheet_xml.encode("utf-8")

    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in contents.items():
            zf.writestr(name, data)


def text(value: str) -> Cell:
    return Cell(CellKind.TEXT, value)


def number(value: float) -> Cell:
    return Cell(CellKind.NUMBER, value)


def sheet_of(*rows) -> Sheet:
    return Sheet("Sheet1", list(rows))
