"""Tests for header row normalization."""

from __future__ import annotations

import re
from datetime import datetime

from conftest import number, text

from exceldb.cells import BLANK, Cell, CellKind
from exceldb.headers import normalize_header, normalize_headers


def test_names_are_lowercase_identifiers() -> None:
    row = [text("First Name"), text("E-Mail"), text("Größe (cm)"), text("ZIP_Code")]

    names = normalize_headers(row)

    assert names == ["first_name", "e_mail", "gr__e__cm_", "zip_code"]
    assert all(re.fullmatch(r"[a-z0-9_]+", name) for name in names)


def test_output_length_matches_header_cells() -> None:
    row = [text("a"), BLANK, BLANK, text("d"), BLANK]
    assert len(normalize_headers(row)) == len(row)


def test_blank_header_gets_positional_name() -> None:
    assert normalize_headers([text("Name"), BLANK, text("   "), None]) == [
        "name",
        "column_2",
        "column_3",
        "column_4",
    ]


def test_surrounding_whitespace_is_trimmed() -> None:
    assert normalize_header(text("  Order Date \t"), 0) == "order_date"


def test_non_text_headers_use_display_form() -> None:
    row = [
        number(2024),
        number(1.5),
        Cell(CellKind.BOOLEAN, True),
        Cell(CellKind.DATE, datetime(2024, 1, 15)),
    ]
    assert normalize_headers(row) == ["2024", "1_5", "true", "2024_01_15_00_00_00"]


def test_formula_header_uses_cached_result() -> None:
    cell = Cell(CellKind.FORMULA, formula='="Q"&1', result=text("Q1"))
    assert normalize_headers([cell]) == ["q1"]


def test_duplicate_names_get_numeric_suffix() -> None:
    row = [text("Name"), text("name"), text("NAME!"), text("Name ")]
    assert normalize_headers(row) == ["name", "name_2", "name_", "name_3"]


def test_suffix_skips_names_already_taken() -> None:
    row = [text("a"), text("a_2"), text("a")]
    assert normalize_headers(row) == ["a", "a_2", "a_3"]


def test_surrogate_key_name_is_reserved() -> None:
    assert normalize_headers([text("ID"), text("Value")]) == ["id_2", "value"]


def test_reserved_names_can_be_overridden() -> None:
    assert normalize_headers([text("ID")], reserved=()) == ["id"]


def test_blank_and_punctuated_headers() -> None:
    assert normalize_headers([text("Name"), text(""), text("Age!")]) == [
        "name",
        "column_2",
        "age_",
    ]
