"""Exceptions raised while importing a workbook.

    ExcelDBError
    ├── SourceError
    │   ├── SourceNotFound
    │   ├── UnsupportedFormat
    │   └── EmptySource
    ├── StorageError
    │   ├── SchemaError
    │   └── RowInsertError
    └── CellCoercionError

Every error carries the import stage it was raised in and a ``details`` dict
with the offending identifiers (path, table, row) for the operator.
CellCoercionError never leaves the coercion functions.
"""
from typing import Any, Dict, Optional


class ExcelDBError(Exception):
    stage = "import"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.stage}] {self.message}"


class SourceError(ExcelDBError):
    stage = "open"


class SourceNotFound(SourceError):
    def __init__(self, path: str):
        super().__init__(f"Excel file not found: {path}", {"path": path})


class UnsupportedFormat(SourceError):
    def __init__(self, path: str):
        super().__init__(
            f"Not a valid Excel file format. File must be .xls or .xlsx: {path}",
            {"path": path},
        )


class EmptySource(SourceError):
    stage = "header"

    def __init__(self, path: str):
        super().__init__(f"Empty Excel file or no header row found: {path}", {"path": path})


class StorageError(ExcelDBError):
    pass


class SchemaError(StorageError):
    stage = "schema"

    def __init__(self, table: str, reason: str):
        super().__init__(f"Could not create table {table}: {reason}", {"table": table})


class RowInsertError(StorageError):
    stage = "insert"

    def __init__(self, table: str, row: int, reason: str):
        super().__init__(
            f"Could not insert sheet row {row + 1} into {table}: {reason}",
            {"table": table, "row": row},
        )


class CellCoercionError(ExcelDBError):
    stage = "coerce"
