# exceldb/import_data.py
import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from sqlalchemy import Table
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .cells import coerce
from .config import Settings, get_settings
from .database import make_engine, make_session_factory
from .errors import EmptySource, RowInsertError, SourceError, StorageError
from .headers import normalize_headers
from .models import ensure_table
from .utils import configure_logging
from .workbook import Sheet, open_workbook

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 100

Sink = Callable[[List, int], None]
ProgressCallback = Callable[[int], None]


class TableSink:
    """Inserts one sheet row per call and commits it right away."""

    def __init__(self, session: Session, table: Table, column_names: Sequence[str]):
        self.session = session
        self.table = table
        self.column_names = list(column_names)
        self.statement = table.insert()

    def __call__(self, values: List, row_index: int) -> None:
        params = dict(zip(self.column_names, values))
        try:
            self.session.execute(self.statement, params)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise RowInsertError(self.table.name, row_index, str(e)) from e


def import_rows(
    sheet: Sheet,
    column_names: Sequence[str],
    sink: Sink,
    on_progress: Optional[ProgressCallback] = None,
    progress_every: int = PROGRESS_EVERY,
) -> int:
    """Send every non-empty data row of ``sheet`` to ``sink``.

    ``sink`` gets the coerced values in column order and the 0-based sheet
    row index. Absent and completely blank rows are skipped and not counted.
    Returns the number of rows handed to the sink.
    """
    row_count = 0
    width = len(column_names)

    # Zeile 0 ist der Header
    for row_index in range(1, sheet.last_row_index + 1):
        if sheet.row(row_index) is None:
            continue

        cells = [sheet.cell(row_index, column) for column in range(width)]
        if all(cell.is_blank for cell in cells):
            continue

        sink([coerce(cell)[0] for cell in cells], row_index)
        row_count += 1

        if row_count % progress_every == 0:
            logger.info("Processed %d rows...", row_count)
            if on_progress is not None:
                on_progress(row_count)

    return row_count


def import_workbook(
    source: Union[str, Path],
    table_name: Optional[str] = None,
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> int:
    """Load the first sheet of ``source`` into ``table_name``.

    The table is created from the header row unless it exists. Returns the
    number of imported rows. The workbook and the session are closed whether
    the import succeeds or not.
    """
    settings = settings or get_settings()
    table_name = (table_name or "").strip() or settings.default_table
    owns_engine = engine is None
    if owns_engine:
        engine = make_engine(settings)

    try:
        with open_workbook(source) as workbook:
            sheet = workbook.first_sheet
            header = sheet.row(0) if sheet is not None else None
            if header is None:
                raise EmptySource(str(source))
            column_names = normalize_headers(header)

            session = make_session_factory(engine)()
            try:
                table = ensure_table(session.connection(), table_name, column_names)
                session.commit()

                sink = TableSink(session, table, column_names)
                row_count = import_rows(
                    sheet, column_names, sink, on_progress, settings.progress_every
                )
            finally:
                session.close()
    finally:
        if owns_engine:
            engine.dispose()

    logger.info("Imported %d rows into table %s", row_count, table_name)
    return row_count


def main() -> int:
    settings = get_settings()
    configure_logging(settings.log_level)

    excel_file_path = input("Enter path to Excel file: ").strip()
    table_name = input("Enter database table name: ").strip()

    if not excel_file_path:
        excel_file_path = settings.default_file
        print(f"Using default file: {excel_file_path}")

    if not table_name:
        table_name = settings.default_table
        print(f"Using default table: {table_name}")

    print("🔌 Connecting to database...")
    engine = make_engine(settings)
    try:
        row_count = import_workbook(
            excel_file_path,
            table_name,
            settings=settings,
            engine=engine,
            on_progress=lambda n: print(f"📥 Processed {n} rows..."),
        )
    except SourceError as e:
        print(f"❌ Error reading Excel file! {e}")
        return 1
    except (StorageError, SQLAlchemyError) as e:
        print(f"❌ Database error! {e}")
        return 1
    finally:
        engine.dispose()

    print(f"✅ {row_count} rows imported into table '{table_name}'.")
    print(f"🎉 Excel data successfully imported to database table: {table_name}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
