import logging
from typing import List, Optional, Sequence

from sqlalchemy import Column, Integer, MetaData, Table, Text
from sqlalchemy.exc import SQLAlchemyError

from .errors import SchemaError

logger = logging.getLogger(__name__)

ID_COLUMN = "id"


def build_table(name: str, column_names: Sequence[str], metadata: Optional[MetaData] = None) -> Table:
    """Table with a surrogate key plus one nullable text column per header."""
    columns: List[Column] = [Column(ID_COLUMN, Integer, primary_key=True, autoincrement=True)]
    columns += [Column(column_name, Text, nullable=True) for column_name in column_names]
    return Table(name, metadata or MetaData(), *columns)


def ensure_table(bind, name: str, column_names: Sequence[str]) -> Table:
    """Create the table unless it exists.

    An existing table is reused as is, its columns are not compared with
    ``column_names``.
    """
    table = build_table(name, column_names)
    try:
        table.metadata.create_all(bind=bind, tables=[table], checkfirst=True)
    except SQLAlchemyError as e:
        raise SchemaError(name, str(e)) from e

    logger.info("Table structure verified/created: %s", name)
    logger.info("Table has %d columns (including %s)", len(column_names) + 1, ID_COLUMN)
    return table
