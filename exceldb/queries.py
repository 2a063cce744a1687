from typing import List, Optional

import pandas as pd
from sqlalchemy import MetaData, Table, inspect, select
from sqlalchemy.engine import Engine

from .models import ID_COLUMN


def get_all_tables(engine: Engine) -> List[str]:
    return sorted(inspect(engine).get_table_names())


def preview_table(engine: Engine, table_name: str, limit: Optional[int] = None) -> pd.DataFrame:
    """Rows of an imported table in insertion order."""
    table = Table(table_name, MetaData(), autoload_with=engine)

    query = select(table)
    if ID_COLUMN in table.c:
        query = query.order_by(table.c[ID_COLUMN])
    if limit:
        query = query.limit(limit)

    with engine.connect() as conn:
        return pd.read_sql(query, conn)
