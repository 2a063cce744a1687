import tempfile
from pathlib import Path

import streamlit as st

from exceldb.config import get_settings
from exceldb.database import make_engine
from exceldb.errors import ExcelDBError
from exceldb.import_data import import_workbook
from exceldb.queries import get_all_tables, preview_table


st.set_page_config(page_title="Excel to Database", layout="wide")
st.title("Excel to Database")

settings = get_settings()


@st.cache_resource
def get_engine():
    return make_engine(settings)


engine = get_engine()

mode = st.radio(
    "Please choose a mode",
    ["Import Excel file", "Browse tables"]
)


if mode == "Import Excel file":
    uploaded = st.file_uploader("Excel file", type=["xlsx", "xls"])
    table_name = st.text_input("Database table name", value=settings.default_table).strip()

    if st.button("Import", disabled=uploaded is None):
        suffix = Path(uploaded.name).suffix
        with tempfile.NamedTemporaryFile(suffix=suffix, delete=False) as tmp:
            tmp.write(uploaded.getbuffer())
            tmp_path = Path(tmp.name)

        progress = st.empty()
        try:
            row_count = import_workbook(
                tmp_path,
                table_name,
                settings=settings,
                engine=engine,
                on_progress=lambda n: progress.text(f"Processed {n} rows..."),
            )
        except ExcelDBError as e:
            st.error(str(e))
        else:
            progress.empty()
            st.success(f"Imported {row_count} rows into table {table_name or settings.default_table}.")
            st.dataframe(
                preview_table(engine, table_name or settings.default_table, limit=100),
                use_container_width=True,
            )
        finally:
            tmp_path.unlink(missing_ok=True)

if mode == "Browse tables":
    tables = get_all_tables(engine)
    if not tables:
        st.info("No tables yet.")
    else:
        table = st.selectbox("Table", tables)
        limit = st.number_input("Rows", min_value=1, value=100, key="inp_limit")
        df = preview_table(engine, table, limit=int(limit))
        st.subheader(f"{table} ({len(df)} rows shown)")
        st.dataframe(df, use_container_width=True, height=min(800, 35 * (len(df) + 1)))
