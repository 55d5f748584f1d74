import logging
from datetime import datetime, timezone
from io import BytesIO
import pandas as pd

logger = logging.getLogger(__name__)

# Leading bytes of the two workbook containers we accept.
XLSX_SIGNATURE = b"PK\x03\x04"  # Office Open XML is a ZIP archive
XLS_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"  # Legacy OLE2 compound file


def get_date_suffix_for_filename() -> str:
    """Returns the current UTC date as a YYYY-MM-DD string for filenames."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


def detect_file_type(content: bytes) -> str:
    """Classifies an upload by its leading bytes: 'xlsx', 'xls' or 'csv'."""
    if content.startswith(XLSX_SIGNATURE):
        return "xlsx"
    if content.startswith(XLS_SIGNATURE):
        return "xls"
    return "csv"


def load_csv_bytes(content: bytes) -> pd.DataFrame:
    """
    Reads CSV bytes with a two-stage encoding fallback:
    1. UTF-8 with BOM support ('utf-8-sig').
    2. Latin-1, which can decode any byte sequence.
    Every cell is kept as text; blank cells come back as NaN.
    A trailing delimiter on a data row never turns the first column into an index.
    """
    try:
        return pd.read_csv(BytesIO(content), encoding="utf-8-sig", dtype=object, index_col=False)
    except UnicodeDecodeError:
        logger.info("UTF-8 decoding failed for the upload. Retrying with 'latin-1'.")
        return pd.read_csv(BytesIO(content), encoding="latin-1", dtype=object, index_col=False)


def load_excel_bytes(content: bytes, engine: str) -> pd.DataFrame:
    """Reads the first sheet of a workbook, keeping each cell's native type."""
    return pd.read_excel(BytesIO(content), sheet_name=0, engine=engine, dtype=object)
