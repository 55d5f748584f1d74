import logging
from typing import Any
import pandas as pd

from .utils import detect_file_type, load_csv_bytes, load_excel_bytes

logger = logging.getLogger(__name__)

RawRow = dict[str, Any]

EXCEL_ENGINES = {
    "xlsx": "openpyxl",
    "xls": "xlrd",
}


class ParseError(ValueError):
    """The uploaded bytes could not be read as a table."""


def _read_frame(content: bytes) -> pd.DataFrame:
    file_type = detect_file_type(content)

    if file_type in EXCEL_ENGINES:
        try:
            return load_excel_bytes(content, engine=EXCEL_ENGINES[file_type])
        except Exception as e:
            # Workbook readers raise a zoo of types (BadZipFile, KeyError, XLRDError...).
            raise ParseError(f"Unreadable {file_type} workbook: {e}") from e

    # Text files never contain NUL bytes; anything that does is a binary we don't know.
    if b"\x00" in content:
        raise ParseError("File is binary but not a recognised workbook.")

    try:
        return load_csv_bytes(content)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise ParseError(f"Unreadable CSV: {e}") from e


def parse_tabular(content: bytes) -> list[RawRow]:
    """
    Converts an uploaded spreadsheet (xlsx/xls) or CSV into raw row records.

    - Only the first sheet is read.
    - Column names come from the header row verbatim (case-sensitive).
    - Cell values are left untyped: numbers may arrive as strings, and blank
      cells become None. Typing them is the validator's job.
    - Fully blank rows are skipped, so row positions count data rows only.
    - A header with no data rows (or only blank ones) gives an empty list.
    """
    if not content:
        raise ParseError("File is empty.")

    df = _read_frame(content)

    df = df.dropna(how="all").reset_index(drop=True)
    if df.empty:
        logger.info("File has a header but no data rows.")
        return []

    df.columns = [str(column) for column in df.columns]
    df = df.astype(object).where(pd.notna(df), None)

    rows = df.to_dict("records")
    logger.info(f"✅ Parsed {len(rows)} rows with columns: {', '.join(df.columns)}")
    return rows
