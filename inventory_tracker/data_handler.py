import logging
from pathlib import Path
import pandas as pd

from . import settings
from . import utils

logger = logging.getLogger(__name__)


def report_filename(file_format: str) -> str:
    """inventory-report-<YYYY-MM-DD>.<ext>"""
    return f"{settings.REPORT_FILENAME_PREFIX}{utils.get_date_suffix_for_filename()}.{file_format}"


def save_report(df: pd.DataFrame, output_dir: Path, file_format: str) -> Path:
    """Writes the report frame to a dated file in output_dir and returns its path."""
    if file_format not in settings.REPORT_FORMATS:
        raise ValueError(
            f"Unsupported report format '{file_format}'. "
            f"Choose one of: {', '.join(settings.REPORT_FORMATS)}"
        )

    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / report_filename(file_format)

    if file_format == "xlsx":
        df.to_excel(path, index=False, sheet_name=settings.REPORT_SHEET_NAME)
    else:
        df.to_csv(path, index=False)

    logger.info(f"✅ Report with {len(df)} rows saved to: {path}")
    return path
