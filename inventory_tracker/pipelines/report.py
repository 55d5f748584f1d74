import logging
from pathlib import Path
from typing import NamedTuple
import pandas as pd

from .. import data_handler, settings
from ..ledger import LedgerStore
from ..pipeline import DataPipeline
from ..schemas import ReportFilters

logger = logging.getLogger(__name__)

# Internal column -> exported header.
COLUMN_HEADERS = {
    "name": "Name",
    "sku": "SKU",
    "category": "Category",
    "quantity": "Quantity",
    "price": "Price",
    "total_value": "Total Value",
    "reorder_point": "Reorder Point",
    "last_updated": "Last Updated",
}


class ReportInput(NamedTuple):
    frame: pd.DataFrame
    filters: ReportFilters


class ReportPipeline(DataPipeline):
    """Exports a filtered, sorted snapshot of the ledger as an xlsx or csv file."""

    def __init__(
        self,
        ledger: LedgerStore,
        output_dir: Path = settings.OUTPUT_DIR,
        file_format: str = settings.REPORT_FORMAT,
    ):
        super().__init__("inventory report")
        self.ledger = ledger
        self.output_dir = Path(output_dir)
        self.file_format = file_format

    def run(self, filters: ReportFilters | None = None) -> Path:
        return super().run(filters or ReportFilters())

    def extract(self, filters: ReportFilters) -> ReportInput:
        records = [
            {
                "name": p.name,
                "sku": p.sku,
                "category": p.category,
                "quantity": p.quantity,
                "price": p.price,
                "total_value": p.total_value,
                "reorder_point": p.reorder_point,
                "last_updated": p.updated_at.date(),
            }
            for p in self.ledger.products
        ]
        frame = pd.DataFrame(records, columns=list(COLUMN_HEADERS))
        logger.info(f"Snapshot taken: {len(frame)} products in ledger.")
        return ReportInput(frame, filters)

    def transform(self, data: ReportInput) -> pd.DataFrame:
        return build_report_frame(data.frame, data.filters)

    def load(self, df: pd.DataFrame) -> Path:
        return data_handler.save_report(df, self.output_dir, self.file_format)


def build_report_frame(df: pd.DataFrame, filters: ReportFilters) -> pd.DataFrame:
    """Applies the report filters and sort, then renames to the exported headers."""
    if filters.stock_status == "low":
        df = df[df["quantity"] <= df["reorder_point"]]
    elif filters.stock_status == "out":
        df = df[df["quantity"] == 0]

    if filters.categories:
        df = df[df["category"].isin(filters.categories)]

    if filters.start_date is not None:
        df = df[df["last_updated"] >= filters.start_date]
    if filters.end_date is not None:
        df = df[df["last_updated"] <= filters.end_date]

    if filters.sort_by == "name":
        df = df.sort_values("name", kind="stable")
    elif filters.sort_by == "quantity":
        df = df.sort_values("quantity", kind="stable")
    elif filters.sort_by == "value":
        df = df.sort_values("total_value", ascending=False, kind="stable")

    logger.info(
        f"Filter '{filters.stock_status}' kept {len(df)} products"
        + (f", sorted by {filters.sort_by}." if filters.sort_by else ".")
    )

    df = df.assign(last_updated=df["last_updated"].map(lambda d: d.isoformat()))
    df = df.rename(columns=COLUMN_HEADERS)
    return df[settings.REPORT_COLUMNS].reset_index(drop=True)
