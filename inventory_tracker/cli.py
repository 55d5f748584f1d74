import argparse
import json
import logging
from datetime import date
from pathlib import Path
import pandas as pd
from pydantic import ValidationError

from . import settings
from .ledger import LedgerStore
from .logger import setup_logger
from .metrics import compute_metrics
from .pipelines.bulk_import import BulkImportPipeline
from .pipelines.report import ReportPipeline
from .schemas import ProductDraft, ReportFilters
from .storage import JsonFileStorage

logger = logging.getLogger(__name__)

LIST_COLUMNS = ["id", "name", "sku", "category", "quantity", "price", "reorderPoint", "updatedAt"]


def _add_draft_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name", required=True)
    parser.add_argument("--sku", required=True)
    parser.add_argument("--category", required=True)
    parser.add_argument("--quantity", type=int, required=True)
    parser.add_argument("--price", type=float, required=True)
    parser.add_argument("--reorder-point", type=int, required=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inventory-tracker", description="Manage the product ledger."
    )
    parser.add_argument(
        "--storage-dir", type=Path, default=settings.STORAGE_DIR,
        help="Directory holding the persisted ledger.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="Show every product.")

    add = commands.add_parser("add", help="Add one product.")
    _add_draft_arguments(add)

    update = commands.add_parser("update", help="Replace a product's fields.")
    update.add_argument("product_id")
    _add_draft_arguments(update)

    delete = commands.add_parser("delete", help="Remove a product.")
    delete.add_argument("product_id")

    bulk = commands.add_parser("import", help="Bulk import a .xlsx, .xls or .csv file.")
    bulk.add_argument("file", type=Path)

    commands.add_parser("metrics", help="Show dashboard metrics.")

    report = commands.add_parser("report", help="Export an inventory report.")
    report.add_argument("--status", choices=["all", "low", "out"], default="all")
    report.add_argument("--category", action="append", dest="categories")
    report.add_argument("--sort-by", choices=["name", "quantity", "value"])
    report.add_argument("--from", dest="start_date", type=date.fromisoformat)
    report.add_argument("--to", dest="end_date", type=date.fromisoformat)
    report.add_argument("--format", choices=settings.REPORT_FORMATS, default=settings.REPORT_FORMAT)
    report.add_argument("--output-dir", type=Path, default=settings.OUTPUT_DIR)

    return parser


def _draft_from_args(args: argparse.Namespace) -> ProductDraft:
    return ProductDraft(
        name=args.name,
        sku=args.sku,
        category=args.category,
        quantity=args.quantity,
        price=args.price,
        reorder_point=args.reorder_point,
    )


def cmd_list(ledger: LedgerStore, args: argparse.Namespace) -> int:
    if not len(ledger):
        print("The ledger is empty.")
        return 0
    rows = [p.model_dump(mode="json", by_alias=True) for p in ledger.products]
    print(pd.DataFrame(rows, columns=LIST_COLUMNS).to_string(index=False))
    return 0


def cmd_add(ledger: LedgerStore, args: argparse.Namespace) -> int:
    product = ledger.add_product(_draft_from_args(args))
    print(product.id)
    return 0


def cmd_update(ledger: LedgerStore, args: argparse.Namespace) -> int:
    updated = ledger.update_product(args.product_id, _draft_from_args(args))
    return 0 if updated is not None else 1


def cmd_delete(ledger: LedgerStore, args: argparse.Namespace) -> int:
    return 0 if ledger.delete_product(args.product_id) else 1


def cmd_import(ledger: LedgerStore, args: argparse.Namespace) -> int:
    try:
        content = args.file.read_bytes()
    except OSError as e:
        logger.error(f"❌ Could not open {args.file}: {e}")
        return 1

    result = BulkImportPipeline(ledger).run(content)
    if not result.committed:
        for error in result.errors:
            print(f"Row {error.row}: {', '.join(error.errors)}")
        return 1
    print(f"Products uploaded successfully ({result.imported}).")
    return 0


def cmd_metrics(ledger: LedgerStore, args: argparse.Namespace) -> int:
    metrics = compute_metrics(ledger.products)
    print(json.dumps(metrics.model_dump(by_alias=True), indent=2))
    return 0


def cmd_report(ledger: LedgerStore, args: argparse.Namespace) -> int:
    filters = ReportFilters(
        stock_status=args.status,
        categories=args.categories,
        sort_by=args.sort_by,
        start_date=args.start_date,
        end_date=args.end_date,
    )
    path = ReportPipeline(ledger, output_dir=args.output_dir, file_format=args.format).run(filters)
    print(path)
    return 0


COMMANDS = {
    "list": cmd_list,
    "add": cmd_add,
    "update": cmd_update,
    "delete": cmd_delete,
    "import": cmd_import,
    "metrics": cmd_metrics,
    "report": cmd_report,
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger()

    ledger = LedgerStore(JsonFileStorage(args.storage_dir))
    try:
        return COMMANDS[args.command](ledger, args)
    except ValidationError as e:
        logger.error(f"❌ Invalid product data:\n{e}")
        return 2
