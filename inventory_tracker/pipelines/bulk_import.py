import asyncio
import logging
from typing import NamedTuple

from .. import settings
from ..ledger import LedgerStore
from ..parsers import ParseError, RawRow, parse_tabular
from ..pipeline import DataPipeline
from ..schemas import ImportResult, ProductDraft, RowValidationError
from ..validators import normalize_row, validate_row

logger = logging.getLogger(__name__)

INVALID_FILE_FORMAT = "Invalid file format"


class ValidatedRows(NamedTuple):
    drafts: list[ProductDraft]
    errors: list[RowValidationError]


class BulkImportPipeline(DataPipeline):
    """
    Parses an uploaded table, validates every row and commits all-or-nothing.

    A single failing row rejects the whole file; the ledger is only touched
    when every row is valid.
    """

    def __init__(self, ledger: LedgerStore):
        super().__init__("bulk import")
        self.ledger = ledger

    async def arun(self, content: bytes) -> ImportResult:
        """
        Same as run(), but parsing happens in a worker thread so the event loop
        stays free. Validation and commit run on the loop without yielding.
        """
        logger.info(f"🚀 STEP: {self.pipeline_name.upper()}")
        rows = await asyncio.to_thread(self.extract, content)
        return self.finish(rows)

    def extract(self, content: bytes) -> list[RawRow] | None:
        try:
            rows = parse_tabular(content)
        except ParseError as e:
            logger.error(f"❌ Could not parse upload: {e}")
            return None

        if not rows:
            logger.warning("⚠️ Upload has no data rows, nothing to import.")
            return rows

        # Rows are still validated one by one; this just makes a bad header obvious in the log.
        missing = [c for c in settings.IMPORT_COLUMNS if c not in rows[0]]
        if missing:
            logger.warning(f"⚠️ Upload is missing columns: {', '.join(missing)}")
        return rows

    def transform(self, rows: list[RawRow]) -> ValidatedRows:
        logger.info(f"Validating {len(rows)} rows...")
        drafts = []
        errors = []
        for index, row in enumerate(rows):
            error = validate_row(row, index)
            if error is not None:
                errors.append(error)
            else:
                drafts.append(normalize_row(row))
        return ValidatedRows(drafts, errors)

    def load(self, validated: ValidatedRows) -> ImportResult:
        if validated.errors:
            logger.error(
                f"❌ Import rejected: {len(validated.errors)} invalid rows, nothing committed."
            )
            for error in validated.errors:
                logger.error(f"  > Row {error.row}: {', '.join(error.errors)}")
            return ImportResult(committed=False, errors=validated.errors)

        added = self.ledger.bulk_add_products(validated.drafts)
        logger.info(f"✅ Imported {len(added)} products.")
        return ImportResult(committed=True, imported=len(added))

    def on_extract_failure(self) -> ImportResult:
        return ImportResult(
            committed=False,
            errors=[RowValidationError(row=0, errors=[INVALID_FILE_FORMAT])],
        )


def import_products(ledger: LedgerStore, content: bytes) -> ImportResult:
    """Convenience wrapper: one import of `content` into `ledger`."""
    return BulkImportPipeline(ledger).run(content)
