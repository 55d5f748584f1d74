from datetime import datetime, timedelta, timezone
from io import BytesIO

import pandas as pd
import pytest

from inventory_tracker import settings
from inventory_tracker.ledger import LedgerStore
from inventory_tracker.schemas import ProductDraft
from inventory_tracker.storage import MemoryStorage

START = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


class TickingClock:
    """Returns a new, strictly later time on every call."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(minutes=1)):
        self.current = start
        self.step = step
        self.calls = 0

    def __call__(self) -> datetime:
        now = self.current
        self.current += self.step
        self.calls += 1
        return now


@pytest.fixture()
def clock():
    return TickingClock()


@pytest.fixture()
def storage():
    return MemoryStorage()


@pytest.fixture()
def ledger(storage, clock):
    return LedgerStore(storage, clock=clock)


def make_draft(**overrides) -> ProductDraft:
    fields = {
        "name": "Widget",
        "sku": "WID-001",
        "category": "Hardware",
        "quantity": 25,
        "price": 4.5,
        "reorder_point": 10,
    }
    fields.update(overrides)
    return ProductDraft(**fields)


@pytest.fixture()
def draft_factory():
    return make_draft


def valid_row(**overrides) -> dict:
    row = {
        "name": "Widget",
        "sku": "WID-001",
        "quantity": 25,
        "price": 4.5,
        "category": "Hardware",
        "reorderPoint": 10,
    }
    row.update(overrides)
    return row


@pytest.fixture()
def row_factory():
    return valid_row


def to_csv_bytes(rows: list[dict], columns: list[str] | None = None) -> bytes:
    df = pd.DataFrame(rows, columns=columns or settings.IMPORT_COLUMNS)
    return df.to_csv(index=False).encode("utf-8")


def to_xlsx_bytes(sheets: dict[str, list[dict]]) -> bytes:
    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for sheet_name, rows in sheets.items():
            pd.DataFrame(rows, columns=settings.IMPORT_COLUMNS).to_excel(
                writer, sheet_name=sheet_name, index=False
            )
    return buffer.getvalue()


@pytest.fixture()
def csv_bytes():
    return to_csv_bytes


@pytest.fixture()
def xlsx_bytes():
    return to_xlsx_bytes
