import asyncio

from inventory_tracker import settings
from inventory_tracker.pipelines.bulk_import import BulkImportPipeline, import_products

from conftest import make_draft, to_csv_bytes, valid_row


def test_all_valid_rows_are_committed_in_order(ledger, csv_bytes):
    ledger.add_product(make_draft(sku="EXISTING"))
    rows = [valid_row(sku=f"SKU-{i}", quantity=i) for i in range(5)]

    result = BulkImportPipeline(ledger).run(csv_bytes(rows))

    assert result.committed is True
    assert result.errors == []
    assert result.imported == 5
    assert len(ledger) == 6
    imported = ledger.products[1:]
    assert [p.sku for p in imported] == [f"SKU-{i}" for i in range(5)]
    assert [p.quantity for p in imported] == [0, 1, 2, 3, 4]
    assert len({p.created_at for p in imported}) == 1


def test_one_bad_row_rejects_the_whole_file(ledger, storage, csv_bytes):
    ledger.add_product(make_draft())
    stored_before = storage.data["inventory"]
    rows = [valid_row(sku=f"SKU-{i}") for i in range(999)]
    rows[500] = valid_row(price=-1)

    result = BulkImportPipeline(ledger).run(csv_bytes(rows))

    assert result.committed is False
    assert result.imported == 0
    assert len(result.errors) == 1
    assert result.errors[0].row == 502
    assert result.errors[0].errors == ["Invalid price"]
    assert len(ledger) == 1
    assert storage.data["inventory"] == stored_before


def test_errors_from_all_rows_are_accumulated(ledger, csv_bytes):
    rows = [valid_row(name=""), valid_row(), valid_row(quantity="x", category="")]

    result = import_products(ledger, csv_bytes(rows))

    assert [(e.row, e.errors) for e in result.errors] == [
        (2, ["Name is required"]),
        (4, ["Invalid quantity", "Category is required"]),
    ]
    assert len(ledger) == 0


def test_missing_columns_fail_every_row(ledger):
    content = to_csv_bytes([{"name": "Widget", "sku": "W"}], columns=["name", "sku"])

    result = import_products(ledger, content)

    assert result.committed is False
    assert result.errors[0].errors == [
        "Invalid quantity",
        "Invalid price",
        "Category is required",
        "Invalid reorder point",
    ]


def test_corrupt_file_becomes_a_single_row_zero_error(ledger):
    result = import_products(ledger, b"PK\x03\x04garbage")

    assert result.committed is False
    assert len(result.errors) == 1
    assert result.errors[0].row == 0
    assert result.errors[0].errors == ["Invalid file format"]
    assert len(ledger) == 0


def test_empty_file_is_an_invalid_format(ledger):
    result = import_products(ledger, b"")
    assert result.errors[0].errors == ["Invalid file format"]


def test_header_only_file_commits_nothing_without_errors(ledger, storage):
    ledger.add_product(make_draft())
    stored_before = storage.data["inventory"]

    result = import_products(ledger, to_csv_bytes([]))

    assert result.committed is True
    assert result.imported == 0
    assert result.errors == []
    assert len(ledger) == 1
    assert storage.data["inventory"] == stored_before


def test_xlsx_upload_is_imported(ledger, xlsx_bytes):
    content = xlsx_bytes(
        {"Inventory": [valid_row(sku=1001, price=12.5), valid_row(sku="B-2", quantity=0)]}
    )

    result = import_products(ledger, content)

    assert result.committed is True
    assert [p.sku for p in ledger.products] == ["1001", "B-2"]
    assert ledger.products[0].price == 12.5


def test_async_import_commits_like_run(ledger, csv_bytes):
    content = csv_bytes([valid_row(sku="A"), valid_row(sku="B")])

    result = asyncio.run(BulkImportPipeline(ledger).arun(content))

    assert result.committed is True
    assert [p.sku for p in ledger.products] == ["A", "B"]


def test_async_import_reports_parse_failures(ledger):
    result = asyncio.run(BulkImportPipeline(ledger).arun(b"\x00\x01\x02"))

    assert result.committed is False
    assert result.errors[0].row == 0


def test_import_columns_match_expected_header():
    assert settings.IMPORT_COLUMNS == ["name", "sku", "quantity", "price", "category", "reorderPoint"]
