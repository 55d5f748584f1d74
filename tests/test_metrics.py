import pytest

from inventory_tracker.metrics import compute_metrics, is_low_stock, needs_reorder

from conftest import make_draft


def test_metrics_for_mixed_stock_levels(ledger):
    ledger.bulk_add_products(
        [
            make_draft(sku="EMPTY", quantity=0, price=3.0, reorder_point=5, category="Tools"),
            make_draft(sku="LOW", quantity=5, price=2.0, reorder_point=10, category="Tools"),
            make_draft(sku="PLENTY", quantity=20, price=1.5, reorder_point=10, category="Paint"),
        ]
    )

    metrics = compute_metrics(ledger.products)

    assert metrics.total_products == 3
    assert metrics.out_of_stock == 1
    assert metrics.low_stock_items == 1
    assert metrics.total_value == pytest.approx(5 * 2.0 + 20 * 1.5)
    assert metrics.category_counts == {"Tools": 2, "Paint": 1}


def test_low_stock_follows_each_products_reorder_point(ledger):
    high_threshold = ledger.add_product(make_draft(quantity=40, reorder_point=50))
    low_threshold = ledger.add_product(make_draft(quantity=8, reorder_point=5))

    assert is_low_stock(high_threshold)
    assert not is_low_stock(low_threshold)
    assert compute_metrics(ledger.products).low_stock_items == 1


def test_out_of_stock_items_need_reorder_but_are_not_low_stock(ledger):
    empty = ledger.add_product(make_draft(quantity=0, reorder_point=0))

    assert needs_reorder(empty)
    assert not is_low_stock(empty)


def test_metrics_are_recomputed_from_each_snapshot(ledger):
    product = ledger.add_product(make_draft(quantity=1, reorder_point=0))
    assert compute_metrics(ledger.products).out_of_stock == 0

    ledger.update_product(product.id, make_draft(quantity=0, reorder_point=0))

    assert compute_metrics(ledger.products).out_of_stock == 1


def test_empty_ledger_metrics():
    metrics = compute_metrics([])
    assert metrics.model_dump(by_alias=True) == {
        "totalProducts": 0,
        "lowStockItems": 0,
        "totalValue": 0.0,
        "outOfStock": 0,
        "categoryCounts": {},
    }
