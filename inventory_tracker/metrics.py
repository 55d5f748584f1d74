from collections import Counter
from typing import Iterable

from .schemas import DashboardMetrics, Product


def is_out_of_stock(p: Product) -> bool:
    return p.quantity == 0


def needs_reorder(p: Product) -> bool:
    return p.quantity <= p.reorder_point


def is_low_stock(p: Product) -> bool:
    # Low stock uses the product's own reorder point; empty shelves count as out of stock instead.
    return p.quantity > 0 and needs_reorder(p)


def compute_metrics(products: Iterable[Product]) -> DashboardMetrics:
    """Dashboard figures for a ledger snapshot. Never cached: call it on every read."""
    products = list(products)
    return DashboardMetrics(
        total_products=len(products),
        low_stock_items=sum(1 for p in products if is_low_stock(p)),
        total_value=sum(p.total_value for p in products),
        out_of_stock=sum(1 for p in products if is_out_of_stock(p)),
        category_counts=dict(Counter(p.category for p in products)),
    )
