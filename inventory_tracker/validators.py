"""
Row validation for bulk imports.

Raw rows are untyped (whatever the spreadsheet held). `validate_row` collects
every problem in a row, and `normalize_row` turns a row that passed into a typed
ProductDraft. Nothing untyped gets past this module.
"""

import math
from numbers import Real
from typing import Any, Optional

from .parsers import RawRow
from .schemas import ProductDraft, RowValidationError

# Data rows start on spreadsheet line 2: line 1 is the header and lines are 1-based.
HEADER_ROW_OFFSET = 2


def display_row(index: int) -> int:
    return index + HEADER_ROW_OFFSET


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return str(value).strip() != ""


def _to_number(value: Any) -> Optional[float]:
    """Returns value as a finite float, or None if it is not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Real):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _is_non_negative(value: Any) -> bool:
    number = _to_number(value)
    return number is not None and number >= 0


def _is_count(value: Any) -> bool:
    """A non-negative whole number, e.g. 3, 3.0 or '3'."""
    number = _to_number(value)
    return number is not None and number >= 0 and number.is_integer()


def _to_text(value: Any) -> str:
    # Spreadsheets hand numeric-looking SKUs back as floats; keep '1001', not '1001.0'.
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def validate_row(row: RawRow, index: int) -> Optional[RowValidationError]:
    """
    Checks one raw row. `index` is the 0-based data-row position.
    Returns None when the row is valid, otherwise every failing reason in a fixed order.
    """
    errors = []

    if not _is_present(row.get("name")):
        errors.append("Name is required")
    if not _is_present(row.get("sku")):
        errors.append("SKU is required")
    if not _is_count(row.get("quantity")):
        errors.append("Invalid quantity")
    if not _is_non_negative(row.get("price")):
        errors.append("Invalid price")
    if not _is_present(row.get("category")):
        errors.append("Category is required")
    if not _is_count(row.get("reorderPoint")):
        errors.append("Invalid reorder point")

    if errors:
        return RowValidationError(row=display_row(index), errors=errors)
    return None


def normalize_row(row: RawRow) -> ProductDraft:
    """Coerces a row that passed validate_row into a typed draft."""
    return ProductDraft(
        name=_to_text(row["name"]),
        sku=_to_text(row["sku"]),
        category=_to_text(row["category"]),
        quantity=int(_to_number(row["quantity"])),
        price=_to_number(row["price"]),
        reorder_point=int(_to_number(row["reorderPoint"])),
    )
