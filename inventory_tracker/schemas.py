from datetime import date, datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProductDraft(BaseModel):
    """
    The editable field set of a product: everything except the id and timestamps.
    This is what forms and the bulk importer hand to the ledger.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    sku: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=0)
    price: float = Field(..., ge=0, allow_inf_nan=False)
    reorder_point: int = Field(..., ge=0, alias="reorderPoint")


class Product(ProductDraft):
    """
    A ledger record. Serialized with camelCase aliases so the persisted JSON
    keeps the shape the storage layer has always used.
    """

    id: str
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    @model_validator(mode="after")
    def _check_timestamps(self) -> "Product":
        if self.created_at > self.updated_at:
            raise ValueError("createdAt must not be later than updatedAt")
        return self

    @property
    def total_value(self) -> float:
        return self.price * self.quantity


class RowValidationError(BaseModel):
    """One rejected import row. Row 0 is reserved for whole-file failures."""

    row: int = Field(..., ge=0)
    errors: list[str]


class ImportResult(BaseModel):
    committed: bool
    errors: list[RowValidationError] = Field(default_factory=list)
    imported: int = Field(default=0, ge=0)


class DashboardMetrics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_products: int = Field(default=0, ge=0, alias="totalProducts")
    low_stock_items: int = Field(default=0, ge=0, alias="lowStockItems")
    total_value: float = Field(default=0.0, ge=0, alias="totalValue")
    out_of_stock: int = Field(default=0, ge=0, alias="outOfStock")
    category_counts: dict[str, int] = Field(
        default_factory=dict, alias="categoryCounts"
    )


StockStatus = Literal["all", "low", "out"]
SortKey = Literal["name", "quantity", "value"]


class ReportFilters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    stock_status: StockStatus = Field(default="all", alias="stockStatus")
    categories: Optional[list[str]] = None
    sort_by: Optional[SortKey] = Field(default=None, alias="sortBy")
    # Inclusive bounds on the date part of updatedAt.
    start_date: Optional[date] = Field(default=None, alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")
