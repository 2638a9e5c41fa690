"""
Typed records passed between the analytics stages.

Uses Pydantic models so that rows built from loosely-typed CSV input are
validated once, and every later stage (scoring, comparison, forecasting)
works on immutable, well-typed data.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from . import settings

# "Infinite" days of cover: stock on hand with no recent sales.
INFINITE_COVER_DAYS = 999
# Velocity trend marker for a SKU that started selling this period.
NEW_SELLER_TREND = 999

UrgencyStatus = Literal["Critical", "Warning", "Healthy"]
SortDirection = Literal["asc", "desc"]


class LogisticsRecord(BaseModel):
    """Inbound and reserved quantities for one SKU from a Manage FBA Inventory report."""

    model_config = ConfigDict(frozen=True)

    sku: str
    inbound_working: int | float = 0
    inbound_shipped: int | float = 0
    inbound_receiving: int | float = 0
    reserved_quantity: int | float = 0
    mfn_fulfillable: int | float = 0


class FinancialRecord(BaseModel):
    """Unit cost and selling price for one SKU."""

    model_config = ConfigDict(frozen=True)

    sku: str
    cogs: int | float = 0
    price: int | float = 0


class ProductRecord(BaseModel):
    """One SKU of an inventory snapshot, with all derived health metrics."""

    model_config = ConfigDict(frozen=True)

    # Identity
    sku: str
    asin: str = ""
    name: str = ""
    condition: str = ""
    category: str = "Unknown"

    # Raw quantities
    available: int | float = 0
    pending_removal: int | float = 0
    inv_age_0_to_90: int | float = 0
    inv_age_91_to_180: int | float = 0
    inv_age_181_to_270: int | float = 0
    inv_age_271_to_365: int | float = 0
    inv_age_365_plus: int | float = 0
    shipped_t30: int | float = 0

    # Derived
    total_inv_age_days: int = Field(default=0, description="Unit-weighted average age")
    sell_through_rate: int = 0
    recommended_action: str = "No Action"
    risk_score: int = Field(default=0, ge=0, le=100)

    # Logistics enrichment (only when a logistics report matched this SKU)
    inbound_working: int | float | None = None
    inbound_shipped: int | float | None = None
    inbound_receiving: int | float | None = None
    reserved_quantity: int | float | None = None
    net_available_stock: int | float | None = None
    days_of_cover: int | None = None
    urgency_score: float | None = None
    urgency_status: UrgencyStatus | None = None

    # Financial enrichment
    cogs: int | float | None = None
    price: int | float | None = None
    inventory_value: int | float | None = None
    potential_revenue: int | float | None = None
    gross_profit_per_unit: int | float | None = None

    # Comparison deltas (only in snapshot-to-snapshot output)
    inventory_change: int | float | None = None
    shipped_change: int | float | None = None
    age_change: int | None = None
    risk_score_change: int | None = None
    velocity_trend: float | None = None
    inventory_value_change: int | float | None = None

    # Forecast output
    restock_recommendation: int | None = None

    @property
    def daily_sales(self) -> float:
        return self.shipped_t30 / 30

    @property
    def age_buckets(self) -> tuple[int | float, ...]:
        return (
            self.inv_age_0_to_90,
            self.inv_age_91_to_180,
            self.inv_age_181_to_270,
            self.inv_age_271_to_365,
            self.inv_age_365_plus,
        )


class Stats(BaseModel):
    """Aggregate totals over a collection of product records."""

    model_config = ConfigDict(frozen=True)

    total_products: int = 0
    total_available: int | float = 0
    total_pending: int | float = 0
    total_shipped: int | float = 0
    avg_days_inventory: int = 0
    sell_through_rate: int = 0
    at_risk_skus: int = 0


class Snapshot(BaseModel):
    """An immutable, named inventory snapshot built from one uploaded report."""

    model_config = ConfigDict(frozen=True)

    name: str
    data: tuple[ProductRecord, ...] = ()
    stats: Stats = Field(default_factory=Stats)
    timestamp: str = Field(default="", description="Caller-supplied load time")


class FilterState(BaseModel):
    """Independent filter predicates. An empty string means "no constraint"."""

    search: str = ""
    action: str = ""
    age: str = ""
    category: str = ""
    condition: str = ""
    stock_status: str = ""
    min_stock: str = ""
    max_stock: str = ""

    @property
    def active_count(self) -> int:
        return sum(1 for value in self.model_dump().values() if value)


class SortCriterion(BaseModel):
    """One sort key. Priority is the criterion's position in the sort state."""

    model_config = ConfigDict(frozen=True)

    key: str
    direction: SortDirection = "asc"

    def toggled(self) -> "SortCriterion":
        return self.model_copy(
            update={"direction": "desc" if self.direction == "asc" else "asc"}
        )


DEFAULT_SORT = (SortCriterion(key="risk_score", direction="desc"),)


class ForecastSettings(BaseModel):
    """User-tunable inputs to the restock forecaster."""

    model_config = ConfigDict(frozen=True)

    lead_time_days: float = Field(default=settings.DEFAULT_LEAD_TIME_DAYS, ge=0)
    safety_stock_days: float = Field(default=settings.DEFAULT_SAFETY_STOCK_DAYS, ge=0)
    demand_forecast_percent: float = Field(
        default=settings.DEFAULT_DEMAND_FORECAST_PERCENT, ge=-100
    )
