import pytest

from fba_core.models import ProductRecord

SNAPSHOT_HEADERS = [
    "sku",
    "asin",
    "product-name",
    "condition",
    "available",
    "pending-removal-quantity",
    "inv-age-0-to-90-days",
    "inv-age-91-to-180-days",
    "inv-age-181-to-270-days",
    "inv-age-271-to-365-days",
    "inv-age-365-plus-days",
    "units-shipped-t30",
    "recommended-action",
    "category",
]


def snapshot_row(sku="SKU-1", **overrides):
    """A primary inventory row with every column present, as a CSV reader yields it."""
    row = {
        "sku": sku,
        "asin": "B000TEST01",
        "product-name": "Bamboo Cutting Board",
        "condition": "New",
        "available": "100",
        "pending-removal-quantity": "0",
        "inv-age-0-to-90-days": "100",
        "inv-age-91-to-180-days": "0",
        "inv-age-181-to-270-days": "0",
        "inv-age-271-to-365-days": "0",
        "inv-age-365-plus-days": "0",
        "units-shipped-t30": "30",
        "recommended-action": "No Action",
        "category": "Kitchen",
    }
    row.update({key.replace("_", "-"): value for key, value in overrides.items()})
    return row


def make_record(sku="SKU-1", **fields):
    return ProductRecord(sku=sku, **fields)


@pytest.fixture
def row_factory():
    return snapshot_row


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def sample_records():
    return [
        make_record(
            "ALPHA-1",
            asin="B0ALPHA",
            name="Alpha Widget",
            condition="New",
            category="Kitchen",
            available=20,
            shipped_t30=60,
            total_inv_age_days=40,
            sell_through_rate=75,
            risk_score=0,
        ),
        make_record(
            "BETA-2",
            asin="B0BETA",
            name="Beta Gadget",
            condition="Used",
            category="Garden",
            available=500,
            shipped_t30=0,
            total_inv_age_days=400,
            sell_through_rate=0,
            recommended_action="Create Removal Order",
            risk_score=80,
        ),
        make_record(
            "GAMMA-3",
            asin="B0GAMMA",
            name="Gamma Tool",
            condition="New",
            category="Garden",
            available=300,
            shipped_t30=30,
            total_inv_age_days=200,
            sell_through_rate=9,
            risk_score=60,
        ),
        make_record(
            "DELTA-4",
            asin="B0DELTA",
            name="Delta Kit",
            condition="New",
            category="Kitchen",
            available=0,
            shipped_t30=0,
            total_inv_age_days=0,
            sell_through_rate=0,
            risk_score=0,
        ),
    ]
