import pytest

from fba_core.risk import (
    age_points,
    calculate_risk_score,
    cover_points,
    removal_points,
    risk_level,
    score_record,
)


def test_stranded_aged_stock_scores_age_plus_stranded():
    assert calculate_risk_score(400, 50, 0, 0) == 80


def test_empty_sku_scores_zero():
    assert calculate_risk_score(0, 0, 0, 0) == 0
    assert cover_points(0, 0) == 0


@pytest.mark.parametrize(
    "age, expected", [(0, 0), (90, 0), (91, 15), (180, 15), (181, 25), (365, 25), (366, 40)]
)
def test_age_bands_are_exclusive(age, expected):
    assert age_points(age) == expected


@pytest.mark.parametrize(
    "available, shipped_t30, expected",
    [
        (60, 30, 0),  # 60 days of cover
        (61, 30, 10),
        (91, 30, 20),
        (181, 30, 35),
        (10, 0, 40),
    ],
)
def test_cover_bands(available, shipped_t30, expected):
    assert cover_points(available, shipped_t30) == expected


@pytest.mark.parametrize(
    "available, pending, expected",
    [(100, 0, 0), (90, 10, 0), (89, 11, 5), (79, 21, 10), (49, 51, 20), (0, 0, 0)],
)
def test_removal_ratio_bands(available, pending, expected):
    assert removal_points(available, pending) == expected


def test_score_is_clamped_to_100():
    # 40 age + 40 stranded + 20 removal
    assert calculate_risk_score(500, 10, 0, 90) == 100


def test_negative_inputs_never_leave_range():
    score = calculate_risk_score(-10, -5, -3, -1)
    assert 0 <= score <= 100
    assert isinstance(score, int)


def test_score_record_uses_record_fields(record_factory):
    record = record_factory(total_inv_age_days=400, available=50, shipped_t30=0)
    assert score_record(record) == 80


def test_risk_level():
    assert risk_level(86) == "high"
    assert risk_level(85) == "medium"
    assert risk_level(71) == "medium"
    assert risk_level(70) == "low"
