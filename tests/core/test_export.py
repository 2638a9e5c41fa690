import io

import pandas as pd

from fba_core.export import (
    COMPARISON_COLUMNS,
    EXPORT_COLUMNS,
    columns_for,
    export_rows,
    format_csv_field,
    to_csv,
    to_frame,
)


def test_format_csv_field_quotes_only_when_needed():
    assert format_csv_field("plain") == "plain"
    assert format_csv_field(12) == "12"
    assert format_csv_field(None) == ""
    assert format_csv_field("a,b") == '"a,b"'
    assert format_csv_field('say "hi"') == '"say ""hi"""'
    assert format_csv_field("two\nlines") == '"two\nlines"'


def test_empty_export_is_empty_string():
    assert to_csv([]) == ""


def test_columns_follow_record_order(record_factory):
    assert columns_for([record_factory()]) == EXPORT_COLUMNS
    compared = record_factory(inventory_change=5, velocity_trend=10.0)
    assert columns_for([compared]) == EXPORT_COLUMNS + COMPARISON_COLUMNS


def test_export_rows_use_titles(record_factory):
    [row] = export_rows([record_factory("A", name="Widget", available=3)])
    assert list(row)[:3] == ["SKU", "ASIN", "Product Name"]
    assert row["SKU"] == "A"
    assert row["Available"] == "3"
    assert row["Category"] == "Unknown"


def test_to_csv_header_and_quoting(record_factory):
    record = record_factory("A-1", name='Mug, "Large"', available=12, risk_score=40)
    text = to_csv([record])

    lines = text.splitlines()
    assert lines[0].split(",")[:4] == ["SKU", "ASIN", "Product Name", "Condition"]
    assert lines[1].startswith('A-1,,"Mug, ""Large""",,12,')
    assert text.endswith("\n")


def test_to_csv_reads_back_with_pandas(record_factory):
    records = [
        record_factory("A", name="Line\nbreak", available=1, inventory_change=-2, velocity_trend=999),
        record_factory("B", available=2, inventory_change=2, velocity_trend=-12.5),
    ]
    frame = pd.read_csv(io.StringIO(to_csv(records)), dtype=str, keep_default_na=False)

    assert list(frame.columns) == [title for _, title in EXPORT_COLUMNS + COMPARISON_COLUMNS]
    assert frame.loc[0, "Product Name"] == "Line\nbreak"
    assert frame.loc[1, "Velocity Trend (%)"] == "-12.5"
    assert frame.loc[0, "Inventory Change"] == "-2"


def test_to_frame_keeps_text(record_factory):
    frame = to_frame([record_factory("A", available=5)])
    assert frame.loc[0, "Available"] == "5"
    assert frame.shape == (1, len(EXPORT_COLUMNS))


def test_comparison_export_includes_value_change(record_factory):
    record = record_factory("A", inventory_change=1, inventory_value_change=-12.5)
    [row] = export_rows([record])
    assert row["Inventory Value Change"] == "-12.5"
    assert to_csv([record]).splitlines()[0].endswith("Velocity Trend (%),Inventory Value Change")
