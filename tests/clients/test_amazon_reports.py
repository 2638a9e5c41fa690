import pytest

from fba_clients.amazon_reports import AmazonReportLoader
from fba_core.exceptions import ReportParseError, ReportTooLargeError
from fba_core.pipeline import ReportKind

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
MFI_HEADERS = [
    "sku",
    "afn-inbound-working-quantity",
    "afn-inbound-shipped-quantity",
    "afn-inbound-receiving-quantity",
    "afn-reserved-quantity",
]


def write_report(path, headers, rows, sep=",", encoding="utf-8", header_case=str.lower):
    lines = [sep.join(header_case(h) for h in headers)]
    lines += [sep.join(str(row.get(h, "")) for h in headers) for row in rows]
    path.write_text("\n".join(lines) + "\n", encoding=encoding)
    return path


def test_read_rows_normalizes_headers_and_keeps_blanks(tmp_path, row_factory):
    path = write_report(
        tmp_path / "snap.csv",
        SNAPSHOT_HEADERS,
        [row_factory("A", asin=""), row_factory("B", available="N/A")],
        encoding="utf-8-sig",
        header_case=str.upper,
    )
    rows = AmazonReportLoader(tmp_path).read_rows(path)

    assert list(rows[0]) == SNAPSHOT_HEADERS
    assert rows[0]["sku"] == "A"
    assert rows[0]["asin"] == ""
    assert rows[1]["available"] == "N/A"


def test_tab_separated_reports(tmp_path, row_factory):
    path = write_report(tmp_path / "snap.tsv", SNAPSHOT_HEADERS, [row_factory("A")], sep="\t")
    [row] = AmazonReportLoader(tmp_path).read_rows(path)
    assert row["product-name"] == "Bamboo Cutting Board"
    assert row["units-shipped-t30"] == "30"


def test_latin1_fallback(tmp_path, row_factory):
    path = write_report(
        tmp_path / "old.csv", SNAPSHOT_HEADERS, [row_factory("A", product_name="Café Mug")],
        encoding="latin-1",
    )
    [row] = AmazonReportLoader(tmp_path).read_rows(path)
    assert row["product-name"] == "Café Mug"


def test_empty_and_missing_files_raise(tmp_path):
    loader = AmazonReportLoader(tmp_path)
    empty = tmp_path / "empty.csv"
    empty.write_text("")

    with pytest.raises(ReportParseError, match="empty.csv"):
        loader.read_rows(empty)
    with pytest.raises(ReportParseError, match="file not found"):
        loader.read_rows(tmp_path / "nope.csv")


def test_oversized_file_is_rejected(tmp_path, row_factory):
    path = write_report(tmp_path / "big.csv", SNAPSHOT_HEADERS, [row_factory(str(i)) for i in range(50)])
    loader = AmazonReportLoader(tmp_path, max_file_size_mb=0.001)
    with pytest.raises(ReportTooLargeError) as excinfo:
        loader.read_rows(path)
    assert excinfo.value.source == "big.csv"


def test_load_all_processes_files_in_name_order(tmp_path, row_factory):
    write_report(
        tmp_path / "00_mfi.csv",
        MFI_HEADERS,
        [{"sku": "a", "afn-inbound-working-quantity": "25", "afn-reserved-quantity": "5"}],
    )
    write_report(tmp_path / "2024-01.csv", SNAPSHOT_HEADERS, [row_factory("A"), row_factory("B")])
    write_report(
        tmp_path / "2024-02.tsv",
        SNAPSHOT_HEADERS,
        [row_factory("A", available="50"), row_factory("A", available="-1"), row_factory("")],
        sep="\t",
    )
    (tmp_path / "notes.md").write_text("not a report")

    loaded = AmazonReportLoader(tmp_path).load_all()

    assert list(loaded.snapshots) == ["2024-01", "2024-02"]
    assert loaded.report_kinds == {
        "00_mfi": ReportKind.LOGISTICS,
        "2024-01": ReportKind.SNAPSHOT,
        "2024-02": ReportKind.SNAPSHOT,
    }
    january = loaded.snapshots["2024-01"]
    assert january.stats.total_products == 2
    assert january.data[0].net_available_stock == 120
    assert january.timestamp

    assert loaded.quality_reports["2024-01"].issues == []
    february_issues = {issue.issue_type for issue in loaded.quality_reports["2024-02"].issues}
    assert {"missing_sku", "duplicate", "negative"} <= february_issues
    assert "00_mfi" not in loaded.quality_reports


def test_load_all_respects_explicit_order(tmp_path, row_factory):
    snapshot = write_report(tmp_path / "a_snapshot.csv", SNAPSHOT_HEADERS, [row_factory("A")])
    mfi = write_report(
        tmp_path / "z_mfi.csv", MFI_HEADERS, [{"sku": "A", "afn-inbound-working-quantity": "5"}]
    )

    loaded = AmazonReportLoader(tmp_path).load_all([snapshot, mfi])
    assert loaded.snapshots["a_snapshot"].data[0].net_available_stock is None


def test_missing_input_dir_loads_nothing(tmp_path):
    loaded = AmazonReportLoader(tmp_path / "missing").load_all()
    assert loaded.snapshots == {}
    assert loaded.quality_reports == {}


def test_short_rows_read_as_blank_cells(tmp_path):
    headers = SNAPSHOT_HEADERS + ["cogs", "price"]
    path = tmp_path / "short.csv"
    path.write_text(",".join(headers) + "\nA,B0A,Mug,New,10,0,10,0,0,0,0,3\n")

    loaded = AmazonReportLoader(tmp_path).load_all([path])
    [row] = AmazonReportLoader(tmp_path).read_rows(path)
    [record] = loaded.snapshots["short"].data

    assert row["category"] == ""
    assert row["cogs"] == ""
    assert record.category == "Unknown"
    assert record.recommended_action == "No Action"
    assert record.cogs is None
    assert record.inventory_value is None
