"""Tests for AnalyticsExporter: trade log CSV and analytics reports."""

import csv
import io
import json
import pytest
from datetime import date, datetime

from .conftest import loss, make_trade, win
from trade_journal.core.enums import ExportFormat
from trade_journal.core.errors import ExportError
from trade_journal.journal.analytics import build_report
from trade_journal.journal.export import AnalyticsExporter, export_filename


@pytest.fixture
def exporter():
    return AnalyticsExporter(decimal_places=2)


def _section(report_csv: str, title: str) -> list[list[str]]:
    """Rows of one ``=== TITLE ===`` block, header included."""
    for block in report_csv.strip().split("\n\n"):
        lines = block.splitlines()
        if lines[0] == f"=== {title} ===":
            return list(csv.reader(lines[1:]))
    raise AssertionError(f"section {title!r} not found")


class TestTradeLog:

    def test_header_and_rows(self, exporter):
        trades = [
            win(100, strategy="Breakout, v2", emotions=["FOMO", "Calm"]),
            loss(40),
        ]
        rows = list(csv.reader(io.StringIO(exporter.trade_log_csv(trades))))
        assert rows[0][:3] == ["Date", "Symbol", "Asset Class"]
        assert len(rows) == 3
        first = dict(zip(rows[0], rows[1]))
        assert first["Date"] == "2024-01-01"
        assert first["Status"] == "win"
        assert first["Strategy"] == "Breakout, v2"
        assert first["Emotions"] == "FOMO, Calm"
        assert first["Exit Price"] == ""

    def test_empty(self, exporter):
        assert exporter.trade_log_csv([]).count("\n") == 1


class TestReportCSV:

    def test_summary_values(self, exporter, mixed_trades):
        text = exporter.report_csv(build_report(mixed_trades))
        summary = dict(_section(text, "PERFORMANCE SUMMARY")[1:])
        assert summary["Total Trades"] == "3"
        assert summary["Win Rate (%)"] == "33.3"
        assert summary["Total P&L ($)"] == "50.00"
        assert summary["Profit Factor"] == "2.00"

    def test_infinite_profit_factor_rendered(self, exporter):
        text = exporter.report_csv(build_report([win(10)]))
        summary = dict(_section(text, "PERFORMANCE SUMMARY")[1:])
        assert summary["Profit Factor"] == "Infinity"

    def test_day_of_week_always_present(self, exporter):
        text = exporter.report_csv(build_report([]))
        days = _section(text, "DAY OF WEEK PERFORMANCE")
        assert len(days) == 8
        assert "=== STRATEGY PERFORMANCE ===" not in text
        assert "=== EXIT REASON BREAKDOWN ===" not in text

    def test_optional_sections(self, exporter):
        trades = [
            win(10, strategy="Trend", exit_reason="tp_hit",
                exit_date=datetime(2024, 2, 3)),
        ]
        text = exporter.report_csv(build_report(trades))
        assert _section(text, "STRATEGY PERFORMANCE")[1][0] == "Trend"
        assert _section(text, "EXIT REASON BREAKDOWN")[1][0] == "Take Profit Hit"
        assert _section(text, "MONTHLY PERFORMANCE")[1][0] == "Feb 2024"
        assert _section(text, "ASSET CLASS PERFORMANCE")[1][0] == "Forex"


class TestReportJSON:

    def test_valid_json_with_infinity_string(self, exporter):
        data = json.loads(exporter.report_json(build_report([win(10)])))
        assert data["stats"]["profit_factor"] == "Infinity"
        assert data["equity_curve"]["points"][0]["equity"] == 10.0

    def test_render_dispatch(self, exporter, mixed_trades):
        report = build_report(mixed_trades)
        assert exporter.render(report, "json").startswith("{")
        assert exporter.render(report, ExportFormat.CSV).startswith("=== PERFORMANCE SUMMARY ===")

    def test_render_unknown_format(self, exporter):
        with pytest.raises(ExportError, match="Unsupported export format"):
            exporter.render(build_report([]), "pdf")


class TestFilename:

    def test_dated_filename(self):
        assert export_filename("trade-log", on=date(2024, 5, 6)) == "trade-log-2024-05-06.csv"
        assert (
            export_filename("analytics-report", ExportFormat.JSON, on=date(2024, 5, 6))
            == "analytics-report-2024-05-06.json"
        )


def test_decimal_places_configurable(mixed_trades):
    text = AnalyticsExporter(decimal_places=4).report_csv(build_report(mixed_trades))
    summary = dict(_section(text, "PERFORMANCE SUMMARY")[1:])
    assert summary["Total P&L ($)"] == "50.0000"
