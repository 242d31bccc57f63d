"""Tests for equity curve, monthly, weekday and calendar aggregation."""

import pytest
from datetime import date, datetime, timedelta, timezone

from .conftest import loss, make_trade, open_trade, win
from trade_journal.journal.time_series import (
    DAY_NAMES,
    daily_pnl_calendar,
    day_of_week_performance,
    equity_curve,
    monthly_performance,
)


class TestEquityCurve:

    def test_sorted_by_exit_date_not_input_order(self):
        trades = [
            win(100, exit_date=datetime(2024, 1, 5)),
            make_trade(status="loss", profit_loss=-50, exit_date=datetime(2024, 1, 1)),
        ]
        points = [(p.date, p.equity) for p in equity_curve(trades)]
        assert points == [(date(2024, 1, 1), -50.0), (date(2024, 1, 5), 50.0)]

    def test_restartable(self):
        curve = equity_curve([win(10), win(20)])
        first = [p.equity for p in curve]
        second = [p.equity for p in curve]
        assert first == second == [10.0, 30.0]
        assert len(curve) == 2

    def test_is_lazy_iterator(self):
        curve = equity_curve([win(10)])
        it = iter(curve)
        assert next(it).equity == 10.0
        with pytest.raises(StopIteration):
            next(it)

    def test_ties_keep_input_order(self):
        same = datetime(2024, 2, 1, 12)
        a = win(10, id="a", exit_date=same)
        b = loss(5, id="b", exit_date=same)
        assert [p.trade_id for p in equity_curve([a, b])] == ["a", "b"]
        assert [p.trade_id for p in equity_curve([b, a])] == ["b", "a"]

    def test_excludes_open_and_undated(self):
        trades = [
            open_trade(reward_amount=999),
            make_trade(status="win", reward_amount=7, exit_date=None),
            win(3),
        ]
        assert [p.equity for p in equity_curve(trades)] == [3.0]

    def test_mixed_naive_and_aware_timestamps(self):
        trades = [
            win(1, exit_date=datetime(2024, 1, 2, tzinfo=timezone.utc)),
            win(2, exit_date=datetime(2024, 1, 1)),
        ]
        assert [p.equity for p in equity_curve(trades)] == [2.0, 3.0]

    def test_drawdown_and_peak(self):
        base = datetime(2024, 1, 1)
        trades = [
            win(100, exit_date=base),
            loss(150, exit_date=base + timedelta(days=1)),
            win(20, exit_date=base + timedelta(days=2)),
        ]
        curve = equity_curve(trades)
        assert curve.peak_equity == pytest.approx(100.0)
        assert curve.max_drawdown == pytest.approx(150.0)
        assert curve.final_equity == pytest.approx(-30.0)

    def test_initial_loss_is_drawdown(self):
        assert equity_curve([loss(40)]).max_drawdown == pytest.approx(40.0)

    def test_empty_curve(self):
        curve = equity_curve([])
        assert list(curve) == []
        assert curve.max_drawdown == 0.0
        assert curve.peak_equity == 0.0
        assert curve.to_list() == []


class TestMonthlyPerformance:

    def test_buckets_sorted_ascending(self):
        trades = [
            win(50, exit_date=datetime(2024, 3, 10)),
            loss(20, exit_date=datetime(2024, 1, 31)),
            win(30, exit_date=datetime(2024, 1, 2)),
        ]
        months = monthly_performance(trades)
        assert [m.month for m in months] == ["2024-01", "2024-03"]
        jan = months[0]
        assert jan.label == "Jan 2024"
        assert jan.trades == 2
        assert jan.wins == 1
        assert jan.profit == pytest.approx(10.0)
        assert jan.win_rate == pytest.approx(50.0)

    def test_year_boundary_ordering(self):
        trades = [
            win(1, exit_date=datetime(2024, 1, 1)),
            win(1, exit_date=datetime(2023, 12, 31)),
        ]
        assert [m.month for m in monthly_performance(trades)] == ["2023-12", "2024-01"]

    def test_open_trades_excluded(self):
        assert monthly_performance([open_trade(reward_amount=5)]) == []


class TestDayOfWeek:

    def test_empty_has_seven_zero_days(self):
        days = day_of_week_performance([])
        assert len(days) == 7
        assert [d.day for d in days] == list(DAY_NAMES)
        for d in days:
            assert d.trades == 0
            assert d.win_rate == 0.0
            assert d.profit == 0.0

    def test_sunday_is_index_zero(self):
        sunday = datetime(2024, 1, 7, 10)
        days = day_of_week_performance([win(10, entry_date=sunday)])
        assert days[0].day == "Sun"
        assert days[0].trades == 1
        assert days[0].win_rate == 100.0

    def test_includes_open_trades(self):
        monday = datetime(2024, 1, 1, 10)
        days = day_of_week_performance([
            open_trade(entry_date=monday),
            win(40, entry_date=monday),
        ])
        assert days[1].day == "Mon"
        assert days[1].trades == 2
        assert days[1].win_rate == pytest.approx(50.0)
        assert days[1].profit == pytest.approx(40.0)


class TestDailyCalendar:

    def test_keyed_by_exit_then_entry(self):
        trades = [
            win(10, entry_date=datetime(2024, 1, 1), exit_date=datetime(2024, 1, 3)),
            open_trade(entry_date=datetime(2024, 1, 2), profit_loss=-4),
        ]
        cal = daily_pnl_calendar(trades)
        assert [d.date for d in cal.days] == ["2024-01-02", "2024-01-03"]
        assert cal.total_pnl == pytest.approx(6.0)
        assert cal.total_trades == 2

    def test_month_filter(self):
        trades = [
            win(10, exit_date=datetime(2024, 1, 15)),
            win(20, exit_date=datetime(2024, 2, 1)),
            loss(5, exit_date=datetime(2024, 2, 1)),
        ]
        cal = daily_pnl_calendar(trades, month="2024-02")
        assert len(cal.days) == 1
        assert cal.days[0].trades == 2
        assert cal.days[0].pnl == pytest.approx(15.0)
        assert cal.to_dict()["month"] == "2024-02"
