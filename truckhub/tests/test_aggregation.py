"""
Aggregation engine unit tests - plain records, no database.
"""
import pytest
from datetime import date, datetime, timedelta
from types import SimpleNamespace

from truckhub.services.aggregation import (
    INVALID_ITEMS_TEXT,
    NO_ITEMS_TEXT,
    compute_daily_sales,
    compute_dashboard_stats,
    compute_low_stock,
    compute_protein_usage,
    compute_rating_distribution,
    compute_review_summary,
    format_order_items,
    round_half_away,
)

NOW = datetime(2026, 10, 19, 12, 30)
TODAY = NOW.date()


def order(status="completed", total=10.0, created_at=NOW):
    return SimpleNamespace(status=status, total_amount=total, created_at=created_at)


def review(rating, created_at=NOW):
    return SimpleNamespace(rating=rating, created_at=created_at)


def location(is_active):
    return SimpleNamespace(is_active=is_active)


def item(name, stock, threshold=None):
    return SimpleNamespace(name=name, current_stock=stock, low_stock_threshold=threshold)


def protein(allocated, stock, used=0):
    return SimpleNamespace(allocated_amount=allocated, current_stock=stock, used_amount=used)


# ===================== DASHBOARD STATS =====================


class TestDashboardStats:

    def test_only_completed_orders_count(self):
        stats = compute_dashboard_stats(
            [order("completed", 12.50), order("pending", 9.00)], [], []
        )
        assert stats.today_sales == 12.50
        assert stats.orders_today == 1

    def test_sales_match_completed_sum(self):
        orders = [
            order("completed", 5.25),
            order("cancelled", 100),
            order("completed", 7.75),
            order("preparing", 3),
            order("completed", 0),
        ]
        stats = compute_dashboard_stats(orders, [], [])
        assert stats.today_sales == sum(o.total_amount for o in orders if o.status == "completed")
        assert stats.orders_today == 3

    def test_day_filter_restricts_to_calendar_date(self):
        orders = [
            order("completed", 10, NOW),
            order("completed", 20, NOW - timedelta(days=1)),
            order("completed", 30, datetime(2026, 10, 19, 0, 0)),
            order("pending", 40, NOW),
        ]
        stats = compute_dashboard_stats(orders, [], [], day=TODAY)
        assert stats.today_sales == 40
        assert stats.orders_today == 2

    def test_day_filter_skips_orders_without_timestamp(self):
        stats = compute_dashboard_stats([order(created_at=None)], [], [], day=TODAY)
        assert stats.orders_today == 0

    def test_average_rating_rounded(self):
        stats = compute_dashboard_stats([], [review(5), review(4), review(5)], [])
        assert stats.average_rating == 4.7

    def test_average_rating_no_reviews(self):
        stats = compute_dashboard_stats([], [], [])
        assert stats.average_rating == 0

    def test_active_locations(self):
        stats = compute_dashboard_stats([], [], [location(True), location(False), location(True)])
        assert stats.active_locations == 2

    def test_inputs_not_mutated(self):
        orders = [order("pending"), order("completed")]
        snapshot = [vars(o).copy() for o in orders]
        compute_dashboard_stats(orders, [], [], day=TODAY)
        assert [vars(o) for o in orders] == snapshot


class TestRounding:

    @pytest.mark.parametrize("value, expected", [
        (4.25, 4.3),
        (4.666666, 4.7),
        (3.04, 3.0),
        (-2.25, -2.3),
        (0, 0),
    ])
    def test_round_half_away(self, value, expected):
        assert round_half_away(value) == expected

    @pytest.mark.parametrize("value", [1.0, 2.45, 3.333333, 4.75, 4.95])
    def test_idempotent(self, value):
        once = round_half_away(value)
        assert round_half_away(once) == once


# ===================== LOW STOCK =====================


class TestLowStock:

    def test_threshold_inclusive(self):
        items = [item("a", 5, 5), item("b", 6, 5), item("c", 4, 5)]
        assert [i.name for i in compute_low_stock(items)] == ["a", "c"]

    def test_no_threshold_never_flagged(self):
        items = [item("a", 0), item("b", -1, None)]
        assert compute_low_stock(items) == []

    def test_zero_threshold(self):
        assert [i.name for i in compute_low_stock([item("a", 0, 0)])] == ["a"]

    def test_preserves_input_order(self):
        items = [item("z", 1, 2), item("a", 1, 2), item("m", 1, 2)]
        assert [i.name for i in compute_low_stock(items)] == ["z", "a", "m"]


# ===================== PROTEIN USAGE =====================


class TestProteinUsage:

    def test_low_when_under_twenty_percent(self):
        usage = compute_protein_usage(protein(50, 8))
        assert usage.is_low is True

    def test_not_low_at_exactly_twenty_percent(self):
        assert compute_protein_usage(protein(50, 10)).is_low is False

    def test_usage_percentage(self):
        assert compute_protein_usage(protein(40, 30, 10)).usage_percentage == 25.0

    def test_zero_allocation(self):
        usage = compute_protein_usage(protein(0, 0, 5))
        assert usage.usage_percentage == 0
        assert usage.is_low is False

    def test_is_low_independent_of_usage(self):
        usage = compute_protein_usage(protein(100, 5, 0))
        assert usage.usage_percentage == 0
        assert usage.is_low is True


# ===================== RATINGS =====================


class TestRatingDistribution:

    def test_buckets_cover_five_to_one(self):
        dist = compute_rating_distribution([review(5), review(3)])
        assert list(dist) == [5, 4, 3, 2, 1]

    def test_counts_and_percentages(self):
        reviews = [review(5), review(5), review(4), review(1)]
        dist = compute_rating_distribution(reviews)
        assert dist[5].count == 2
        assert dist[5].percentage == 50.0
        assert dist[2].count == 0
        assert sum(b.percentage for b in dist.values()) == pytest.approx(100)

    def test_empty(self):
        dist = compute_rating_distribution([])
        assert all(b.count == 0 and b.percentage == 0 for b in dist.values())

    def test_review_summary(self):
        reviews = [review(3, NOW - timedelta(days=2)), review(5, NOW), review(4, NOW - timedelta(days=1))]
        summary = compute_review_summary(reviews, recent=2)
        assert summary["average_rating"] == 4.0
        assert summary["total_reviews"] == 3
        assert [r.rating for r in summary["recent_reviews"]] == [5, 4]


# ===================== SALES SERIES =====================


class TestDailySales:

    def test_one_point_per_day_oldest_first(self):
        orders = [
            order("completed", 10, NOW),
            order("completed", 5, NOW),
            order("completed", 8, NOW - timedelta(days=6)),
            order("completed", 99, NOW - timedelta(days=7)),
            order("pending", 50, NOW),
        ]
        series = compute_daily_sales(orders, 7, TODAY)
        assert [p.day for p in series] == [TODAY - timedelta(days=d) for d in range(6, -1, -1)]
        assert series[0].sales == 8
        assert series[-1].sales == 15
        assert series[-1].orders == 2
        assert sum(p.sales for p in series) == 23

    def test_accepts_plain_dates(self):
        series = compute_daily_sales([order(created_at=date(2026, 10, 18))], 2, TODAY)
        assert [p.orders for p in series] == [1, 0]


# ===================== ORDER ITEMS =====================


class TestFormatOrderItems:

    def test_parsed_list(self):
        items = [{"name": "Taco", "quantity": 2}, {"name": "Horchata", "quantity": 1}]
        assert format_order_items(items) == "2x Taco, 1x Horchata"

    def test_encoded_json(self):
        assert format_order_items('[{"name": "Burrito", "quantity": 3}]') == "3x Burrito"

    def test_invalid_json(self):
        assert format_order_items("not json") == INVALID_ITEMS_TEXT

    def test_not_a_sequence(self):
        assert format_order_items('{"name": "Taco"}') == NO_ITEMS_TEXT
        assert format_order_items({"name": "Taco"}) == NO_ITEMS_TEXT
        assert format_order_items(None) == NO_ITEMS_TEXT

    def test_empty_list(self):
        assert format_order_items([]) == ""

    def test_object_lines(self):
        line = SimpleNamespace(name="Bowl", quantity=1)
        assert format_order_items([line]) == "1x Bowl"
