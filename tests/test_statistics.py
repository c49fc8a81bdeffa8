"""Tests for sales statistics."""

from datetime import date, timedelta

import pytest

from conftest import make_order
from order_dashboard.models import OrderItem, OrderStatus
from order_dashboard.statistics import (
    DEFAULT_REVENUE_POLICY,
    DateRange,
    Granularity,
    RevenuePolicy,
    average_order_value,
    date_range_filter,
    popular_items,
    summarize,
    time_bucketed,
    total_revenue,
    unique_customers,
)


@pytest.fixture
def scenario_orders():
    return [
        make_order("A", status=OrderStatus.COMPLETED, total=100, phone="0900000001"),
        make_order("B", status=OrderStatus.COMPLETED, total=50, phone="0900000001"),
        make_order("C", status=OrderStatus.PENDING, total=200, phone="0900000002"),
    ]


def test_default_policy_is_completed_only():
    assert DEFAULT_REVENUE_POLICY is RevenuePolicy.COMPLETED_ONLY


class TestCompletedOnly:
    def test_scenario(self, scenario_orders):
        policy = RevenuePolicy.COMPLETED_ONLY
        assert total_revenue(scenario_orders, policy) == 150
        assert unique_customers(scenario_orders, policy) == 1
        assert average_order_value(scenario_orders, policy) == 75

    def test_summary_matches_individual_metrics(self, scenario_orders):
        summary = summarize(scenario_orders, RevenuePolicy.COMPLETED_ONLY)
        assert summary.total_revenue == 150
        assert summary.order_count == 2
        assert summary.average_order_value == 75
        assert summary.unique_customers == 1

    def test_empty_inputs_are_zero(self):
        assert total_revenue([]) == 0
        assert unique_customers([]) == 0
        assert average_order_value([]) == 0

    def test_no_eligible_orders_average_is_zero(self):
        orders = [make_order("A", status=OrderStatus.PENDING, total=80)]
        assert average_order_value(orders, RevenuePolicy.COMPLETED_ONLY) == 0
        assert summarize(orders, RevenuePolicy.COMPLETED_ONLY).average_order_value == 0


class TestExcludeCancelled:
    def test_counts_everything_but_cancelled(self, scenario_orders):
        orders = scenario_orders + [make_order("D", status=OrderStatus.CANCELLED, total=999, phone="0900000003")]
        policy = RevenuePolicy.EXCLUDE_CANCELLED

        assert total_revenue(orders, policy) == 350
        assert unique_customers(orders, policy) == 2
        assert average_order_value(orders, policy) == pytest.approx(350 / 3)

    def test_policies_disagree_on_same_data(self, scenario_orders):
        assert total_revenue(scenario_orders, RevenuePolicy.COMPLETED_ONLY) != total_revenue(
            scenario_orders, RevenuePolicy.EXCLUDE_CANCELLED
        )


class TestPopularItems:
    def test_ranked_by_quantity_with_revenue(self):
        orders = [
            make_order(
                "A",
                status=OrderStatus.COMPLETED,
                items=[OrderItem("滷肉飯", 35, 2, "🍚"), OrderItem("雞肉飯", 40, 1, "🍗")],
            ),
            make_order("B", status=OrderStatus.COMPLETED, items=[OrderItem("雞肉飯", 40, 4, "🍗")]),
        ]

        ranked = popular_items(orders)

        assert [(p.name, p.quantity, p.revenue) for p in ranked] == [("雞肉飯", 5, 200), ("滷肉飯", 2, 70)]
        assert ranked[0].icon == "🍗"

    def test_ties_keep_first_seen_order(self):
        orders = [
            make_order(
                "A",
                status=OrderStatus.COMPLETED,
                items=[OrderItem("肉圓", 45, 2), OrderItem("甜不辣", 40, 2), OrderItem("臭豆腐", 55, 2)],
            ),
        ]
        assert [p.name for p in popular_items(orders)] == ["肉圓", "甜不辣", "臭豆腐"]

    def test_quantities_are_conserved(self):
        orders = [
            make_order("A", status=OrderStatus.COMPLETED, items=[OrderItem("a", 1, 3), OrderItem("b", 2, 1)]),
            make_order("B", status=OrderStatus.COMPLETED, items=[OrderItem("b", 2, 2), OrderItem("c", 5, 7)]),
            make_order("C", status=OrderStatus.PENDING, items=[OrderItem("a", 1, 100)]),
        ]
        expected = sum(i.quantity for o in orders if o.status is OrderStatus.COMPLETED for i in o.items)

        assert sum(p.quantity for p in popular_items(orders)) == expected

    def test_limit(self):
        orders = [
            make_order("A", status=OrderStatus.COMPLETED, items=[OrderItem("a", 1, 3), OrderItem("b", 1, 2)]),
        ]
        assert [p.name for p in popular_items(orders, limit=1)] == ["a"]

    def test_ineligible_orders_ignored(self):
        orders = [make_order("A", status=OrderStatus.CANCELLED)]
        assert popular_items(orders) == []


class TestTimeBucketed:
    @pytest.fixture
    def orders(self):
        return [
            make_order("A", status=OrderStatus.COMPLETED, total=100, phone="1", created_at="2024-06-15T09:00:00"),
            make_order("B", status=OrderStatus.COMPLETED, total=50, phone="1", created_at="2024-06-15T20:00:00"),
            make_order("C", status=OrderStatus.COMPLETED, total=30, phone="2", created_at="2024-06-13T12:00:00"),
            make_order("D", status=OrderStatus.COMPLETED, total=70, phone="3", created_at="2024-05-02T12:00:00"),
            make_order("E", status=OrderStatus.PENDING, total=500, phone="4", created_at="2024-06-14T12:00:00"),
            make_order("F", status=OrderStatus.COMPLETED, total=10, phone="5", created_at="bad"),
        ]

    def test_daily_buckets_are_sparse_and_sorted(self, orders):
        buckets = time_bucketed(orders, Granularity.DAY, RevenuePolicy.COMPLETED_ONLY)

        assert [b.label for b in buckets] == ["2024-05-02", "2024-06-13", "2024-06-15"]
        last = buckets[-1]
        assert last.start == date(2024, 6, 15)
        assert (last.revenue, last.order_count, last.customer_count) == (150, 2, 1)

    def test_monthly_buckets(self, orders):
        buckets = time_bucketed(orders, "month", RevenuePolicy.COMPLETED_ONLY)

        assert [(b.label, b.revenue, b.order_count, b.customer_count) for b in buckets] == [
            ("2024-05", 70, 1, 1),
            ("2024-06", 180, 3, 2),
        ]

    def test_local_calendar_day(self):
        # Late-evening local orders stay on their local day.
        orders = [make_order("A", status=OrderStatus.COMPLETED, created_at="2024-06-15T23:30:00")]
        assert time_bucketed(orders, Granularity.DAY)[0].start == date(2024, 6, 15)


class TestDateRangeFilter:
    def _at(self, when):
        return make_order(when.isoformat(), created_at=when.isoformat())

    def test_today_includes_recent_excludes_yesterday(self, now):
        recent = self._at(now - timedelta(minutes=1))
        old = self._at(now - timedelta(hours=25))

        selected = date_range_filter([recent, old], DateRange.today(), now=now)

        assert selected == [recent]

    def test_today_ends_at_now(self, now):
        later_today = self._at(now + timedelta(hours=1))
        assert date_range_filter([later_today], DateRange.today(), now=now) == []

    def test_this_month(self, now):
        first = self._at(now.replace(day=1, hour=0, minute=0))
        last_month = self._at(now.replace(day=1, hour=0, minute=0) - timedelta(seconds=1))

        assert date_range_filter([first, last_month], DateRange.this_month(), now=now) == [first]

    def test_this_year(self, now):
        january = self._at(now.replace(month=1, day=2))
        last_year = self._at(now.replace(year=now.year - 1))

        assert date_range_filter([january, last_year], DateRange.this_year(), now=now) == [january]

    def test_custom_month_covers_whole_month(self, now):
        orders = [
            make_order("start", created_at="2024-02-01T00:00:00"),
            make_order("end", created_at="2024-02-29T23:59:59"),
            make_order("after", created_at="2024-03-01T00:00:00"),
            make_order("before", created_at="2024-01-31T23:59:59"),
            make_order("undated", created_at=""),
        ]

        selected = date_range_filter(orders, DateRange.custom_month(2024, 2), now=now)

        assert [o.order_id for o in selected] == ["start", "end"]

    def test_invalid_month(self):
        with pytest.raises(ValueError):
            DateRange.custom_month(2024, 13)

    def test_labels(self):
        assert DateRange.today().label == "今日"
        assert DateRange.custom_month(2024, 3).label == "2024-03"
