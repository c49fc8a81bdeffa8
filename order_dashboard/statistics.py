"""Sales statistics derived from an order list.

Every function here is a pure function of its input and recomputes from
scratch; nothing is cached or mutated.

Revenue eligibility is a named policy. ``COMPLETED_ONLY`` counts only
completed orders. ``EXCLUDE_CANCELLED`` counts every order that was not
cancelled. They give different numbers for the same data, so the product
default lives in ``config.REVENUE_POLICY`` and call sites only override it
explicitly.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Iterable

from order_dashboard.config import REVENUE_POLICY
from order_dashboard.models import Order, OrderStatus


class RevenuePolicy(str, Enum):
    COMPLETED_ONLY = "completed_only"
    EXCLUDE_CANCELLED = "exclude_cancelled"


DEFAULT_REVENUE_POLICY = RevenuePolicy(REVENUE_POLICY)


class Granularity(str, Enum):
    DAY = "day"
    MONTH = "month"


class RangeKind(str, Enum):
    TODAY = "today"
    THIS_MONTH = "this_month"
    THIS_YEAR = "this_year"
    MONTH = "month"


_RANGE_LABELS = {RangeKind.TODAY: "今日", RangeKind.THIS_MONTH: "本月", RangeKind.THIS_YEAR: "今年"}


def _local(value: datetime) -> datetime:
    # Resolve the UTC offset for the wall-clock time itself, not for "now".
    return value.replace(tzinfo=None).astimezone()


@dataclass(frozen=True)
class DateRange:
    """A named reporting window.

    The relative ranges run from the start of the current day, month or year
    up to "now" at call time. A custom month covers the whole calendar month.
    """

    kind: RangeKind
    year: int | None = None
    month: int | None = None

    @classmethod
    def today(cls) -> DateRange:
        return cls(RangeKind.TODAY)

    @classmethod
    def this_month(cls) -> DateRange:
        return cls(RangeKind.THIS_MONTH)

    @classmethod
    def this_year(cls) -> DateRange:
        return cls(RangeKind.THIS_YEAR)

    @classmethod
    def custom_month(cls, year: int, month: int) -> DateRange:
        if not (1 <= month <= 12):
            raise ValueError("month must be between 1 and 12")
        return cls(RangeKind.MONTH, year=year, month=month)

    @property
    def label(self) -> str:
        if self.kind is RangeKind.MONTH:
            return f"{self.year}-{self.month:02d}"
        return _RANGE_LABELS[self.kind]

    def bounds(self, now: datetime | None = None) -> tuple[datetime, datetime]:
        """Inclusive (start, end) in local time."""
        now = (now or datetime.now()).astimezone()
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        if self.kind is RangeKind.TODAY:
            return _local(midnight), now
        if self.kind is RangeKind.THIS_MONTH:
            return _local(midnight.replace(day=1)), now
        if self.kind is RangeKind.THIS_YEAR:
            return _local(midnight.replace(month=1, day=1)), now

        assert self.year is not None and self.month is not None
        last_day = calendar.monthrange(self.year, self.month)[1]
        start = midnight.replace(year=self.year, month=self.month, day=1)
        end = start.replace(day=last_day, hour=23, minute=59, second=59, microsecond=999999)
        return _local(start), _local(end)


@dataclass(frozen=True)
class PopularItem:
    name: str
    quantity: int
    revenue: float
    icon: str = ""


@dataclass(frozen=True)
class Bucket:
    """Aggregates for one day or month."""

    start: date
    label: str
    revenue: float
    order_count: int
    customer_count: int


@dataclass(frozen=True)
class SalesSummary:
    total_revenue: float
    order_count: int
    average_order_value: float
    unique_customers: int


def is_revenue_eligible(order: Order, policy: RevenuePolicy = DEFAULT_REVENUE_POLICY) -> bool:
    if policy is RevenuePolicy.COMPLETED_ONLY:
        return order.status is OrderStatus.COMPLETED
    return order.status is not OrderStatus.CANCELLED


def eligible_orders(orders: Iterable[Order], policy: RevenuePolicy = DEFAULT_REVENUE_POLICY) -> list[Order]:
    return [order for order in orders if is_revenue_eligible(order, policy)]


def total_revenue(orders: Iterable[Order], policy: RevenuePolicy = DEFAULT_REVENUE_POLICY) -> float:
    """Sum of backend totals over eligible orders."""
    return sum((order.total_amount for order in eligible_orders(orders, policy)), 0.0)


def unique_customers(orders: Iterable[Order], policy: RevenuePolicy = DEFAULT_REVENUE_POLICY) -> int:
    """Distinct customer phone numbers among eligible orders."""
    return len({order.customer_phone for order in eligible_orders(orders, policy) if order.customer_phone})


def average_order_value(orders: Iterable[Order], policy: RevenuePolicy = DEFAULT_REVENUE_POLICY) -> float:
    eligible = eligible_orders(orders, policy)
    if not eligible:
        return 0.0
    return total_revenue(eligible, policy) / len(eligible)


def summarize(orders: Iterable[Order], policy: RevenuePolicy = DEFAULT_REVENUE_POLICY) -> SalesSummary:
    eligible = eligible_orders(orders, policy)
    revenue = total_revenue(eligible, policy)
    return SalesSummary(
        total_revenue=revenue,
        order_count=len(eligible),
        average_order_value=revenue / len(eligible) if eligible else 0.0,
        unique_customers=unique_customers(eligible, policy),
    )


def popular_items(
    orders: Iterable[Order],
    limit: int | None = None,
    policy: RevenuePolicy = DEFAULT_REVENUE_POLICY,
) -> list[PopularItem]:
    """Items ranked by quantity sold; ties keep first-seen order."""
    quantities: dict[str, int] = {}
    revenues: dict[str, float] = {}
    icons: dict[str, str] = {}
    for order in eligible_orders(orders, policy):
        for item in order.items:
            quantities[item.name] = quantities.get(item.name, 0) + item.quantity
            revenues[item.name] = revenues.get(item.name, 0.0) + item.subtotal
            icons.setdefault(item.name, item.icon)

    # sorted() is stable, so equal quantities stay in insertion order.
    ranked = sorted(quantities, key=lambda name: quantities[name], reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return [PopularItem(name, quantities[name], revenues[name], icons[name]) for name in ranked]


def _bucket_start(created: datetime, granularity: Granularity) -> date:
    if granularity is Granularity.MONTH:
        return date(created.year, created.month, 1)
    return created.date()


def _bucket_label(start: date, granularity: Granularity) -> str:
    if granularity is Granularity.MONTH:
        return start.strftime("%Y-%m")
    return start.isoformat()


def time_bucketed(
    orders: Iterable[Order],
    granularity: Granularity | str = Granularity.DAY,
    policy: RevenuePolicy = DEFAULT_REVENUE_POLICY,
) -> list[Bucket]:
    """Eligible orders grouped by local creation day or month.

    Only buckets that contain orders are returned, oldest first.
    """
    granularity = Granularity(granularity)
    revenue: dict[date, float] = {}
    counts: dict[date, int] = {}
    customers: dict[date, set[str]] = {}
    for order in eligible_orders(orders, policy):
        created = order.created
        if created is None:
            continue
        key = _bucket_start(created, granularity)
        revenue[key] = revenue.get(key, 0.0) + order.total_amount
        counts[key] = counts.get(key, 0) + 1
        phones = customers.setdefault(key, set())
        if order.customer_phone:
            phones.add(order.customer_phone)

    return [
        Bucket(
            start=key,
            label=_bucket_label(key, granularity),
            revenue=revenue[key],
            order_count=counts[key],
            customer_count=len(customers[key]),
        )
        for key in sorted(counts)
    ]


def date_range_filter(orders: Iterable[Order], date_range: DateRange, now: datetime | None = None) -> list[Order]:
    """Orders created inside the range; undated orders are left out."""
    start, end = date_range.bounds(now)
    selected: list[Order] = []
    for order in orders:
        created = order.created
        if created is not None and start <= created <= end:
            selected.append(order)
    return selected
