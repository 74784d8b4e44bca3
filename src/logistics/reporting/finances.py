"""Financial rollup — revenue, cost and margin over settled orders.

Read-only. Revenue is what donors paid per line, cost is the product's
purchase price times quantity. Orders are bucketed by creation time.
"""

from dataclasses import asdict, dataclass
from datetime import UTC, datetime, timedelta

from logistics.directory.lookups import DirectoryLookups
from logistics.order.queries import settled_orders


@dataclass
class FinancialStats:
    revenue: float = 0.0
    cost: float = 0.0
    profit: float = 0.0
    margin_percent: float = 0.0
    order_count: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo else moment.replace(tzinfo=UTC)


def compute_stats(orders, start: datetime, end: datetime | None = None, lookups: DirectoryLookups | None = None):
    """Stats for orders created in ``[start, end)``."""
    lookups = lookups or DirectoryLookups()
    window = [
        order
        for order in orders
        if order.created_at
        and _aware(order.created_at) >= start
        and (end is None or _aware(order.created_at) < end)
    ]

    revenue = 0.0
    cost = 0.0
    purchase_prices: dict[str, float] = {}
    for order in window:
        for line in order.lines or []:
            product_id = str(line.product_id)
            if product_id not in purchase_prices:
                product = lookups.product(product_id)
                purchase_prices[product_id] = (product.purchase_price or 0.0) if product else 0.0
            revenue += line.unit_price * line.quantity
            cost += purchase_prices[product_id] * line.quantity

    profit = revenue - cost
    return FinancialStats(
        revenue=round(revenue, 2),
        cost=round(cost, 2),
        profit=round(profit, 2),
        margin_percent=round(profit / revenue * 100, 2) if revenue > 0 else 0.0,
        order_count=len(window),
    )


def _day_start(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _month_start(moment: datetime, months_back: int = 0) -> datetime:
    month_index = moment.year * 12 + (moment.month - 1) - months_back
    return _day_start(moment).replace(year=month_index // 12, month=month_index % 12 + 1, day=1)


def financial_summary(now: datetime | None = None, orders=None) -> dict:
    """Today, last seven days and month-to-date stats plus chart series."""
    now = _aware(now or datetime.now(UTC))
    orders = settled_orders() if orders is None else orders
    lookups = DirectoryLookups()

    daily = []
    for days_back in range(6, -1, -1):
        day = _day_start(now - timedelta(days=days_back))
        stats = compute_stats(orders, day, day + timedelta(days=1), lookups)
        daily.append({"date": day.date().isoformat(), **stats.to_dict()})

    weekly = []
    for weeks_back in range(3, -1, -1):
        week_end = now - timedelta(weeks=weeks_back)
        stats = compute_stats(orders, week_end - timedelta(weeks=1), week_end, lookups)
        weekly.append({"week_ending": week_end.date().isoformat(), **stats.to_dict()})

    monthly = []
    for months_back in range(11, -1, -1):
        month = _month_start(now, months_back)
        next_month = _month_start(now, months_back - 1)
        stats = compute_stats(orders, month, next_month, lookups)
        monthly.append({"month": month.strftime("%Y-%m"), **stats.to_dict()})

    return {
        "today": compute_stats(orders, _day_start(now), lookups=lookups).to_dict(),
        "week": compute_stats(orders, now - timedelta(days=7), lookups=lookups).to_dict(),
        "month": compute_stats(orders, _month_start(now), lookups=lookups).to_dict(),
        "daily": daily,
        "weekly": weekly,
        "monthly": monthly,
    }
