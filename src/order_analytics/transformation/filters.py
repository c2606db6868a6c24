"""
Order filtering for the analytics pipeline.
"""
import logging
from datetime import datetime, timezone

import pandas as pd

from order_analytics.exceptions import InvalidFilterKind

logger = logging.getLogger(__name__)

# Window selector -> lookback from "now". Calendar offsets clamp the day of month.
TIME_WINDOWS = {
    'all': None,
    'last-7-days': pd.Timedelta(days=7),
    'last-month': pd.DateOffset(months=1),
    'last-year': pd.DateOffset(years=1),
}

PAYMENT_LABELS = {'paid': True, 'unpaid': False}


def _to_utc(value):
    """Naive timestamps are taken to be UTC."""
    ts = pd.Timestamp(value)
    if ts.tzinfo is None:
        return ts.tz_localize('UTC')
    return ts.tz_convert('UTC')


def get_cutoff(window, now=None):
    """
    Return the (cutoff, now) pair for a window selector, or None for 'all'.
    """
    if window not in TIME_WINDOWS:
        raise InvalidFilterKind(window, TIME_WINDOWS)

    if TIME_WINDOWS[window] is None:
        return None

    now = _to_utc(now if now is not None else datetime.now(timezone.utc))
    return now - TIME_WINDOWS[window], now


def filter_by_time_window(orders, window='all', now=None):
    """
    Keep orders placed within [now - window, now].

    `now` defaults to the current UTC time; pass it explicitly for repeatable
    results.
    """
    bounds = get_cutoff(window, now)
    if bounds is None:
        return list(orders)

    cutoff, now = bounds
    filtered = [
        order for order in orders
        if cutoff <= _to_utc(order.placed_at) <= now
    ]

    logger.info(f"Time window '{window}' kept {len(filtered)} orders placed since {cutoff}")
    return filtered


def filter_paid_orders(orders):
    """
    Keep only orders whose payment has completed.

    Only boolean flags (including numpy booleans) count; truthy strings or
    numbers do not mark an order as paid.
    """
    return [
        order for order in orders
        if pd.api.types.is_bool(order.payment) and bool(order.payment)
    ]


def _search_values(order):
    values = [order.order_id, order.customer_id, order.status, order.amount]
    values.append('true' if order.payment else 'false')
    values.extend((order.address or {}).values())
    return [str(value).lower() for value in values if value is not None]


def filter_orders(orders, search=None, date_range=None, statuses=None, payment=None):
    """
    Apply the order table filters: free-text search, an exclusive date range,
    status membership and payment membership ('paid' / 'unpaid').
    """
    filtered = list(orders)

    if search:
        needle = search.lower()
        filtered = [
            order for order in filtered
            if any(needle in value for value in _search_values(order))
        ]

    if date_range and len(date_range) == 2:
        start, end = _to_utc(date_range[0]), _to_utc(date_range[1])
        filtered = [
            order for order in filtered
            if start < _to_utc(order.placed_at) < end
        ]

    if statuses:
        filtered = [order for order in filtered if order.status in statuses]

    if payment:
        unknown = [label for label in payment if label not in PAYMENT_LABELS]
        if unknown:
            raise InvalidFilterKind(unknown[0], PAYMENT_LABELS)
        wanted = {PAYMENT_LABELS[label] for label in payment}
        filtered = [order for order in filtered if bool(order.payment) in wanted]

    logger.info(f"Order filters kept {len(filtered)} orders")
    return filtered
