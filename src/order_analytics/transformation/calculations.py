"""
Business metrics calculations for the analytics pipeline.
"""
import logging
import math
import numbers

import pandas as pd

from order_analytics.exceptions import MalformedLineItem
from order_analytics.records import (
    ORDER_STATUSES,
    CustomerSummary,
    MonthlyRevenue,
    SummaryRow,
)
from order_analytics.transformation.filters import filter_paid_orders

logger = logging.getLogger(__name__)

UNKNOWN_ITEM = 'Unknown Item'
UNKNOWN_CUSTOMER = 'Unknown'


def _is_number(value):
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _plain(value):
    """Convert a numpy scalar to int when whole, float otherwise."""
    value = float(value)
    return int(value) if value.is_integer() else value


def _effective_quantity(order, index, quantity):
    # Missing, zero or negative quantities count as one unit.
    if quantity is None:
        return 1
    if not _is_number(quantity):
        raise MalformedLineItem(order.order_id, index, f"quantity {quantity!r} is not numeric")
    if math.isnan(quantity) or quantity <= 0:
        return 1
    return quantity


def _is_missing_id(item_id):
    if item_id is None or item_id == '':
        return True
    return pd.api.types.is_scalar(item_id) and bool(pd.isna(item_id))


def _line_item_records(orders):
    records = []
    for order in orders:
        for index, item in enumerate(order.items or []):
            if _is_missing_id(item.item_id):
                raise MalformedLineItem(order.order_id, index, "missing item identifier")
            if not _is_number(item.unit_price) or math.isnan(item.unit_price):
                raise MalformedLineItem(
                    order.order_id, index, f"unit price {item.unit_price!r} is not numeric"
                )

            quantity = _effective_quantity(order, index, item.quantity)
            records.append({
                'item_id': item.item_id,
                'name': item.name if item.name is not None else UNKNOWN_ITEM,
                'quantity': quantity,
                'revenue': item.unit_price * quantity,
            })
    return records


def aggregate_popularity(orders, top_n=0):
    """
    Rank food items by quantity sold across the given orders.

    Items are grouped by identifier; the first name seen for an identifier is
    kept. Rows are sorted by quantity descending and ties keep the order in
    which items first appeared. A positive `top_n` truncates the ranking.
    Callers are expected to pass orders that are already paid and
    time-filtered.
    """
    logger.info("Aggregating food item popularity")

    records = _line_item_records(orders)
    if not records:
        logger.info("No line items to aggregate")
        return []

    line_items_df = pd.DataFrame.from_records(records)

    # sort=False keeps groups in order of first appearance
    popularity_df = line_items_df.groupby('item_id', sort=False, dropna=False).agg(
        name=('name', 'first'),
        quantity=('quantity', 'sum'),
        revenue=('revenue', 'sum'),
    ).reset_index()

    popularity_df = popularity_df.sort_values('quantity', ascending=False, kind='stable')

    if top_n is not None and top_n > 0:
        popularity_df = popularity_df.head(top_n)

    rows = []
    for row in popularity_df.itertuples(index=False):
        quantity = _plain(row.quantity)
        revenue = float(row.revenue)
        rows.append(SummaryRow(
            item_id=row.item_id,
            name=row.name,
            quantity=quantity,
            revenue=revenue,
            avg_price=revenue / quantity if quantity else 0.0,
        ))

    logger.info(f"Ranked {len(rows)} food items from {len(records)} line items")
    return rows


def monthly_revenue(orders):
    """
    Sum order amounts per calendar month, oldest month first.

    The month is taken from each order's own timestamp.
    """
    logger.info("Calculating monthly revenue")

    orders = list(orders)
    if not orders:
        return []

    orders_df = pd.DataFrame({
        'year': [order.placed_at.year for order in orders],
        'month': [order.placed_at.month for order in orders],
        'amount': [order.amount for order in orders],
    })

    monthly_df = orders_df.groupby(['year', 'month'], sort=True)['amount'].sum().reset_index()

    months = [
        MonthlyRevenue(
            label=pd.Timestamp(year=int(row.year), month=int(row.month), day=1).strftime('%b %Y'),
            year=int(row.year),
            month=int(row.month),
            amount=float(row.amount),
        )
        for row in monthly_df.itertuples(index=False)
    ]

    logger.info(f"Calculated revenue for {len(months)} months")
    return months


def customer_rollup(orders, directory=None, limit=5):
    """
    Count orders and spend per customer, busiest customers first.

    Names are resolved through `directory` (customer id -> name); customers
    missing from it are reported as 'Unknown'.
    """
    logger.info("Calculating top customers")

    orders = list(orders)
    if not orders:
        return []

    directory = directory or {}
    orders_df = pd.DataFrame({
        'customer_id': [order.customer_id for order in orders],
        'amount': [order.amount for order in orders],
    })

    customers_df = orders_df.groupby('customer_id', sort=False, dropna=False).agg(
        orders=('amount', 'size'),
        amount=('amount', 'sum'),
    ).reset_index()

    customers_df = customers_df.sort_values('orders', ascending=False, kind='stable')

    if limit is not None and limit > 0:
        customers_df = customers_df.head(limit)

    customers = []
    for row in customers_df.itertuples(index=False):
        customer_id = None if pd.isna(row.customer_id) else row.customer_id
        customers.append(CustomerSummary(
            customer_id=customer_id,
            name=directory.get(customer_id, UNKNOWN_CUSTOMER),
            orders=int(row.orders),
            amount=float(row.amount),
        ))

    missing = [c.customer_id for c in customers if c.name == UNKNOWN_CUSTOMER]
    if missing:
        logger.warning(f"Found {len(missing)} customers missing from the directory")

    return customers


def status_distribution(orders):
    """
    Count orders per fulfillment stage, in stage order.
    """
    counts = pd.Series([order.status for order in orders], dtype=object).value_counts()
    return [
        {'name': status, 'value': int(counts.get(status, 0))}
        for status in ORDER_STATUSES
    ]


def payment_distribution(orders):
    """
    Count paid and unpaid orders.
    """
    orders = list(orders)
    paid = len(filter_paid_orders(orders))
    return [
        {'name': 'Paid', 'value': paid},
        {'name': 'Unpaid', 'value': len(orders) - paid},
    ]
