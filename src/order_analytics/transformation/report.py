"""
Report assembly for charts, tables and exports.
"""
import logging
from dataclasses import asdict

import pandas as pd

from order_analytics.records import OrderSummary, Report

logger = logging.getLogger(__name__)

TOP_ITEM_COLUMNS = ['item_id', 'name', 'quantity', 'revenue', 'avg_price']
MONTHLY_COLUMNS = ['label', 'year', 'month', 'amount']
CUSTOMER_COLUMNS = ['customer_id', 'name', 'orders', 'amount']


def assemble_report(rows):
    """
    Combine ranked summary rows with their totals and the leading item.

    An empty ranking yields zero totals and no top item.
    """
    rows = list(rows)
    report = Report(
        rows=rows,
        total_quantity=sum(row.quantity for row in rows),
        total_revenue=float(sum(row.revenue for row in rows)),
        top_item=rows[0] if rows else None,
    )

    if report.top_item is None:
        logger.info("No qualifying orders, report is empty")
    else:
        logger.info(
            f"Report covers {report.total_quantity} items sold, "
            f"revenue {report.total_revenue:.2f}, top item '{report.top_item.name}'"
        )
    return report


def summarize_orders(orders):
    """
    Total orders, paid orders and revenue over an order listing.
    """
    orders = list(orders)
    return OrderSummary(
        total_orders=len(orders),
        paid_orders=sum(1 for order in orders if order.payment),
        revenue=float(sum(order.amount for order in orders)),
    )


def _frame(records, columns):
    return pd.DataFrame([asdict(record) for record in records], columns=columns)


def report_tables(report, monthly=None, customers=None):
    """
    Convert a report and its roll-ups to DataFrames keyed by table name.
    """
    top_item = report.top_item
    summary_df = pd.DataFrame([{
        'total_quantity': report.total_quantity,
        'total_revenue': report.total_revenue,
        'top_item_id': top_item.item_id if top_item else None,
        'top_item_name': top_item.name if top_item else None,
    }])

    return {
        'top_items': _frame(report.rows, TOP_ITEM_COLUMNS),
        'report_summary': summary_df,
        'monthly_revenue': _frame(monthly or [], MONTHLY_COLUMNS),
        'top_customers': _frame(customers or [], CUSTOMER_COLUMNS),
    }
