"""
Data quality checks for the analytics pipeline.
"""
import logging
import math
import numbers

import pandas as pd

from order_analytics.transformation.joins import check_for_missing_relationships

logger = logging.getLogger(__name__)


def run_data_quality_checks(orders, food_catalog, delivery_fee=0.0):
    """
    Run the quality checks on the fetched data and log a summary.

    Checks only report problems; nothing is fixed or dropped here.
    """
    logger.info("Running data quality checks")

    quality_results = {
        'line_items': check_line_items(orders),
        'relationships': check_for_missing_relationships(orders, food_catalog),
    }

    discrepancies_df = verify_totals(orders, delivery_fee=delivery_fee)
    quality_results['total_discrepancies'] = {
        'count': len(discrepancies_df),
        'orders': discrepancies_df['order_id'].head(10).tolist(),
    }

    total_issues = (
        sum(quality_results['line_items'].values())
        + quality_results['relationships']['unknown_items_count']
        + quality_results['total_discrepancies']['count']
    )
    quality_results['total_issues'] = total_issues

    if total_issues > 0:
        logger.warning(f"Found a total of {total_issues} data quality issues")
    else:
        logger.info("All data quality checks passed")

    return quality_results


def check_line_items(orders):
    """
    Count line items without an identifier, without a usable price, or with a
    non-positive quantity.
    """
    results = {
        'missing_item_id': 0,
        'invalid_price': 0,
        'non_positive_quantity': 0,
    }

    for order in orders:
        for item in order.items:
            if item.item_id is None or item.item_id == '':
                results['missing_item_id'] += 1

            price = item.unit_price
            if not isinstance(price, numbers.Real) or isinstance(price, bool) or math.isnan(price):
                results['invalid_price'] += 1

            quantity = item.quantity
            if isinstance(quantity, numbers.Real) and quantity <= 0:
                results['non_positive_quantity'] += 1

    for check, count in results.items():
        if count > 0:
            logger.warning(f"Line item check '{check}' failed for {count} items")

    return results


def verify_totals(orders, tolerance=0.01, delivery_fee=0.0):
    """
    Verify that order amounts match the sum of their line item subtotals plus
    any flat delivery fee.

    Returns a DataFrame of the orders that differ by more than `tolerance`.
    """
    logger.info("Verifying order total amounts")

    columns = ['order_id', 'amount', 'calculated_total', 'difference']
    rows = []
    for order in orders:
        try:
            calculated = sum(
                item.unit_price * (item.quantity if item.quantity and item.quantity > 0 else 1)
                for item in order.items
            )
        except TypeError:
            # Items without numeric prices are reported by check_line_items
            continue
        rows.append((order.order_id, order.amount, calculated + delivery_fee))

    if not rows:
        return pd.DataFrame(columns=columns)

    totals_df = pd.DataFrame(rows, columns=columns[:3])
    totals_df['difference'] = (totals_df['amount'] - totals_df['calculated_total']).abs()

    # Greater than tolerance to allow for float precision
    discrepancies = totals_df[totals_df['difference'] > tolerance].reset_index(drop=True)

    if len(discrepancies) > 0:
        logger.warning(f"Found {len(discrepancies)} orders with total amount discrepancies")
    else:
        logger.info("All order total amounts match calculated totals")

    return discrepancies[columns]
