"""
Joining orders with the food catalog.
"""
import logging
from dataclasses import replace

from order_analytics.transformation.calculations import UNKNOWN_ITEM

logger = logging.getLogger(__name__)


def resolve_line_items(orders, food_catalog):
    """
    Fill in line item names and prices missing from the order payload using
    the food catalog. Returns new orders; the inputs are left untouched.

    Prices that cannot be resolved stay empty so aggregation rejects them.
    """
    logger.info("Resolving line items against the food catalog")

    catalog = {food.item_id: food for food in food_catalog}
    resolved_orders = []
    unknown_count = 0

    for order in orders:
        items = []
        for item in order.items:
            food = catalog.get(item.item_id)
            name, unit_price = item.name, item.unit_price

            if name is None:
                if food is not None:
                    name = food.name
                else:
                    name = UNKNOWN_ITEM
                    unknown_count += 1
            if unit_price is None and food is not None:
                unit_price = food.price

            items.append(replace(item, name=name, unit_price=unit_price))
        resolved_orders.append(replace(order, items=items))

    if unknown_count > 0:
        logger.warning(f"Found {unknown_count} line items with unknown food items")

    return resolved_orders


def check_for_missing_relationships(orders, food_catalog):
    """
    Check for line items referencing unknown food items and for catalog
    entries that have never been ordered.
    """
    item_ids_in_menu = {food.item_id for food in food_catalog}
    item_ids_in_orders = {
        item.item_id for order in orders for item in order.items
        if item.item_id is not None
    }
    orders_with_no_items = [order.order_id for order in orders if not order.items]

    unknown_items = item_ids_in_orders - item_ids_in_menu
    unused_menu_items = item_ids_in_menu - item_ids_in_orders

    results = {
        'unknown_items_count': len(unknown_items),
        'unknown_items': sorted(unknown_items, key=str)[:10],  # First 10 for logging
        'orders_with_no_items_count': len(orders_with_no_items),
        'orders_with_no_items': orders_with_no_items[:10],
        'unused_menu_items_count': len(unused_menu_items),
        'unused_menu_items': sorted(unused_menu_items, key=str)[:10],
    }

    if results['unknown_items_count'] > 0:
        logger.warning(f"Found {results['unknown_items_count']} ordered items missing from the catalog")

    if results['orders_with_no_items_count'] > 0:
        logger.warning(f"Found {results['orders_with_no_items_count']} orders with no items")

    if results['unused_menu_items_count'] > 0:
        logger.info(f"Found {results['unused_menu_items_count']} menu items that have never been ordered")

    return results
