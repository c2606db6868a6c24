"""
Shared fixtures for the order analytics tests.
"""
import itertools
from datetime import datetime, timedelta, timezone

import pytest

from order_analytics.records import FoodItem, LineItem, Order

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_order(now):
    """Factory building orders placed `days_ago` days before `now`."""
    counter = itertools.count(1)

    def _make(items=(), payment=True, days_ago=1, customer_id='u1',
              status='Delivered', amount=None, placed_at=None, address=None):
        items = list(items)
        if amount is None:
            amount = sum(
                item.unit_price * (item.quantity if item.quantity and item.quantity > 0 else 1)
                for item in items if isinstance(item.unit_price, (int, float))
            )
        return Order(
            order_id=f"o{next(counter)}",
            customer_id=customer_id,
            items=items,
            amount=amount,
            payment=payment,
            status=status,
            placed_at=placed_at if placed_at is not None else now - timedelta(days=days_ago),
            address=address or {},
        )

    return _make


@pytest.fixture
def burger():
    return LineItem(item_id='A', name='Burger', unit_price=5.0, quantity=2)


@pytest.fixture
def food_catalog():
    return [
        FoodItem(item_id='A', name='Burger', category='Mains', price=5.0),
        FoodItem(item_id='B', name='Salad', category='Salads', price=7.5, is_vegetarian=True),
        FoodItem(item_id='C', name='Soup', category='Starters', price=4.0),
    ]


@pytest.fixture
def config_file(tmp_path):
    """Write a config.ini that keeps every path inside tmp_path."""
    input_dir = tmp_path / 'input'
    output_dir = tmp_path / 'output'
    input_dir.mkdir()

    path = tmp_path / 'config.ini'
    path.write_text(
        "[DATABASE]\n"
        "type = sqlite\n"
        f"name = {tmp_path / 'reports.db'}\n"
        "\n"
        "[SOURCE]\n"
        "mode = file\n"
        "\n"
        "[LOGGING]\n"
        "level = INFO\n"
        f"file = {tmp_path / 'logs' / 'analytics.log'}\n"
        "\n"
        "[PATHS]\n"
        f"input_dir = {input_dir}\n"
        f"output_dir = {output_dir}\n"
        "\n"
        "[ANALYTICS]\n"
        "time_window = all\n"
        "top_n = 10\n"
        "customer_limit = 5\n"
    )
    return path
