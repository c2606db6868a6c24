"""
Data ingestion components for the order analytics pipeline.
"""
import os
import json
import logging
import traceback

import pandas as pd
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from order_analytics.exceptions import DataLoadError
from order_analytics.records import FoodItem, LineItem, Order

logger = logging.getLogger(__name__)

ORDERS_ENDPOINT = '/api/order/list'
FOODS_ENDPOINT = '/api/food/list'
USERS_ENDPOINT = '/api/user/list'


class AdminApiClient:
    """Read-only client for the admin REST API."""

    def __init__(self, base_url, timeout=10.0, retries=3):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

        self.session = requests.Session()
        retry_strategy = Retry(
            total=retries,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET"]
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        self.session.headers.update({"Accept": "application/json"})

    def _get(self, endpoint, field):
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Error fetching {url}: {str(e)}")
            raise DataLoadError(f"Failed to fetch {endpoint}: {e}") from e

        if field not in payload:
            raise DataLoadError(f"Response from {endpoint} has no '{field}' field")

        records = payload[field] or []
        logger.info(f"Fetched {len(records)} records from {endpoint}")
        return records

    def fetch_orders(self):
        return self._get(ORDERS_ENDPOINT, 'data')

    def fetch_food_catalog(self):
        return self._get(FOODS_ENDPOINT, 'food_list')

    def fetch_customers(self):
        return self._get(USERS_ENDPOINT, 'data')


def load_json_export(file_path, field):
    """
    Load records from a JSON file holding an API response payload.
    """
    logger.info(f"Loading '{field}' records from {file_path}")

    if not os.path.exists(file_path):
        logger.error(f"File not found: {file_path}")
        raise DataLoadError(f"File not found: {file_path}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON in {file_path}: {e}") from e

    if isinstance(payload, list):
        records = payload
    else:
        records = payload.get(field) or []

    logger.info(f"Loaded {len(records)} records from {file_path}")
    return records


def _to_number(value):
    # Unparseable values pass through so aggregation can reject them
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return value
    return value


def _parse_line_item(raw):
    return LineItem(
        item_id=raw.get('_id', raw.get('id')),
        name=raw.get('name'),
        unit_price=_to_number(raw.get('price')),
        quantity=_to_number(raw.get('quantity')),
    )


def parse_orders(raw_orders):
    """
    Decode raw order documents into Order records.
    """
    orders = []
    for raw in raw_orders:
        order_id = raw.get('_id', raw.get('oid'))
        if order_id is None:
            raise DataLoadError(f"Order without an identifier: {raw!r}")

        try:
            placed_at = pd.to_datetime(raw.get('date'), utc=True)
        except (ValueError, TypeError) as e:
            raise DataLoadError(f"Order {order_id} has an invalid date: {raw.get('date')!r}") from e
        if pd.isna(placed_at):
            raise DataLoadError(f"Order {order_id} has no date")

        amount = _to_number(raw.get('amount'))
        if amount is None:
            amount = 0.0
        if not isinstance(amount, (int, float)) or isinstance(amount, bool):
            raise DataLoadError(f"Order {order_id} has a non-numeric amount: {amount!r}")

        orders.append(Order(
            order_id=order_id,
            customer_id=raw.get('userId'),
            items=[_parse_line_item(item) for item in raw.get('items') or []],
            amount=float(amount),
            payment=raw.get('payment') is True,
            status=raw.get('status', 'Food Processing'),
            placed_at=placed_at.to_pydatetime(),
            address=raw.get('address') or {},
        ))

    logger.info(f"Parsed {len(orders)} orders")
    return orders


def parse_food_items(raw_foods):
    """
    Decode raw food catalog documents into FoodItem records.
    """
    foods = []
    for raw in raw_foods:
        dietary = raw.get('dietaryInfo') or {}
        offer = raw.get('specialOffer')
        foods.append(FoodItem(
            item_id=raw.get('_id'),
            name=raw.get('name'),
            category=raw.get('category'),
            price=_to_number(raw.get('price')),
            is_vegetarian=bool(dietary.get('isVegetarian', False)),
            is_vegan=bool(dietary.get('isVegan', False)),
            is_gluten_free=bool(dietary.get('isGlutenFree', False)),
            special_offer=offer if offer and offer.get('isOnOffer') else None,
        ))
    return foods


def build_customer_directory(raw_customers):
    """
    Map customer ids to display names.
    """
    return {
        raw['_id']: raw.get('name') or 'Unknown'
        for raw in raw_customers if raw.get('_id') is not None
    }


def load_source_data(config, client=None):
    """
    Fetch orders, the food catalog and the customer directory.

    Args:
        config: Configuration object
        client: Optional AdminApiClient, created from config when omitted

    Returns:
        dict: 'orders', 'food_items' and 'customers'
    """
    try:
        if config.use_api():
            if client is None:
                client = AdminApiClient(**config.get_source_config())
            raw_orders = client.fetch_orders()
            raw_foods = client.fetch_food_catalog()
            raw_customers = client.fetch_customers()
        else:
            raw_orders = load_json_export(config.get_input_path('orders.json'), 'data')
            raw_foods = load_json_export(config.get_input_path('foods.json'), 'food_list')
            raw_customers = load_json_export(config.get_input_path('users.json'), 'data')

        return {
            'orders': parse_orders(raw_orders),
            'food_items': parse_food_items(raw_foods),
            'customers': build_customer_directory(raw_customers),
        }
    except DataLoadError as e:
        logger.error(f"Failed to load source data: {str(e)}")
        logger.error(traceback.format_exc())
        raise
