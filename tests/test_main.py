import os

import pandas as pd
from sqlalchemy import create_engine

from order_analytics.config import Config
from order_analytics.main import run_report
from order_analytics.records import LineItem


def _data(make_order, food_catalog):
    orders = [
        make_order(items=[LineItem('A', 'Burger', 5.0, 2)], customer_id='u1', days_ago=2),
        make_order(items=[LineItem('B', None, None, 3)], customer_id='u2', days_ago=3, amount=22.5),
        make_order(items=[LineItem('A', 'Burger', 5.0, 50)], customer_id='u1', payment=False),
        make_order(items=[LineItem('C', 'Soup', 4.0, 9)], customer_id='u3', days_ago=90),
    ]
    return {
        'orders': orders,
        'food_items': food_catalog,
        'customers': {'u1': 'Ann', 'u2': 'Ben'},
    }


def test_run_report(config_file, make_order, food_catalog, now):
    results = run_report(str(config_file), time_window='last-7-days', now=now,
                         data=_data(make_order, food_catalog))

    assert results['status'] == 'success'
    report = results['report']
    assert [(row.item_id, row.quantity) for row in report.rows] == [('B', 3), ('A', 2)]
    assert report.top_item.name == 'Salad'
    assert report.total_revenue == 32.5
    assert results['order_summary'].total_orders == 4
    assert results['payment_distribution'][1] == {'name': 'Unpaid', 'value': 1}
    assert results['tables']['top_customers']['name'].tolist() == ['Ann', 'Ben']
    assert results['stages']['aggregation']['orders_in_window'] == 2


def test_run_report_uses_config_defaults(config_file, make_order, food_catalog, now):
    results = run_report(str(config_file), now=now, data=_data(make_order, food_catalog))

    # time_window = all in config, so the 90 day old order counts
    assert [row.item_id for row in results['report'].rows] == ['C', 'B', 'A']


def test_run_report_top_n(config_file, make_order, food_catalog, now):
    results = run_report(str(config_file), top_n=1, now=now, data=_data(make_order, food_catalog))

    assert len(results['report'].rows) == 1


def test_invalid_window_fails_with_message(config_file, make_order, food_catalog):
    results = run_report(str(config_file), time_window='decade', data=_data(make_order, food_catalog))

    assert results['status'] == 'failed'
    assert 'decade' in results['error']
    assert 'report' not in results


def test_malformed_line_item_fails_the_report(config_file, make_order, food_catalog):
    data = _data(make_order, food_catalog)
    data['orders'].append(make_order(items=[LineItem('Z', None, None, 1)], amount=0))

    results = run_report(str(config_file), data=data)

    assert results['status'] == 'failed'
    assert 'unit price' in results['error']


def test_run_report_without_orders(config_file):
    results = run_report(str(config_file), data={'orders': [], 'food_items': [], 'customers': {}})

    assert results['status'] == 'success'
    assert results['report'].top_item is None
    assert results['report'].total_quantity == 0


def test_run_report_exports_and_loads(config_file, make_order, food_catalog, now):
    results = run_report(str(config_file), now=now, export_csv=True, load_db=True,
                         data=_data(make_order, food_catalog))

    assert results['stages']['loading']['success'] is True
    paths = results['stages']['export']['file_paths']
    assert os.path.exists(paths['top_items'])

    db_name = Config(str(config_file)).get_database_config()['name']
    stored = pd.read_sql_table('top_items', create_engine(f"sqlite:///{db_name}"))
    assert len(stored) == 3
