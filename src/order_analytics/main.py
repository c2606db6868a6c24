"""
Main report orchestration for the order analytics pipeline.
"""
import logging
import argparse
import time
import traceback
from datetime import datetime
from order_analytics.config import Config
from order_analytics.db.engine import create_db_engine
from order_analytics.ingestion.loader import load_source_data
from order_analytics.transformation.joins import resolve_line_items
from order_analytics.transformation.filters import (
    TIME_WINDOWS,
    filter_by_time_window,
    filter_paid_orders
)
from order_analytics.transformation.calculations import (
    aggregate_popularity,
    monthly_revenue,
    customer_rollup,
    status_distribution,
    payment_distribution
)
from order_analytics.transformation.quality import run_data_quality_checks
from order_analytics.transformation.report import assemble_report, report_tables, summarize_orders
from order_analytics.loading.writer import load_report_tables, export_results_to_csv

logger = logging.getLogger(__name__)


def run_report(config_file='config.ini', time_window=None, top_n=None, export_csv=False,
               load_db=False, now=None, data=None):
    """
    Run the analytics report end to end and return run statistics.

    `data` may hold already-fetched 'orders', 'food_items' and 'customers';
    otherwise they are loaded from the configured source.
    """
    start_time = time.time()
    statistics = {
        'start_time': datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
        'status': 'failed',
        'stages': {},
    }

    try:
        logger.info("Starting analytics report")

        # Load configuration
        config = Config(config_file)

        # Explicit arguments win over config settings
        window = time_window if time_window is not None else config.get_time_window()
        limit = top_n if top_n is not None else config.get_top_n()

        logger.info(f"Report settings: time_window={window}, top_n={limit}")

        #  Data Ingestion
        stage_start = time.time()

        if data is None:
            data = load_source_data(config)

        orders = data['orders']
        food_items = data.get('food_items', [])
        customers = data.get('customers', {})

        statistics['stages']['ingestion'] = {
            'duration': time.time() - stage_start,
            'orders': len(orders),
            'food_items': len(food_items),
            'customers': len(customers)
        }

        # ---- Catalog Resolution & Quality Checks
        stage_start = time.time()
        resolved_orders = resolve_line_items(orders, food_items)
        quality_results = run_data_quality_checks(resolved_orders, food_items, config.get_delivery_fee())
        statistics['stages']['quality_check'] = {
            'duration': time.time() - stage_start,
            'issues_found': quality_results['total_issues']
        }

        # ---------Aggregation
        stage_start = time.time()

        paid_orders = filter_paid_orders(resolved_orders)
        window_orders = filter_by_time_window(paid_orders, window, now=now)

        rows = aggregate_popularity(window_orders, top_n=limit)
        report = assemble_report(rows)
        monthly = monthly_revenue(window_orders)
        top_customers = customer_rollup(window_orders, customers, config.get_customer_limit())

        tables = report_tables(report, monthly, top_customers)

        statistics['stages']['aggregation'] = {
            'duration': time.time() - stage_start,
            'paid_orders': len(paid_orders),
            'orders_in_window': len(window_orders),
            'rows_generated': {
                table: len(df) for table, df in tables.items()
            }
        }

        statistics['report'] = report
        statistics['order_summary'] = summarize_orders(resolved_orders)
        statistics['status_distribution'] = status_distribution(resolved_orders)
        statistics['payment_distribution'] = payment_distribution(resolved_orders)
        statistics['tables'] = tables

        # -------Data Loading
        if load_db:
            stage_start = time.time()
            engine = create_db_engine(config)
            success = load_report_tables(engine, tables)
            statistics['stages']['loading'] = {
                'duration': time.time() - stage_start,
                'success': success
            }

        # Export results to CSV if requested
        if export_csv:
            exported_files = export_results_to_csv(tables, config.get_output_path())
            statistics['stages']['export'] = {
                'files_exported': len(exported_files),
                'file_paths': exported_files
            }

        statistics['status'] = 'success'
        logger.info("Analytics report completed successfully")

    except Exception as e:
        logger.error(f"Report execution failed: {str(e)}")
        logger.error(traceback.format_exc())
        statistics['status'] = 'failed'
        statistics['error'] = str(e)

    # Calculate total duration
    statistics['duration'] = time.time() - start_time

    return statistics


def main():
    """Command line entry point."""
    parser = argparse.ArgumentParser(description='Food Delivery Order Analytics')
    parser.add_argument('--config', default='config.ini', help='Path to configuration file')
    parser.add_argument('--window', choices=list(TIME_WINDOWS), help='Time window to report on')
    parser.add_argument('--top', type=int, help='Number of top items to keep (0 for all)')
    parser.add_argument('--export-csv', action='store_true', help='Export results to CSV files')
    parser.add_argument('--load-db', action='store_true', help='Write results to the report database')

    args = parser.parse_args()

    results = run_report(
        config_file=args.config,
        time_window=args.window,
        top_n=args.top,
        export_csv=args.export_csv,
        load_db=args.load_db
    )

    # Print summary
    print("\nReport Execution Summary:")
    print(f"Status: {results['status']}")
    print(f"Duration: {results['duration']:.2f} seconds")

    if results['status'] == 'failed' and 'error' in results:
        print(f"Error: {results['error']}")

    report = results.get('report')
    if report is not None:
        print(f"\nTotal items sold: {report.total_quantity}")
        print(f"Total revenue: ${report.total_revenue:.2f}")
        print(f"Most popular item: {report.top_item.name if report.top_item else 'n/a'}")
        for index, row in enumerate(report.rows, start=1):
            print(f"  {index}. {row.name}: {row.quantity} sold, ${row.revenue:.2f}")

    for stage, stats in results.get('stages', {}).items():
        print(f"\n{stage.capitalize()} stage:")
        for key, value in stats.items():
            if key != 'rows_generated' and key != 'file_paths':
                print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
