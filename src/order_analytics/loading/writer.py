"""
Data loading components for the order analytics pipeline.
"""
import logging
import traceback
import os
from sqlalchemy.exc import SQLAlchemyError

from order_analytics.db.models import Base

logger = logging.getLogger(__name__)


def load_report_tables(engine, tables):
    """
    Replace the contents of the report tables with freshly computed results.

    Args:
        engine: SQLAlchemy engine
        tables (dict): DataFrames keyed by table name

    Returns:
        bool: True if successful, False otherwise
    """
    try:
        logger.info("Loading report data to target tables")

        Base.metadata.create_all(engine)

        with engine.begin() as conn:
            for table_name, df in tables.items():
                _load_table(conn, df, table_name)

        logger.info("Data loading completed successfully")
        return True
    except SQLAlchemyError as e:
        logger.error(f"Error in data loading: {str(e)}")
        logger.error(traceback.format_exc())
        return False


def _load_table(conn, df, table_name):
    """
    Clear a report table and insert the DataFrame rows.
    """
    table = Base.metadata.tables.get(table_name)
    if table is None:
        logger.warning(f"No target table defined for {table_name}, skipping")
        return

    conn.execute(table.delete())
    logger.info(f"Cleared existing data from {table_name}")

    if df is None or len(df) == 0:
        logger.warning(f"No data to load for table {table_name}")
        return

    df.to_sql(table_name, conn, if_exists='append', index=False)
    logger.info(f"Successfully loaded {len(df)} rows to {table_name}")


def export_results_to_csv(tables, output_dir):
    """
    Export report DataFrames to CSV files.

    """
    try:
        # Create output directory if it doesn't exist
        if not os.path.exists(output_dir):
            os.makedirs(output_dir)

        exported_files = {}

        # Export each DataFrame to CSV
        for name, df in tables.items():
            if df is not None and len(df) > 0:
                file_path = os.path.join(output_dir, f"{name}.csv")
                df.to_csv(file_path, index=False)
                exported_files[name] = file_path
                logger.info(f"Exported {len(df)} rows to {file_path}")

        return exported_files
    except OSError as e:
        logger.error(f"Error exporting results to CSV: {str(e)}")
        logger.error(traceback.format_exc())
        return {}
