"""
Database connection handling for the order analytics pipeline.
"""
import logging
from sqlalchemy import create_engine
from order_analytics.config import Config

logger = logging.getLogger(__name__)


def create_db_engine(config=None):
    """
    Create a SQLAlchemy engine for the configured reporting database.
    """
    try:
        if config is None:
            config = Config()

        db_config = config.get_database_config()

        if db_config['type'] == 'sqlite':
            connection_string = f"sqlite:///{db_config['name']}"
        elif db_config['type'] in ('postgresql', 'postgres'):
            connection_string = f"postgresql+psycopg2://{db_config['user']}:{db_config['password']}@{db_config['host']}:{db_config['port']}/{db_config['name']}"
        else:
            raise ValueError(f"Unsupported database type: {db_config['type']}")

        engine = create_engine(connection_string)
        logger.info(f"Database connection created for {db_config['type']}")
        return engine
    except Exception as e:
        logger.error(f"Failed to create database connection: {str(e)}")
        raise
