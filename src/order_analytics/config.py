"""
Configuration handling for the order analytics pipeline.
"""
import os
import logging
import configparser
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()
# Load environment variables
DB_TYPE = os.getenv("DB_TYPE", "sqlite")
DB_NAME = os.getenv("POSTGRES_DB", "order_analytics.db")
POSTGRES_HOST = os.getenv("POSTGRES_HOST", "")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")
POSTGRES_USER = os.getenv("POSTGRES_USER", "")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "")
ADMIN_API_URL = os.getenv("ADMIN_API_URL", "http://localhost:4000")


class Config:
    """Configuration manager for the order analytics pipeline."""

    def __init__(self, config_file='config.ini'):
        """
        Initialize configuration from config file.
        """
        # No interpolation so passwords may contain '%'
        self.config = configparser.ConfigParser(interpolation=None)

        # Set default values
        self._set_defaults()

        # Try to read from config file
        config_path = Path(config_file)
        if config_path.exists():
            self.config.read(config_path)
            self._setup_logging()
        else:
            print(f"Warning: Config file {config_file} not found. Using defaults.")

    def _set_defaults(self):
        """Set default configuration values."""
        self.config['DATABASE'] = {
            'type': DB_TYPE,
            'name': DB_NAME,
            'host': POSTGRES_HOST,
            'port': POSTGRES_PORT,
            'user': POSTGRES_USER,
            'password': POSTGRES_PASSWORD
        }

        self.config['SOURCE'] = {
            'mode': 'api',
            'base_url': ADMIN_API_URL,
            'timeout': '10',
            'retries': '3'
        }

        self.config['LOGGING'] = {
            'level': 'INFO',
            'file': 'logs/analytics.log'
        }

        self.config['PATHS'] = {
            'input_dir': 'data/input',
            'output_dir': 'data/output'
        }

        self.config['ANALYTICS'] = {
            'time_window': 'all',
            'top_n': '10',
            'customer_limit': '5',
            'delivery_fee': '0'
        }

    def _setup_logging(self):
        """Configure logging based on settings."""
        log_config = self.config['LOGGING']
        log_level = getattr(logging, log_config.get('level', 'INFO').upper(), logging.INFO)
        log_file = log_config.get('file', 'logs/analytics.log')

        # Create directory for log file if it doesn't exist
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        # Configure logging
        logging.basicConfig(
            level=log_level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=[
                logging.FileHandler(log_file),
                logging.StreamHandler()
            ]
        )

    def get_database_config(self):
        """
        Get database configuration.

        """
        return {
            'type': self.config['DATABASE'].get('type'),
            'name': self.config['DATABASE'].get('name'),
            'host': self.config['DATABASE'].get('host'),
            'port': self.config['DATABASE'].get('port'),
            'user': self.config['DATABASE'].get('user'),
            'password': self.config['DATABASE'].get('password')
        }

    def get_source_config(self):
        """
        Get admin API connection settings.
        """
        source = self.config['SOURCE']
        return {
            'base_url': source.get('base_url'),
            'timeout': source.getfloat('timeout', 10.0),
            'retries': source.getint('retries', 3)
        }

    def use_api(self):
        """
        Check whether data is fetched from the admin API rather than JSON exports.
        """
        return self.config['SOURCE'].get('mode', 'api').lower() == 'api'

    def get_input_path(self, filename=None):
        """
        Get input directory or file path.

        """
        input_dir = self.config['PATHS'].get('input_dir', 'data/input')

        if filename:
            return os.path.join(input_dir, filename)
        return input_dir

    def get_output_path(self, filename=None):
        """
        Get output directory or file path.

        """
        output_dir = self.config['PATHS'].get('output_dir', 'data/output')

        # Create directory if it doesn't exist
        if not os.path.exists(output_dir):
            os.makedirs(output_dir)

        if filename:
            return os.path.join(output_dir, filename)
        return output_dir

    def get_time_window(self):
        return self.config['ANALYTICS'].get('time_window', 'all')

    def get_top_n(self):
        """
        Number of ranked items to keep; 0 keeps them all.
        """
        return self.config['ANALYTICS'].getint('top_n', 10)

    def get_customer_limit(self):
        return self.config['ANALYTICS'].getint('customer_limit', 5)

    def get_delivery_fee(self):
        """
        Flat fee included in order amounts, used when verifying totals.
        """
        return self.config['ANALYTICS'].getfloat('delivery_fee', 0.0)
