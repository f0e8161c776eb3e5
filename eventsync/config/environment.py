"""Environment configuration module.

Loads the .env file once, before anything reads ``os.environ``, and exposes the
process-wide settings derived from it. Import this module ahead of the other
eventsync modules that depend on environment variables, both in the FastAPI
app and in tests.

Usage:
    from eventsync.config.environment import IS_PRODUCTION_ENVIRONMENT, LOG_LEVEL

Variables:
    ENVIRONMENT: 'development' (SQLite under data/) or 'production' (DATABASE_URL)
    LOG_LEVEL: Name of the root log level, defaults to INFO
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables - this must happen before any other imports
load_dotenv()

env_setting = os.environ.get('ENVIRONMENT', '').lower()
IS_PRODUCTION_ENVIRONMENT = env_setting == 'production'

if env_setting not in ['development', 'production']:
    logging.warning(
        f"Environment setting '{env_setting}' is invalid or not specified. "
        "Expected 'development' or 'production'. Defaulting to development environment."
    )

_level_name = os.environ.get('LOG_LEVEL', 'INFO').upper()
LOG_LEVEL = logging.getLevelName(_level_name)
if not isinstance(LOG_LEVEL, int):
    logging.warning(f"Unknown LOG_LEVEL '{_level_name}', using INFO")
    LOG_LEVEL = logging.INFO

__all__ = ['IS_PRODUCTION_ENVIRONMENT', 'LOG_LEVEL']
