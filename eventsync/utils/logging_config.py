"""Logging configuration for the application."""

import logging
import sys


def setup_logging(level: int = logging.INFO):
    """Configure logging for the application."""
    root_logger = logging.getLogger()
    if getattr(root_logger, '_eventsync_configured', False):
        return

    # Create a formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Create a console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    # Configure the root logger
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)
    root_logger._eventsync_configured = True

    # Set higher log levels for noisy components
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

    # Configure specific loggers
    loggers = [
        'eventsync.event_service',
        'eventsync.db.event_store',
        'eventsync.notifications.dispatcher',
        'eventsync.auth.identity',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        # Don't add handler here since it's already handled by root logger
