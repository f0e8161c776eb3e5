"""EventSync: club event scheduling and approval service."""

__version__ = "1.0.0"
