"""
Utility functions shared by the awsso modules.
"""

from .table import Table, render_table
from .timestamps import parse_timestamp, utcnow
from .log import configure_logging

__all__ = [
    'Table',
    'render_table',
    'parse_timestamp',
    'utcnow',
    'configure_logging',
]
