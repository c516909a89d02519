"""Execution log database module."""

from hookadapter.db.connection import get_connection
from hookadapter.db.schema import init_database

__all__ = ["get_connection", "init_database"]
