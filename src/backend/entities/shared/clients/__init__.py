"""Shared clients for Azure services."""

from .sql_client import AzureSqlClient

__all__ = ["AzureSqlClient"]
