"""
Shared Azure SQL Database client for executing queries.

This module provides a reusable async client for executing read-only
SQL queries against the article store using Azure AD authentication.
"""

import logging
import struct
from datetime import date, datetime
from decimal import Decimal
from typing import Any

import aioodbc
from azure.identity import DefaultAzureCredential

logger = logging.getLogger(__name__)

# SQL_COPT_SS_ACCESS_TOKEN
_ACCESS_TOKEN_ATTR = 1256


def get_azure_sql_token(client_id: str | None = None) -> bytes:
    """
    Get an Azure AD token for SQL Database authentication.

    Args:
        client_id: User-assigned managed identity client ID. When running
            locally, DefaultAzureCredential will use CLI/VS Code credentials.

    Returns:
        Token bytes formatted for the ODBC driver
    """
    if client_id:
        credential = DefaultAzureCredential(managed_identity_client_id=client_id)
    else:
        credential = DefaultAzureCredential()

    token = credential.get_token("https://database.windows.net/.default")
    logger.debug("SQL token acquired, expires_on=%s", token.expires_on)

    token_bytes = token.token.encode("utf-16-le")
    return struct.pack(f"<I{len(token_bytes)}s", len(token_bytes), token_bytes)


def _json_safe(value: Any) -> Any:
    """Convert driver values into JSON-serializable Python values."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


class AzureSqlClient:
    """
    Async context manager for Azure SQL Database operations.

    Only read-only statements are accepted.

    Usage:
        async with AzureSqlClient(server, database) as client:
            rows = await client.fetch_all("SELECT TOP 10 * FROM dbo.Articles")
    """

    # Keywords that are not allowed in queries for safety
    DANGEROUS_KEYWORDS = [
        "INSERT",
        "UPDATE",
        "DELETE",
        "DROP",
        "ALTER",
        "CREATE",
        "TRUNCATE",
        "EXEC",
        "EXECUTE",
    ]

    def __init__(self, server: str, database: str, client_id: str | None = None):
        """
        Initialize the SQL client.

        Args:
            server: Azure SQL server hostname.
            database: Database name.
            client_id: Optional managed identity client ID.
        """
        self.server = server
        self.database = database
        self.client_id = client_id
        self._connection: aioodbc.Connection | None = None

    async def __aenter__(self):
        """Establish the database connection."""
        if not self.server:
            raise ValueError("AZURE_SQL_SERVER environment variable is required")

        connection_string = (
            f"DRIVER={{ODBC Driver 18 for SQL Server}};"
            f"SERVER={self.server};"
            f"DATABASE={self.database};"
        )

        token_struct = get_azure_sql_token(self.client_id)

        self._connection = await aioodbc.connect(
            dsn=connection_string,
            attrs_before={_ACCESS_TOKEN_ATTR: token_struct},
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Close the database connection."""
        if self._connection:
            await self._connection.close()

    def validate_query(self, query: str) -> tuple[bool, str | None]:
        """
        Validate that a query is safe to execute.

        Args:
            query: The SQL query to validate

        Returns:
            Tuple of (is_valid, error_message). error_message is None if valid.
        """
        query_upper = query.strip().upper()

        if not (query_upper.startswith("SELECT") or query_upper.startswith("WITH")):
            return False, "Only SELECT queries are allowed."

        for keyword in self.DANGEROUS_KEYWORDS:
            if f" {keyword} " in f" {query_upper} ":
                return False, f"Query contains forbidden keyword: {keyword}."

        return True, None

    async def fetch_all(self, query: str, params: list[Any] | None = None) -> list[dict[str, Any]]:
        """
        Execute a read-only SQL query and return its rows.

        Args:
            query: SQL statement with ``?`` placeholders
            params: Bind-parameter values

        Returns:
            One dict per row, keyed by column name, with JSON-safe values.

        Raises:
            ValueError: If the query is not read-only.
            RuntimeError: If the connection has not been opened.
        """
        is_valid, error = self.validate_query(query)
        if not is_valid:
            raise ValueError(error)

        if not self._connection:
            raise RuntimeError("Database connection not established. Use 'async with'.")

        logger.debug("Executing SQL: %s", query[:200])

        async with self._connection.cursor() as cursor:
            await cursor.execute(query, *(params or []))
            columns = [column[0] for column in cursor.description] if cursor.description else []
            raw_rows = await cursor.fetchall()

        rows = [
            {col: _json_safe(row[i]) for i, col in enumerate(columns)}
            for row in raw_rows
        ]
        logger.debug("Query returned %d rows", len(rows))
        return rows
