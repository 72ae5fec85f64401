"""Fluent table queries, sent through the Supabase SDK's PostgREST builder.

Example:
    result = (
        client.table("incidents")
        .select("*, students(*), incident_types(*)")
        .order("date_reported", desc=True)
        .execute()
    )
    for row in result.data:
        ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

import httpx
from supabase import PostgrestAPIError

from ..logutils import get_logger
from .errors import GatewayError

logger = get_logger(__name__)

Rows = Union[dict[str, Any], list[dict[str, Any]]]


@dataclass
class QueryResult:
    """Rows returned by a query; ``count`` is set only when requested."""

    data: Any
    count: Optional[int] = None


class TableQuery:
    """One request against a table, built up fluently.

    Each call is forwarded to the SDK builder; only :meth:`execute` adds
    behaviour of its own: it refuses an update without a filter and turns
    SDK and transport errors into :class:`GatewayError`.
    """

    def __init__(self, builder: Any, table: str):
        self._builder = builder
        self.table = table
        self.method = "GET"
        self._filtered = False

    # ---- verbs ----

    def select(self, columns: str = "*", count: Optional[str] = None, head: bool = False) -> TableQuery:
        """Read rows; ``columns`` may embed relations, e.g. ``"*, students(*)"``."""
        self.method = "HEAD" if head else "GET"
        self._builder = self._builder.select(columns, count=count, head=head)
        return self

    def insert(self, rows: Rows) -> TableQuery:
        self.method = "POST"
        self._builder = self._builder.insert(rows)
        return self

    def update(self, values: dict[str, Any]) -> TableQuery:
        self.method = "PATCH"
        self._builder = self._builder.update(values)
        return self

    # ---- modifiers ----

    def eq(self, column: str, value: Any) -> TableQuery:
        self._builder = self._builder.eq(column, value)
        self._filtered = True
        return self

    def order(self, column: str, desc: bool = False) -> TableQuery:
        self._builder = self._builder.order(column, desc=desc)
        return self

    def limit(self, count: int) -> TableQuery:
        self._builder = self._builder.limit(count)
        return self

    def maybe_single(self) -> TableQuery:
        """Return one row or None instead of a list."""
        self._builder = self._builder.maybe_single()
        return self

    def execute(self) -> QueryResult:
        """Send the request.

        Raises:
            GatewayError: On HTTP errors, transport failures, or when
                ``maybe_single()`` matched more than one row.
            ValueError: For an update without a filter.
        """
        if self.method == "PATCH" and not self._filtered:
            raise ValueError(f"Refusing to update every row of {self.table}; add a filter")

        logger.debug("Gateway request", extra={"extra_data": {"method": self.method, "table": self.table}})
        try:
            response = self._builder.execute()
        except PostgrestAPIError as e:
            raise GatewayError.from_api_error(e) from e
        except httpx.HTTPError as e:
            raise GatewayError(f"Could not reach the data service: {e}") from e

        # maybe_single() with no matching row
        if response is None:
            return QueryResult(data=None)
        return QueryResult(data=response.data, count=response.count)
