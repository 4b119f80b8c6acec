"""Extract rows from Supabase source tables, one page at a time."""

from typing import Iterator

from datbolt.db.source_client import SourceClient
from datbolt.errors import SourceQueryError
from datbolt.etl.results import Err, Ok, Result

SOURCE_TABLES = (
    "user_profiles",
    "user_activities",
    "user_stats",
    "AuditReports",
    "incidents",
    "reports",
)


def count_rows(source: SourceClient, table: str) -> Result[int]:
    """Exact total row count of a source table."""
    try:
        return Ok(source.count(table))
    except SourceQueryError as e:
        return Err(e)


def read_page(
    source: SourceClient,
    table: str,
    offset: int,
    limit: int,
    order_by: str,
    columns: str = "*",
    not_null: list[str] | None = None,
) -> Result[list[dict]]:
    """Fetch up to ``limit`` rows starting at ``offset``, ascending by ``order_by``."""
    if limit <= 0:
        raise ValueError(f"Page size must be positive, got {limit}")
    try:
        return Ok(source.select(
            table,
            columns=columns,
            order_by=order_by,
            offset=offset,
            limit=limit,
            not_null=not_null,
        ))
    except SourceQueryError as e:
        return Err(e)


def read_all(
    source: SourceClient,
    table: str,
    page_size: int,
    order_by: str,
    columns: str = "*",
    not_null: list[str] | None = None,
) -> Iterator[Result[list[dict]]]:
    """Yield successive pages until an empty page or the first error."""
    offset = 0
    while True:
        page = read_page(source, table, offset, page_size, order_by, columns, not_null)
        yield page
        if isinstance(page, Err) or len(page.value) < page_size:
            return
        offset += page_size
