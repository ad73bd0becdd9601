"""
Database connection management.

Provides the Supabase client singleton used for all store reads.
"""

from supabase import create_client, Client
from functools import lru_cache
from typing import Optional
import structlog

from config.settings import settings

logger = structlog.get_logger(__name__)


class ConnectionError(Exception):
    """Failed to connect to database."""
    pass


@lru_cache()
def get_supabase_client() -> Client:
    """
    Get cached Supabase client instance.

    Uses lru_cache to ensure only one client is created.
    Call get_supabase_client.cache_clear() to reconnect.

    Returns:
        Client: Supabase client

    Raises:
        ConnectionError: If connection fails
    """
    try:
        logger.info(
            "connecting_to_supabase",
            url=settings.supabase_url[:30] + "..."  # Log partial URL only
        )

        client = create_client(
            settings.supabase_url,
            settings.supabase_key
        )

        logger.info(
            "supabase_connected",
            status="success"
        )

        return client

    except Exception as e:
        logger.error(
            "supabase_connection_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        raise ConnectionError(f"Failed to connect to Supabase: {e}") from e


# ===================
# HELPER FUNCTIONS
# ===================

def check_connection() -> dict:
    """
    Check database connection health.

    Returns:
        dict: Connection status with details
    """
    try:
        client = get_supabase_client()

        mappings = client.table("sku_mappings").select("id", count="exact").execute()
        products = client.table("products").select("id", count="exact").execute()

        return {
            "status": "healthy",
            "sku_mappings_count": mappings.count,
            "products_count": products.count
        }

    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e)
        }



def fetch_all_rows(build_query, page_size: Optional[int] = None) -> list[dict]:
    """
    Read every row of a query, one page at a time.

    PostgREST caps a single response at max-rows, so bulk reads page
    with range() until a short page comes back. build_query must return
    a fresh, deterministically ordered query on each call.

    Args:
        build_query: Zero-argument callable returning the query
        page_size: Rows per request (settings.supabase_page_size)

    Returns:
        All rows in query order
    """
    page_size = page_size or settings.supabase_page_size
    rows: list[dict] = []
    offset = 0

    while True:
        result = build_query().range(offset, offset + page_size - 1).execute()
        page = result.data or []
        rows.extend(page)
        if len(page) < page_size:
            return rows
        offset += page_size
