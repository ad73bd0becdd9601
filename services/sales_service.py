"""
Sales aggregate service.

Reads trailing units sold from the daily_profits table. Only used for
diagnostic display next to a recommendation, never in the calculation.
"""

from typing import Optional
from datetime import date, timedelta
import structlog

from config import settings, get_supabase_client, fetch_all_rows
from exceptions import DatabaseError

logger = structlog.get_logger(__name__)


class SalesService:
    """
    Trailing sales aggregates per master SKU.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "daily_profits"
        self.page_size = settings.supabase_page_size

    def get_units_sold_since(
        self,
        skus: list[str],
        since: date
    ) -> dict[str, int]:
        """
        Sum units sold per SKU from `since` (inclusive) onwards.

        Args:
            skus: Master SKUs to aggregate
            since: First day included

        Returns:
            Dictionary mapping master_sku -> units sold (missing SKUs omitted)
        """
        if not skus:
            return {}

        logger.debug("getting_units_sold", skus=len(skus), since=since.isoformat())

        try:
            rows = fetch_all_rows(
                lambda: self.db.table(self.table)
                .select("master_sku, units_sold")
                .in_("master_sku", skus)
                .gte("date", since.isoformat())
                .order("date")
                .order("master_sku"),
                self.page_size
            )

            totals: dict[str, int] = {}
            for row in rows:
                sku = row["master_sku"]
                totals[sku] = totals.get(sku, 0) + int(row.get("units_sold") or 0)

            logger.info(
                "units_sold_retrieved",
                skus=len(totals),
                rows=len(rows)
            )

            return totals

        except Exception as e:
            logger.error("get_units_sold_failed", error=str(e))
            raise DatabaseError("select", str(e), {"table": self.table})

    def get_units_sold_trailing(
        self,
        skus: list[str],
        days: int,
        as_of: Optional[date] = None
    ) -> dict[str, int]:
        """Units sold over the `days` days ending at `as_of`."""
        as_of = as_of or date.today()
        return self.get_units_sold_since(skus, as_of - timedelta(days=days))


# Singleton instance
_sales_service: Optional[SalesService] = None


def get_sales_service() -> SalesService:
    """Get or create sales service instance."""
    global _sales_service
    if _sales_service is None:
        _sales_service = SalesService()
    return _sales_service
