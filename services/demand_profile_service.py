"""
Demand profile loader.

Builds one SkuDemandProfile per active SKU mapping on a channel from the
product, FBA inventory and velocity tables. Mappings that cannot be
forecast are counted, never raised:

- no linked product
- product is a parent/variation container
- resolved velocity is zero

Any read failure raises DatabaseError and aborts the run.
"""

from typing import Optional
from decimal import Decimal
from datetime import date
import structlog

from config import settings, get_supabase_client, fetch_all_rows
from exceptions import DatabaseError
from models.fba_forecast import (
    ProductKind,
    SkipCounters,
    SkuDemandProfile,
    VelocitySource,
)
from services.sales_service import get_sales_service

logger = structlog.get_logger(__name__)


def classify_product(
    is_parent: Optional[bool],
    parent_sku: Optional[str],
    variation_count: int
) -> ProductKind:
    """
    Resolve where a product sits in the variation hierarchy.

    An explicit parent flag wins. A product without a parent SKU that
    has child variations is a parent too.
    """
    if is_parent:
        return ProductKind.PARENT
    if parent_sku:
        return ProductKind.VARIANT
    if variation_count > 0:
        return ProductKind.PARENT
    return ProductKind.LEAF


def resolve_velocity(
    channel_velocity: Optional[Decimal],
    global_velocity: Optional[Decimal]
) -> tuple[Decimal, VelocitySource]:
    """
    Channel velocity when it is set and non-zero, global 30-day otherwise.
    """
    if channel_velocity:
        return Decimal(str(channel_velocity)), VelocitySource.CHANNEL
    return Decimal(str(global_velocity or 0)), VelocitySource.GLOBAL


class DemandProfileService:
    """
    Loads demand profiles for a channel.

    Uses batch queries (one per table) instead of per-mapping reads.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.sales_service = get_sales_service()
        self.default_lead_time = settings.default_lead_time_days
        self.sales_window_days = settings.velocity_window_days
        self.page_size = settings.supabase_page_size

    # ===================
    # STORE READS
    # ===================

    def _select(self, table: str, query_name: str, build) -> list[dict]:
        """Run a select and wrap failures as DatabaseError."""
        try:
            return fetch_all_rows(lambda: build(self.db.table(table)), self.page_size)
        except Exception as e:
            logger.error(
                "demand_profile_read_failed",
                table=table,
                query=query_name,
                error=str(e),
                error_type=type(e).__name__
            )
            raise DatabaseError("select", str(e), {"table": table})

    def get_active_mappings(self, channel: str) -> list[dict]:
        """Active SKU mappings for a channel, ordered by channel SKU."""
        return self._select(
            "sku_mappings",
            "active_mappings",
            lambda t: t.select("id, master_sku, channel, channel_sku, is_active")
            .eq("channel", channel)
            .eq("is_active", True)
            .order("channel_sku")
        )

    def get_products(self, skus: list[str]) -> dict[str, dict]:
        """Products keyed by SKU."""
        if not skus:
            return {}
        rows = self._select(
            "products",
            "products_by_sku",
            lambda t: t.select("sku, title, parent_sku, is_parent, lead_time_days")
            .in_("sku", skus)
            .order("sku")
        )
        return {row["sku"]: row for row in rows}

    def get_variation_counts(self, skus: list[str]) -> dict[str, int]:
        """Number of child variations per parent SKU."""
        if not skus:
            return {}
        rows = self._select(
            "products",
            "variations_by_parent",
            lambda t: t.select("sku, parent_sku").in_("parent_sku", skus).order("sku")
        )
        counts: dict[str, int] = {}
        for row in rows:
            parent = row.get("parent_sku")
            if parent:
                counts[parent] = counts.get(parent, 0) + 1
        return counts

    def get_inventory_levels(self, skus: list[str]) -> dict[str, dict]:
        """FBA inventory rows keyed by master SKU (first row wins)."""
        if not skus:
            return {}
        rows = self._select(
            "inventory_levels",
            "inventory_by_sku",
            lambda t: t.select(
                "master_sku, fba_available, fba_inbound_working, "
                "fba_inbound_shipped, fba_inbound_receiving"
            ).in_("master_sku", skus).order("master_sku")
        )
        levels: dict[str, dict] = {}
        for row in rows:
            levels.setdefault(row["master_sku"], row)
        return levels

    def get_global_velocities(self, skus: list[str]) -> dict[str, Decimal]:
        """Master 30-day velocity keyed by SKU."""
        if not skus:
            return {}
        rows = self._select(
            "sales_velocity",
            "velocity_by_sku",
            lambda t: t.select("master_sku, velocity_30d").in_("master_sku", skus)
            .order("master_sku")
        )
        return {
            row["master_sku"]: Decimal(str(row.get("velocity_30d") or 0))
            for row in rows
        }

    def get_channel_velocities(
        self,
        channel: str,
        channel_skus: list[str]
    ) -> dict[str, Decimal]:
        """Channel-specific 30-day velocity keyed by channel SKU."""
        if not channel_skus:
            return {}
        rows = self._select(
            "channel_inventory",
            "channel_velocity",
            lambda t: t.select("channel, channel_sku, velocity_30d")
            .eq("channel", channel)
            .in_("channel_sku", channel_skus)
            .order("channel_sku")
        )
        velocities: dict[str, Decimal] = {}
        for row in rows:
            if row.get("velocity_30d") is None:
                continue
            velocities.setdefault(row["channel_sku"], Decimal(str(row["velocity_30d"])))
        return velocities

    # ===================
    # PROFILE BUILDING
    # ===================

    def load_profiles(
        self,
        channel: str,
        as_of: Optional[date] = None
    ) -> tuple[list[SkuDemandProfile], SkipCounters]:
        """
        Build demand profiles for every forecastable mapping on a channel.

        Args:
            channel: Sales channel (e.g. "amazon_us")
            as_of: Planning date for the trailing sales window

        Returns:
            Tuple of (profiles in mapping order, skip counters)

        Raises:
            DatabaseError: If any required read fails
        """
        as_of = as_of or date.today()
        logger.info("loading_demand_profiles", channel=channel, as_of=as_of.isoformat())

        mappings = self.get_active_mappings(channel)
        counters = SkipCounters(total_mappings=len(mappings))

        master_skus = sorted({m["master_sku"] for m in mappings if m.get("master_sku")})
        channel_skus = sorted({m["channel_sku"] for m in mappings if m.get("channel_sku")})

        products = self.get_products(master_skus)
        variation_counts = self.get_variation_counts(master_skus)
        inventory = self.get_inventory_levels(master_skus)
        global_velocity = self.get_global_velocities(master_skus)
        channel_velocity = self.get_channel_velocities(channel, channel_skus)

        profiles: list[SkuDemandProfile] = []
        for mapping in mappings:
            product = products.get(mapping.get("master_sku"))
            if not product:
                counters.skipped_no_product += 1
                continue

            sku = product["sku"]
            kind = classify_product(
                product.get("is_parent"),
                product.get("parent_sku"),
                variation_counts.get(sku, 0)
            )
            if kind == ProductKind.PARENT:
                counters.skipped_parent += 1
                continue

            channel_sku = mapping.get("channel_sku") or sku
            velocity, source = resolve_velocity(
                channel_velocity.get(channel_sku),
                global_velocity.get(sku)
            )
            if velocity == 0:
                counters.skipped_no_velocity += 1
                continue

            level = inventory.get(sku, {})
            profiles.append(SkuDemandProfile(
                master_sku=sku,
                channel_sku=channel_sku,
                channel=channel,
                title=product.get("title"),
                kind=kind,
                velocity=velocity,
                velocity_source=source,
                fba_available=int(level.get("fba_available") or 0),
                fba_inbound_working=int(level.get("fba_inbound_working") or 0),
                fba_inbound_shipped=int(level.get("fba_inbound_shipped") or 0),
                fba_inbound_receiving=int(level.get("fba_inbound_receiving") or 0),
                lead_time_days=int(product.get("lead_time_days") or self.default_lead_time),
            ))

        units_sold = self.sales_service.get_units_sold_trailing(
            sorted({p.master_sku for p in profiles}),
            days=self.sales_window_days,
            as_of=as_of
        )
        for profile in profiles:
            profile.units_sold_30d = units_sold.get(profile.master_sku, 0)

        logger.info(
            "demand_profiles_loaded",
            channel=channel,
            profiles=len(profiles),
            total_mappings=counters.total_mappings,
            skipped_no_product=counters.skipped_no_product,
            skipped_parent=counters.skipped_parent,
            skipped_no_velocity=counters.skipped_no_velocity
        )

        return profiles, counters


# Singleton instance
_demand_profile_service: Optional[DemandProfileService] = None


def get_demand_profile_service() -> DemandProfileService:
    """Get or create DemandProfileService instance."""
    global _demand_profile_service
    if _demand_profile_service is None:
        _demand_profile_service = DemandProfileService()
    return _demand_profile_service
