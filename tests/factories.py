"""
Test data factories.

Uses factory pattern to generate consistent rows for the store tables
the forecast reads.
"""

from decimal import Decimal
from typing import Optional
from uuid import uuid4

from models.fba_forecast import ProductKind, SkuDemandProfile, VelocitySource
from models.seasonality import SeasonalEvent


class CatalogFactory:
    """
    Factory for one forecastable SKU across all tables.

    Usage:
        rows = CatalogFactory.create(sku="MUG-01", velocity=10)
        CatalogFactory.load(mock_supabase, [rows, other_rows])
    """

    _counter = 0

    @classmethod
    def _next_counter(cls) -> int:
        cls._counter += 1
        return cls._counter

    @classmethod
    def create(
        cls,
        sku: Optional[str] = None,
        channel: str = "amazon_us",
        channel_sku: Optional[str] = None,
        title: Optional[str] = None,
        velocity: Optional[float] = 10,
        channel_velocity: Optional[float] = None,
        fba_available: int = 0,
        fba_inbound_working: int = 0,
        fba_inbound_shipped: int = 0,
        fba_inbound_receiving: int = 0,
        is_parent: bool = False,
        parent_sku: Optional[str] = None,
        lead_time_days: Optional[int] = None,
        with_product: bool = True,
    ) -> dict:
        """
        Create the rows for a single SKU.

        Returns:
            Dict of table name -> list of rows
        """
        counter = cls._next_counter()
        sku = sku or f"TEST-SKU-{counter:03d}"
        channel_sku = channel_sku or f"{sku}-{channel.upper()}"

        rows = {
            "sku_mappings": [{
                "id": str(uuid4()),
                "master_sku": sku,
                "channel": channel,
                "channel_sku": channel_sku,
                "is_active": True,
            }],
            "products": [],
            "inventory_levels": [{
                "master_sku": sku,
                "fba_available": fba_available,
                "fba_inbound_working": fba_inbound_working,
                "fba_inbound_shipped": fba_inbound_shipped,
                "fba_inbound_receiving": fba_inbound_receiving,
            }],
            "sales_velocity": [],
            "channel_inventory": [],
        }
        if with_product:
            rows["products"].append({
                "sku": sku,
                "title": title or f"Test product {counter}",
                "parent_sku": parent_sku,
                "is_parent": is_parent,
                "lead_time_days": lead_time_days,
            })
        if velocity is not None:
            rows["sales_velocity"].append({"master_sku": sku, "velocity_30d": velocity})
        if channel_velocity is not None:
            rows["channel_inventory"].append({
                "channel": channel,
                "channel_sku": channel_sku,
                "velocity_30d": channel_velocity,
            })
        return rows

    @classmethod
    def load(cls, mock_supabase, catalogs: list[dict], extra_products: list[dict] = None):
        """Merge several create() results into the mock tables."""
        tables: dict[str, list] = {
            "sku_mappings": [],
            "products": [],
            "inventory_levels": [],
            "sales_velocity": [],
            "channel_inventory": [],
        }
        for catalog in catalogs:
            for table, rows in catalog.items():
                tables[table].extend(rows)
        tables["products"].extend(extra_products or [])
        for table, rows in tables.items():
            mock_supabase.set_table_data(table, rows)

    @classmethod
    def reset_counter(cls):
        """Reset the counter (call in test setup if needed)."""
        cls._counter = 0


class SeasonalEventFactory:
    """Factory for seasonal_events rows."""

    @classmethod
    def create(
        cls,
        name: str = "Prime Day",
        start_month: int = 7,
        start_day: int = 15,
        end_month: Optional[int] = None,
        end_day: Optional[int] = None,
        base_multiplier: str = "1.5",
        learned_multiplier: Optional[str] = None,
        is_active: bool = True,
    ) -> dict:
        return {
            "id": str(uuid4()),
            "name": name,
            "start_month": start_month,
            "start_day": start_day,
            "end_month": end_month or start_month,
            "end_day": end_day or start_day,
            "base_multiplier": base_multiplier,
            "learned_multiplier": learned_multiplier,
            "is_active": is_active,
        }

    @classmethod
    def build(cls, **overrides) -> SeasonalEvent:
        """Create a validated SeasonalEvent model."""
        return SeasonalEvent(**cls.create(**overrides))


def make_profile(
    sku: str = "MUG-01",
    velocity: str = "10",
    inventory: int = 0,
    units_sold_30d: int = 0,
    lead_time_days: int = 45,
) -> SkuDemandProfile:
    """Demand profile with all inventory in fba_available."""
    return SkuDemandProfile(
        master_sku=sku,
        channel_sku=f"{sku}-US",
        channel="amazon_us",
        title=f"{sku} title",
        kind=ProductKind.LEAF,
        velocity=Decimal(velocity),
        velocity_source=VelocitySource.GLOBAL,
        fba_available=inventory,
        lead_time_days=lead_time_days,
        units_sold_30d=units_sold_30d,
    )
