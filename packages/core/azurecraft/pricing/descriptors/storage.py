from __future__ import annotations

from typing import Any

from azurecraft.pricing import rates
from azurecraft.pricing.types import LineItem, ServiceDescriptor, number_field, options, select_field


def _storage_account(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    tier, redundancy = cfg["access_tier"], cfg["redundancy"]
    capacity, tx = cfg["capacity_gb"], cfg["transactions_10k"]
    # Archive has no zone- or read-access redundancy; fall back to the tier's LRS price
    per_gb = rates.STORAGE_RATES.get(f"{tier}-{redundancy}", rates.STORAGE_RATES[f"{tier}-lrs"])
    items = [
        LineItem(
            label=f"Storage ({capacity} GB, {tier}/{redundancy.upper()})",
            monthly_cost=capacity * per_gb * mul,
        )
    ]
    tx_cost = tx * rates.STORAGE_TRANSACTION_RATES[tier] * mul
    if tx_cost > 0:
        items.append(LineItem(label=f"Transactions ({tx}x10K ops)", monthly_cost=tx_cost))
    return items


STORAGE_ACCOUNT = ServiceDescriptor(
    service_type="storage-account",
    label="Storage Account",
    fields=[
        select_field("access_tier", "Access Tier", "hot", choices=options(("hot", "Hot"), ("cool", "Cool"), ("archive", "Archive"))),
        select_field(
            "redundancy",
            "Redundancy",
            "lrs",
            choices=options(
                ("lrs", "LRS (locally redundant)"),
                ("zrs", "ZRS (zone redundant)"),
                ("grs", "GRS (geo-redundant)"),
                ("ragrs", "RA-GRS (read-access geo-redundant)"),
            ),
        ),
        number_field("capacity_gb", "Capacity", 500, min=0, max=500_000, step=100, unit="GB"),
        number_field("transactions_10k", "Transactions (10K ops/mo)", 100, min=0, max=100_000, step=10, unit="x10K"),
    ],
    calculate=_storage_account,
)
