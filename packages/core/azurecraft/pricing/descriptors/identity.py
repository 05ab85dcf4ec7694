from __future__ import annotations

from typing import Any

from azurecraft.pricing import rates
from azurecraft.pricing.types import LineItem, ServiceDescriptor, number_field, options, select_field


def _entra_id(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    tier, users = cfg["tier"], cfg["users"]
    per_user = rates.ENTRA_ID_RATES[tier]
    if per_user == 0:
        return [LineItem(label="Entra ID (Free)", monthly_cost=0.0)]
    return [LineItem(label=f"Entra ID {tier.upper()} ({users} users)", monthly_cost=per_user * users * mul)]


ENTRA_ID = ServiceDescriptor(
    service_type="entra-id",
    label="Microsoft Entra ID",
    fields=[
        select_field(
            "tier", "Tier", "free", choices=options(("free", "Free"), ("p1", "P1 ($6/user/mo)"), ("p2", "P2 ($9/user/mo)"))
        ),
        number_field("users", "Licensed Users", 50, min=0, max=100_000, step=10, unit="users", depends_on=("tier", ["p1", "p2"])),
    ],
    calculate=_entra_id,
)
