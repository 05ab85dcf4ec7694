"""Virtual Network, Application Gateway, Load Balancer and Front Door."""

from __future__ import annotations

from typing import Any

from azurecraft.pricing import rates
from azurecraft.pricing.types import LineItem, ServiceDescriptor, number_field, options, select_field


def _virtual_network(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    gb = cfg["peering_gb_per_month"]
    if gb == 0:
        return [LineItem(label="VNet (free)", monthly_cost=0.0)]
    per_gb = rates.VNET_PEERING_PER_GB["inbound"] + rates.VNET_PEERING_PER_GB["outbound"]
    return [LineItem(label=f"Peering Transfer ({gb} GB)", monthly_cost=gb * per_gb * mul)]


VIRTUAL_NETWORK = ServiceDescriptor(
    service_type="virtual-network",
    label="Virtual Network",
    fields=[
        number_field(
            "peering_gb_per_month",
            "VNet Peering Data Transfer",
            0,
            min=0,
            max=100_000,
            step=100,
            unit="GB/mo",
            tooltip="VNet itself is free. Peering data transfer is charged.",
        ),
    ],
    calculate=_virtual_network,
)


def _application_gateway(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    tier, cus = cfg["tier"], cfg["capacity_units"]
    fixed, per_cu = rates.APP_GATEWAY_RATES[tier]
    return [
        LineItem(label=f"Fixed ({tier})", monthly_cost=fixed * mul),
        LineItem(label=f"Capacity Units ({cus} CU)", monthly_cost=per_cu * cus * mul),
    ]


APPLICATION_GATEWAY = ServiceDescriptor(
    service_type="application-gateway",
    label="Application Gateway",
    fields=[
        select_field("tier", "Tier", "waf-v2", choices=options(("standard-v2", "Standard v2"), ("waf-v2", "WAF v2"))),
        number_field(
            "capacity_units", "Capacity Units", 10, min=1, max=125, unit="CUs", tooltip="Avg capacity units consumed"
        ),
    ],
    calculate=_application_gateway,
)


def _load_balancer(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    if cfg["tier"] == "basic":
        return [LineItem(label="Basic LB (free)", monthly_cost=0.0)]
    lb = rates.LOAD_BALANCER_RATES
    extra_rules = max(0, cfg["rules"] - lb["included_rules"])
    data_gb = cfg["data_processed_gb"]
    items = [LineItem(label="Standard LB (base)", monthly_cost=lb["standard"] * mul)]
    if extra_rules > 0:
        items.append(LineItem(label=f"Extra rules ({extra_rules})", monthly_cost=extra_rules * lb["per_extra_rule"] * mul))
    if data_gb > 0:
        items.append(LineItem(label=f"Data processed ({data_gb} GB)", monthly_cost=data_gb * lb["per_gb_processed"] * mul))
    return items


LOAD_BALANCER = ServiceDescriptor(
    service_type="load-balancer",
    label="Load Balancer",
    fields=[
        select_field("tier", "Tier", "standard", choices=options(("basic", "Basic (free)"), ("standard", "Standard"))),
        number_field("rules", "Load-Balancing Rules", 5, min=1, max=150, unit="rules", depends_on=("tier", "standard")),
        number_field(
            "data_processed_gb",
            "Data Processed",
            500,
            min=0,
            max=100_000,
            step=100,
            unit="GB/mo",
            depends_on=("tier", "standard"),
        ),
    ],
    calculate=_load_balancer,
)


def _front_door(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    tier = cfg["tier"]
    return [LineItem(label=f"Front Door ({tier})", monthly_cost=rates.FRONT_DOOR_RATES[tier] * mul)]


FRONT_DOOR = ServiceDescriptor(
    service_type="front-door",
    label="Azure Front Door",
    fields=[
        select_field(
            "tier",
            "Tier",
            "standard",
            choices=options(("standard", "Standard"), ("premium", "Premium (includes WAF bot protection)")),
        ),
    ],
    calculate=_front_door,
)
