"""Flat monthly estimates for services without a pricing form."""

from __future__ import annotations

import logging

from azurecraft.pricing.types import CostBreakdown, LineItem

log = logging.getLogger(__name__)

# Typical production footprint per service, USD / month
COST_ESTIMATES: dict[str, float] = {
    "app-service": 250.0,
    "function-app": 75.0,
    "virtual-machine": 150.0,
    "container-apps": 75.0,
    "aks": 350.0,
    "azure-sql": 450.0,
    "cosmos-db": 200.0,
    "storage-account": 50.0,
    "redis-cache": 225.0,
    "virtual-network": 0.0,
    "application-gateway": 250.0,
    "load-balancer": 25.0,
    "front-door": 335.0,
    "key-vault": 5.0,
    "api-management": 50.0,
    "service-bus": 50.0,
    "event-hub": 275.0,
    "azure-openai": 1000.0,
    "entra-id": 0.0,
    "log-analytics": 50.0,
    "application-insights": 25.0,
    "ai-search": 250.0,
    "ddos-protection": 2944.0,
    "event-grid": 1.0,
    "static-web-app": 10.0,
    "resource-group": 0.0,
}


def flat_estimate(service_type: str) -> float:
    return COST_ESTIMATES.get(service_type, 0.0)


def flat_breakdown(service_type: str) -> CostBreakdown:
    flat = flat_estimate(service_type)
    if service_type not in COST_ESTIMATES:
        log.debug("No price data for service type %r, pricing at 0", service_type)
    items = [LineItem(label=f"{service_type} (flat estimate)", monthly_cost=flat)] if flat > 0 else []
    return CostBreakdown.from_items(items)
