"""Descriptor-driven service pricing.

Every priced service type has a ``ServiceDescriptor``: a form definition
(``PricingField``s with defaults, bounds and visibility rules) plus a
calculator that turns a configuration into itemized monthly line items.
Service types without a descriptor fall back to a flat estimate.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from azurecraft.pricing.descriptors import PRICING_DESCRIPTORS
from azurecraft.pricing.fallback import COST_ESTIMATES, flat_breakdown, flat_estimate
from azurecraft.pricing.rates import REGION_MULTIPLIERS, region_multiplier
from azurecraft.pricing.types import CostBreakdown, LineItem, PricingField, ServiceDescriptor

log = logging.getLogger(__name__)

# Number fields that multiply a SKU
COUNT_KEYS = ("instances", "count", "node_count", "replicas", "units", "shards")

_PARENTHETICAL = re.compile(r"\s*\(.*\)")


def get_descriptor(service_type: str) -> ServiceDescriptor | None:
    return PRICING_DESCRIPTORS.get(service_type)


def price_service(service_type: str, config: dict[str, Any] | None = None, region: str = "eastus") -> CostBreakdown:
    """Itemized monthly cost for one service; unknown types get the flat estimate."""
    descriptor = PRICING_DESCRIPTORS.get(service_type)
    if descriptor is None:
        return flat_breakdown(service_type)
    return descriptor.calculate_cost(config, region or "eastus")


def default_config(service_type: str) -> dict[str, Any]:
    descriptor = PRICING_DESCRIPTORS.get(service_type)
    return descriptor.default_config() if descriptor else {}


def validate_config(service_type: str, config: dict[str, Any] | None) -> dict[str, Any]:
    descriptor = PRICING_DESCRIPTORS.get(service_type)
    if descriptor is None:
        return dict(config or {})
    return descriptor.validate_config(config)


def visible_fields(service_type: str, config: dict[str, Any] | None = None) -> list[PricingField]:
    descriptor = PRICING_DESCRIPTORS.get(service_type)
    return descriptor.visible_fields(config) if descriptor else []


def derive_sku(service_type: str, config: dict[str, Any] | None) -> str:
    """Short SKU string such as ``Standard S1 (3x)`` from a pricing config."""
    descriptor = PRICING_DESCRIPTORS.get(service_type)
    if descriptor is None:
        return ""
    select = next((f for f in descriptor.fields if f.type == "select"), None)
    if select is None:
        return ""

    config = config or {}
    value = config.get(select.key)
    if not value:
        return ""
    label = _PARENTHETICAL.sub("", select.option_label(str(value)), count=1)

    count_field = next((f for f in descriptor.fields if f.type == "number" and f.key in COUNT_KEYS), None)
    count = config.get(count_field.key) if count_field else None
    if isinstance(count, (int, float)) and not isinstance(count, bool) and count > 1:
        return f"{label} ({count:g}x)"
    return label


__all__ = [
    "COST_ESTIMATES",
    "COUNT_KEYS",
    "PRICING_DESCRIPTORS",
    "REGION_MULTIPLIERS",
    "CostBreakdown",
    "LineItem",
    "PricingField",
    "ServiceDescriptor",
    "default_config",
    "derive_sku",
    "flat_estimate",
    "get_descriptor",
    "price_service",
    "region_multiplier",
    "validate_config",
    "visible_fields",
]
