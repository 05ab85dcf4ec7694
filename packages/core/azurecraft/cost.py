"""Cost engine: prices each service node in a diagram and rolls the totals up."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from azurecraft.diagram import CostSummary, Node
from azurecraft.pricing import PRICING_DESCRIPTORS, derive_sku, price_service
from azurecraft.pricing.fallback import flat_breakdown
from azurecraft.pricing.types import CostBreakdown, LineItem, ServiceDescriptor

log = logging.getLogger(__name__)

UNATTRIBUTED = "Unattributed"


@dataclass
class ServiceCost:
    node_id: str
    service_type: str
    display_name: str
    breakdown: CostBreakdown
    sku: str = ""
    group: str = UNATTRIBUTED

    @property
    def monthly(self) -> float:
        return self.breakdown.total


class CostEngine:
    def __init__(self, descriptors: dict[str, ServiceDescriptor] | None = None):
        self.descriptors = PRICING_DESCRIPTORS if descriptors is None else descriptors

    def price_node(self, node: Node, region: str = "eastus") -> CostBreakdown:
        """Descriptor price from the node's config (defaults when unset), else stored cost, else flat estimate."""
        data = node.data
        region = data.region or region
        descriptor = self.descriptors.get(data.service_type)
        if descriptor is not None:
            return descriptor.calculate_cost(data.pricing_config, region)
        if data.monthly_cost is not None:
            return CostBreakdown.from_items([LineItem(label=f"{data.service_type} (stored)", monthly_cost=data.monthly_cost)])
        return flat_breakdown(data.service_type)

    def estimate(self, nodes: Sequence[Node], region: str = "eastus") -> list[ServiceCost]:
        """Price every service node; groups carry no cost."""
        by_id = {n.id: n for n in nodes}
        costs: list[ServiceCost] = []
        for node in nodes:
            if node.is_group:
                continue
            breakdown = self.price_node(node, region)
            costs.append(
                ServiceCost(
                    node_id=node.id,
                    service_type=node.data.service_type,
                    display_name=node.data.display_name,
                    breakdown=breakdown,
                    sku=self._sku(node),
                    group=_owning_group(node, by_id),
                )
            )
        return costs

    def summarize(self, nodes: Sequence[Node], region: str = "eastus") -> CostSummary:
        by_type: dict[str, float] = {}
        by_service: dict[str, float] = {}
        by_group: dict[str, float] = {}
        for cost in self.estimate(nodes, region):
            by_type[cost.service_type] = by_type.get(cost.service_type, 0.0) + cost.monthly
            by_service[cost.display_name] = by_service.get(cost.display_name, 0.0) + cost.monthly
            by_group[cost.group] = by_group.get(cost.group, 0.0) + cost.monthly

        total = round(sum(by_type.values()), 2)
        return CostSummary(
            monthly=total,
            by_service_type=_rounded(by_type),
            by_service=_rounded(by_service),
            by_group=_rounded(by_group),
        )

    def price_nodes(self, nodes: Sequence[Node], region: str = "eastus") -> list[Node]:
        """Return the nodes with ``monthly_cost`` and ``sku`` filled in for every service."""
        priced: list[Node] = []
        for node in nodes:
            if node.is_group:
                priced.append(node)
                continue
            breakdown = self.price_node(node, region)
            update = {"monthly_cost": breakdown.total, "sku": self._sku(node) or node.data.sku}
            priced.append(node.model_copy(update={"data": node.data.model_copy(update=update)}))
        return priced

    def _sku(self, node: Node) -> str:
        descriptor = self.descriptors.get(node.data.service_type)
        if descriptor is None:
            return ""
        return derive_sku(node.data.service_type, descriptor.validate_config(node.data.pricing_config))


def estimate_service(service_type: str, config: dict | None = None, region: str = "eastus") -> float:
    return price_service(service_type, config, region).total


def _owning_group(node: Node, by_id: dict[str, Node]) -> str:
    """Display name of the nearest group up the parent chain."""
    seen = {node.id}
    parent = by_id.get(node.parent_id) if node.parent_id else None
    while parent is not None and parent.id not in seen:
        if parent.is_group:
            return parent.data.display_name
        seen.add(parent.id)
        parent = by_id.get(parent.parent_id) if parent.parent_id else None
    return UNATTRIBUTED


def _rounded(values: dict[str, float]) -> dict[str, float]:
    return {k: round(v, 2) for k, v in values.items()}
