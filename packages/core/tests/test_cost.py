"""Tests for the diagram cost engine."""

from __future__ import annotations

import pytest
from azurecraft.cost import UNATTRIBUTED, CostEngine, estimate_service
from azurecraft.pricing import price_service


@pytest.fixture
def engine():
    return CostEngine()


class TestEstimate:
    def test_skips_groups(self, engine, web_app_graph):
        costs = engine.estimate(web_app_graph.nodes)
        assert {c.node_id for c in costs} == {n.id for n in web_app_graph.services()}

    def test_descriptor_defaults(self, engine, web_app_graph):
        costs = {c.node_id: c for c in engine.estimate(web_app_graph.nodes)}
        assert costs["app"].monthly == 73.0
        assert costs["sql"].monthly == pytest.approx(73.60)
        assert costs["app"].sku == "Standard S1"

    def test_pricing_config_used(self, engine, make_service):
        node = make_service("app", "app-service", pricing_config={"tier": "standard-s1", "instances": 3})
        [cost] = engine.estimate([node])
        assert cost.monthly == pytest.approx(219.0)
        assert cost.sku == "Standard S1 (3x)"

    def test_node_region_overrides(self, engine, make_service):
        node = make_service("app", "app-service", region="westeurope")
        assert engine.price_node(node, "eastus").total == pytest.approx(81.76)

    def test_stored_cost_for_unpriced_type(self, engine, make_service):
        node = make_service("q", "quantum-widget", monthly_cost=42.5)
        breakdown = engine.price_node(node)
        assert breakdown.total == 42.5
        assert breakdown.line_items[0].label == "quantum-widget (stored)"

    def test_descriptor_beats_stored_cost(self, engine, make_service):
        node = make_service("app", "app-service", monthly_cost=999.0)
        assert engine.price_node(node).total == 73.0

    def test_unknown_type_without_stored_cost(self, engine, make_service):
        assert engine.price_node(make_service("q", "quantum-widget")).total == 0.0

    def test_owning_group(self, engine, web_app_graph):
        costs = {c.node_id: c for c in engine.estimate(web_app_graph.nodes)}
        assert costs["app"].group == "app-subnet"
        assert costs["redis"].group == "data-subnet"
        assert costs["fd"].group == UNATTRIBUTED

    def test_custom_descriptor_table(self, make_service):
        engine = CostEngine(descriptors={})
        node = make_service("app", "app-service")
        assert engine.price_node(node).line_items[0].label == "app-service (flat estimate)"


class TestSummarize:
    def test_total_matches_services(self, engine, web_app_graph):
        summary = engine.summarize(web_app_graph.nodes)
        expected = sum(price_service(n.data.service_type).total for n in web_app_graph.services())
        assert summary.monthly == pytest.approx(expected, abs=0.02)
        assert summary.currency == "USD"

    def test_by_service_type(self, engine, web_app_graph):
        summary = engine.summarize(web_app_graph.nodes)
        assert summary.by_service_type["ddos-protection"] == 2944.0
        assert "resource-group" not in summary.by_service_type

    def test_by_service_uses_display_name(self, engine, make_service):
        nodes = [
            make_service("a", "app-service", display_name="Orders API"),
            make_service("b", "app-service", display_name="Orders API"),
        ]
        summary = engine.summarize(nodes)
        assert summary.by_service == {"Orders API": 146.0}

    def test_by_group(self, engine, web_app_graph):
        summary = engine.summarize(web_app_graph.nodes)
        assert summary.by_group["app-subnet"] == 73.0
        assert summary.by_group["data-subnet"] == pytest.approx(73.60 + 80.30)
        assert sum(summary.by_group.values()) == pytest.approx(summary.monthly, abs=0.02)

    def test_region(self, engine, web_app_graph):
        east = engine.summarize(web_app_graph.nodes, "eastus").monthly
        aus = engine.summarize(web_app_graph.nodes, "australiaeast").monthly
        assert aus == pytest.approx(east * 1.15, abs=0.1)

    def test_empty(self, engine):
        summary = engine.summarize([])
        assert summary.monthly == 0.0
        assert summary.by_group == {}


class TestPriceNodes:
    def test_fills_cost_and_sku(self, engine, web_app_graph):
        priced = {n.id: n for n in engine.price_nodes(web_app_graph.nodes)}
        assert priced["app"].data.monthly_cost == 73.0
        assert priced["app"].data.sku == "Standard S1"
        assert priced["rg"].data.monthly_cost is None

    def test_does_not_mutate_input(self, engine, web_app_graph):
        engine.price_nodes(web_app_graph.nodes)
        assert web_app_graph.node("app").data.monthly_cost is None

    def test_keeps_existing_sku_without_descriptor(self, engine, make_service):
        node = make_service("q", "quantum-widget", sku="Q1", monthly_cost=10.0)
        [priced] = engine.price_nodes([node])
        assert priced.data.sku == "Q1"
        assert priced.data.monthly_cost == 10.0


def test_estimate_service():
    assert estimate_service("key-vault") == pytest.approx(3.0)
    assert estimate_service("app-service", {"tier": "basic-b1"}) == pytest.approx(54.75)
