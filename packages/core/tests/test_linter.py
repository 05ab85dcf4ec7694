"""Tests for the Well-Architected linter."""

from __future__ import annotations

import pytest
from azurecraft.diagram import CostSummary, Edge, Finding
from azurecraft.linter import RULES, LintReport, lint, review, score_findings


def _rules(graph, **kwargs) -> set[str]:
    return {f.rule for f in lint(graph.nodes, graph.edges, **kwargs)}


def _hits(graph, rule: str, **kwargs) -> list[Finding]:
    return [f for f in lint(graph.nodes, graph.edges, **kwargs) if f.rule == rule]


def _finding(severity: str) -> Finding:
    return Finding(rule="r", pillar="security", severity=severity, title="t", description="d", recommendation="r")


class TestBaseline:
    def test_clean_architecture(self, web_app_graph):
        assert lint(web_app_graph.nodes, web_app_graph.edges) == []

    def test_empty_diagram(self):
        assert lint([], []) == []

    def test_single_unconnected_service(self, make_service):
        findings = lint([make_service("vm", "virtual-machine")], [])
        orphans = [f for f in findings if f.rule == "orphan_service"]
        assert len(orphans) == 1
        assert orphans[0].node_id == "vm"
        assert orphans[0].severity == "critical"

    def test_findings_follow_rule_order(self, make_service):
        findings = lint([make_service("vm", "virtual-machine")], [])
        assert findings[0].rule == "orphan_service"
        order = [r.__name__ for r in RULES]
        assert order.index("_check_orphan_service") == 0
        assert order[-1] == "_check_budget"

    def test_dangling_edges_ignored(self, web_app_graph):
        graph = web_app_graph.add_edge(Edge(id="ghost", source="missing", target="sql"))
        assert lint(graph.nodes, graph.edges) == []

    def test_dangling_edge_still_counts_as_reference(self, make_service):
        vm = make_service("vm", "virtual-machine")
        for e in (Edge(id="e", source="vm", target="gone"), Edge(id="e", source="gone", target="vm")):
            assert [f for f in lint([vm], [e]) if f.rule == "orphan_service"] == []

    def test_groups_never_orphans(self, web_app_graph):
        assert not {f.node_id for f in _hits(web_app_graph, "orphan_service")} & {"rg", "vnet"}


class TestMissingServices:
    @pytest.mark.parametrize(
        ("removed", "rule"),
        [
            ("ai", "missing_app_insights"),
            ("ddos", "missing_ddos_protection"),
            ("kv", "missing_key_vault"),
            ("la", "missing_log_analytics"),
            ("entra", "missing_entra_id"),
            ("redis", "database_without_cache"),
        ],
    )
    def test_removal_flagged(self, web_app_graph, removed, rule):
        graph = web_app_graph.remove_node(removed)
        assert rule in _rules(graph)

    def test_no_ddos_needed_without_web_ingress(self, make_service):
        assert "missing_ddos_protection" not in _rules_of([make_service("fn", "function-app")])

    def test_no_entry_point(self, web_app_graph):
        graph = web_app_graph.remove_node("fd")
        assert "no_entry_point" in _rules(graph)

    def test_small_architecture_needs_no_entry_point(self, make_service):
        nodes = [make_service(f"fn{i}", "function-app") for i in range(5)]
        assert "no_entry_point" not in _rules_of(nodes)

    def test_no_virtual_network(self, web_app_graph):
        graph = web_app_graph.remove_node("vnet")
        rules = _rules(graph)
        assert "no_virtual_network" in rules
        assert "flat_vnet" not in rules


class TestConnections:
    def test_orphan_in_graph(self, web_app_graph, make_service):
        graph = web_app_graph.add_node(make_service("bus", "service-bus", description="Order events queue"))
        assert [f.node_id for f in _hits(graph, "orphan_service")] == ["bus"]

    def test_compute_without_key_vault(self, web_app_graph):
        graph = web_app_graph.remove_edge("app-kv")
        assert [f.node_id for f in _hits(graph, "compute_without_key_vault")] == ["app"]

    def test_compute_without_app_insights(self, web_app_graph):
        graph = web_app_graph.remove_edge("ai-app")
        hits = _hits(graph, "compute_without_app_insights")
        assert [f.node_id for f in hits] == ["app"]
        assert hits[0].severity == "info"

    def test_public_data_inbound(self, web_app_graph):
        graph = web_app_graph.add_edge(Edge(id="fd-sql", source="fd", target="sql"))
        assert [f.node_id for f in _hits(graph, "public_data_inbound")] == ["sql"]

    def test_private_data_inbound_is_fine(self, web_app_graph):
        graph = web_app_graph.add_edge(Edge(id="fd-sql", source="fd", target="sql", connection_type="private-endpoint"))
        assert _hits(graph, "public_data_inbound") == []

    def test_sensitive_service_exposed(self, web_app_graph):
        graph = web_app_graph.add_edge(Edge(id="kv-fd", source="kv", target="fd"))
        hits = _hits(graph, "sensitive_service_exposed")
        assert [f.node_id for f in hits] == ["kv"]
        assert hits[0].severity == "critical"
        # Key Vault is sensitive but not a data store
        assert _hits(graph, "public_data_inbound") == []

    def test_database_not_connected_to_compute(self, web_app_graph, make_service, make_edge):
        graph = web_app_graph.add_nodes(
            [make_service("fn", "function-app", description="Background order processor")],
            [make_edge("fd", "fn")],
        )
        assert {f.node_id for f in _hits(graph, "database_not_connected_to_compute")} == {"sql", "redis"}

        wired = graph.add_edge(Edge(id="fn-sql", source="fn", target="sql", connection_type="private-endpoint"))
        assert {f.node_id for f in _hits(wired, "database_not_connected_to_compute")} == {"redis"}

    def test_web_tier_alone_is_not_compute(self, web_app_graph):
        assert _hits(web_app_graph, "database_not_connected_to_compute") == []


class TestIngress:
    def test_missing_ingress_protection(self, web_app_graph):
        graph = web_app_graph.remove_node("fd")
        [hit] = _hits(graph, "missing_ingress_protection")
        assert hit.severity == "critical"
        assert hit.node_id is None
        assert "app" in hit.description

    def test_service_not_behind_ingress(self, web_app_graph, make_service, make_edge):
        graph = web_app_graph.add_nodes(
            [make_service("admin", "app-service", description="Internal admin portal")],
            [make_edge("entra", "admin")],
        )
        hits = _hits(graph, "service_not_behind_ingress")
        assert [f.node_id for f in hits] == ["admin"]
        assert _hits(graph, "missing_ingress_protection") == []

    def test_no_public_facing_services(self, make_service):
        assert "missing_ingress_protection" not in _rules_of([make_service("sql", "azure-sql")])


class TestNetwork:
    def test_single_subnet(self, web_app_graph):
        graph = web_app_graph.remove_node("data-subnet")
        [hit] = _hits(graph, "flat_vnet")
        assert hit.node_id == "vnet"
        assert "single subnet" in hit.description

    def test_vnet_without_subnets(self, make_group):
        [hit] = _hits_of([make_group("vnet", "virtual-network")], "flat_vnet")
        assert "no subnet segmentation" in hit.description

    def test_inferred_nesting_counts(self, make_group):
        groups = [
            make_group("rg"),
            make_group("vnet", "virtual-network"),
            make_group("s1", "subnet"),
            make_group("s2", "subnet"),
        ]
        assert _hits_of(groups, "flat_vnet") == []

    def test_compute_without_vnet(self, make_service):
        [hit] = _hits_of([make_service("vm", "virtual-machine")], "missing_vnet")
        assert hit.severity == "warning"
        assert hit.node_id is None

    def test_no_compute_needs_no_vnet(self, make_service):
        assert "missing_vnet" not in _rules_of([make_service("sql", "azure-sql")])

    def test_compute_outside_vnet(self, make_service, make_group):
        nodes = [
            make_group("vnet", "virtual-network"),
            make_service("vm", "virtual-machine", display_name="Batch VM"),
            make_service("kv", "key-vault"),
        ]
        [hit] = _hits_of(nodes, "services_outside_vnet")
        assert hit.severity == "warning"
        assert "Batch VM" in hit.description
        assert "missing_vnet" not in _rules_of(nodes)

    def test_compute_in_subnet_or_vnet(self, make_service, make_group):
        nodes = [
            make_group("vnet", "virtual-network"),
            make_group("snet", "subnet", parent_id="vnet"),
            make_service("vm", "virtual-machine", parent_id="snet"),
            make_service("aks", "aks", parent_id="vnet"),
        ]
        assert _hits_of(nodes, "services_outside_vnet") == []

    def test_compute_in_resource_group_only(self, make_service, make_group):
        nodes = [
            make_group("rg"),
            make_group("vnet", "virtual-network", parent_id="rg"),
            make_service("fn", "function-app", parent_id="rg"),
        ]
        assert len(_hits_of(nodes, "services_outside_vnet")) == 1

    def test_web_tier_not_counted_as_compute(self, web_app_graph):
        assert _hits(web_app_graph, "services_outside_vnet") == []
        assert "missing_vnet" not in _rules(web_app_graph.remove_node("vnet"))

    def test_each_vnet_judged_separately(self, make_group):
        groups = [
            make_group("hub", "virtual-network"),
            make_group("spoke", "virtual-network"),
            make_group("h1", "subnet", parent_id="hub"),
            make_group("h2", "subnet", parent_id="hub"),
            make_group("s1", "subnet", parent_id="spoke"),
        ]
        assert [f.node_id for f in _hits_of(groups, "flat_vnet")] == ["spoke"]


class TestHygiene:
    def test_missing_description(self, web_app_graph):
        graph = web_app_graph.update_node("kv", data={"description": "vault"})
        hits = _hits(graph, "missing_description")
        assert [f.node_id for f in hits] == ["kv"]
        assert hits[0].severity == "info"

    def test_whitespace_description(self, web_app_graph):
        graph = web_app_graph.update_node("kv", data={"description": "            "})
        assert [f.node_id for f in _hits(graph, "missing_description")] == ["kv"]

    def test_storage_without_lifecycle(self, web_app_graph, make_service, make_edge):
        graph = web_app_graph.add_nodes(
            [make_service("st", "storage-account", description="Blob uploads for user content")],
            [make_edge("app", "st", "private-endpoint")],
        )
        assert [f.node_id for f in _hits(graph, "storage_without_lifecycle")] == ["st"]

    def test_storage_with_lifecycle(self, web_app_graph, make_service, make_edge):
        graph = web_app_graph.add_nodes(
            [make_service("st", "storage-account", description="Uploads, lifecycle moves blobs to Cool after 30d")],
            [make_edge("app", "st", "private-endpoint")],
        )
        assert _hits(graph, "storage_without_lifecycle") == []


class TestBudget:
    def test_over_budget(self, web_app_graph):
        summary = CostSummary(monthly=5000.0)
        [hit] = _hits(web_app_graph, "budget_exceeded", cost_summary=summary, budget_monthly=1000.0)
        assert hit.pillar == "cost"
        assert "$5,000.00" in hit.description

    def test_within_budget(self, web_app_graph):
        summary = CostSummary(monthly=500.0)
        assert _hits(web_app_graph, "budget_exceeded", cost_summary=summary, budget_monthly=500.0) == []

    def test_no_budget_or_summary(self, web_app_graph):
        assert _hits(web_app_graph, "budget_exceeded", cost_summary=CostSummary(monthly=1e6)) == []
        assert _hits(web_app_graph, "budget_exceeded", budget_monthly=1.0) == []


class TestScoring:
    def test_clean_review(self, web_app_graph):
        report = review(web_app_graph.nodes, web_app_graph.edges)
        assert report == LintReport(findings=[], score=100, passed=True)

    def test_weights(self):
        report = score_findings([_finding("critical"), _finding("warning"), _finding("info")])
        assert report.score == 75
        assert report.critical == 1
        assert report.warnings == 1
        assert report.passed is False

    def test_two_warnings_pass(self):
        assert score_findings([_finding("warning")] * 2).passed is True
        assert score_findings([_finding("warning")] * 3).passed is False

    def test_score_floor(self):
        assert score_findings([_finding("critical")] * 6).score == 0

    def test_review_matches_lint(self, make_service):
        nodes = [make_service("vm", "virtual-machine")]
        report = review(nodes, [])
        assert report.findings == lint(nodes, [])
        assert report.score == max(0, 100 - 20 * report.critical - 5 * report.warnings)


def _rules_of(nodes) -> set[str]:
    return {f.rule for f in lint(nodes, [])}


def _hits_of(nodes, rule: str) -> list[Finding]:
    return [f for f in lint(nodes, []) if f.rule == rule]
