"""Architecture linter: Well-Architected checks over a diagram."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from azurecraft.diagram import CostSummary, Edge, Finding, Node
from azurecraft.layout import group_nesting

log = logging.getLogger(__name__)

COMPUTE_TYPES = ("app-service", "function-app", "container-apps", "aks", "virtual-machine")
DATA_TYPES = ("azure-sql", "cosmos-db", "storage-account", "redis-cache", "azure-openai", "ai-search")
SENSITIVE_TYPES = ("azure-sql", "cosmos-db", "storage-account", "redis-cache", "key-vault")
PUBLIC_FACING_TYPES = ("app-service", "function-app", "static-web-app", "container-apps", "aks")
INGRESS_TYPES = ("front-door", "application-gateway", "api-management")
WEB_FACING_TYPES = ("front-door", "application-gateway")
ENTRY_POINT_TYPES = ("front-door", "application-gateway", "load-balancer", "api-management")
LIFECYCLE_KEYWORDS = ("lifecycle", "tier", "archive", "cool")

MIN_DESCRIPTION_LENGTH = 10
LARGE_ARCHITECTURE = 5
MIN_SUBNETS = 2

CRITICAL_WEIGHT = 20
WARNING_WEIGHT = 5
MAX_PASSING_WARNINGS = 2


@dataclass
class LintContext:
    """Pre-split view of the graph shared by every rule."""

    services: list[Node]
    groups: list[Node]
    edges: list[Edge]
    cost_summary: CostSummary | None = None
    budget_monthly: float | None = None
    service_types: set[str] = field(default_factory=set)
    connected: set[str] = field(default_factory=set)

    @classmethod
    def build(
        cls,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        cost_summary: CostSummary | None = None,
        budget_monthly: float | None = None,
    ) -> LintContext:
        ids = {n.id for n in nodes}
        resolved = [e for e in edges if e.source in ids and e.target in ids]
        if len(resolved) != len(edges):
            log.debug("Linting without %d dangling edge(s)", len(edges) - len(resolved))
        services = [n for n in nodes if not n.is_group]
        return cls(
            services=services,
            groups=[n for n in nodes if n.is_group],
            edges=resolved,
            cost_summary=cost_summary,
            budget_monthly=budget_monthly,
            service_types={n.data.service_type for n in services},
            connected={e.source for e in edges} | {e.target for e in edges},
        )

    def of_type(self, *service_types: str) -> list[Node]:
        return [n for n in self.services if n.data.service_type in service_types]

    def has_any(self, *service_types: str) -> bool:
        return any(t in self.service_types for t in service_types)

    def compute_services(self) -> list[Node]:
        return [n for n in self.services if n.data.category in ("compute", "containers")]

    def vnets(self) -> list[Node]:
        return [g for g in self.groups if g.data.group_type == "virtual-network"]

    def linked(self, node_id: str, others: set[str]) -> bool:
        """True when an edge in either direction joins ``node_id`` to one of ``others``."""
        return any(
            (e.source == node_id and e.target in others) or (e.target == node_id and e.source in others)
            for e in self.edges
        )


@dataclass
class LintReport:
    findings: list[Finding]
    score: int
    passed: bool

    @property
    def critical(self) -> int:
        return sum(1 for f in self.findings if f.severity == "critical")

    @property
    def warnings(self) -> int:
        return sum(1 for f in self.findings if f.severity == "warning")


def lint(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    cost_summary: CostSummary | None = None,
    *,
    budget_monthly: float | None = None,
) -> list[Finding]:
    """Run every rule in order and concatenate the findings."""
    ctx = LintContext.build(nodes, edges, cost_summary, budget_monthly)
    findings: list[Finding] = []
    for rule in RULES:
        findings.extend(rule(ctx))
    return findings


def review(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    cost_summary: CostSummary | None = None,
    *,
    budget_monthly: float | None = None,
) -> LintReport:
    findings = lint(nodes, edges, cost_summary, budget_monthly=budget_monthly)
    return score_findings(findings)


def score_findings(findings: list[Finding]) -> LintReport:
    critical = sum(1 for f in findings if f.severity == "critical")
    warning = sum(1 for f in findings if f.severity == "warning")
    score = max(0, 100 - CRITICAL_WEIGHT * critical - WARNING_WEIGHT * warning)
    return LintReport(findings=findings, score=score, passed=critical == 0 and warning <= MAX_PASSING_WARNINGS)


def _check_orphan_service(ctx: LintContext) -> list[Finding]:
    return [
        Finding(
            rule="orphan_service",
            pillar="reliability",
            severity="critical",
            node_id=n.id,
            title="Orphan service: no connections",
            description=f"{n.data.display_name} has no connections to any other service.",
            recommendation="Connect this service to at least one other service or remove it from the diagram.",
        )
        for n in ctx.services
        if n.id not in ctx.connected
    ]


def _check_missing_app_insights(ctx: LintContext) -> list[Finding]:
    if not ctx.services or ctx.has_any("application-insights"):
        return []
    return [
        Finding(
            rule="missing_app_insights",
            pillar="operational-excellence",
            severity="critical",
            title="Missing Application Insights",
            description=(
                "No Application Insights found. APM, distributed tracing and live metrics are unavailable."
            ),
            recommendation="Add Application Insights and connect it to all compute services via service-endpoint.",
        )
    ]


def _check_missing_ddos_protection(ctx: LintContext) -> list[Finding]:
    if not ctx.has_any(*WEB_FACING_TYPES) or ctx.has_any("ddos-protection"):
        return []
    return [
        Finding(
            rule="missing_ddos_protection",
            pillar="security",
            severity="warning",
            title="Missing DDoS Protection",
            description="Web-facing architecture detected (Front Door or App Gateway) but no DDoS Protection plan.",
            recommendation="Add Azure DDoS Protection Standard to protect public-facing endpoints.",
        )
    ]


def _check_missing_key_vault(ctx: LintContext) -> list[Finding]:
    if not ctx.services or ctx.has_any("key-vault"):
        return []
    return [
        Finding(
            rule="missing_key_vault",
            pillar="security",
            severity="critical",
            title="Missing Key Vault",
            description="No Key Vault found. Secrets, certificates and encryption keys have no centralized management.",
            recommendation="Add Azure Key Vault and connect all compute services via private-endpoint with managed identity.",
        )
    ]


def _check_compute_without_key_vault(ctx: LintContext) -> list[Finding]:
    vaults = {n.id for n in ctx.of_type("key-vault")}
    if not vaults:
        return []
    return [
        Finding(
            rule="compute_without_key_vault",
            pillar="security",
            severity="warning",
            node_id=n.id,
            title="Compute not connected to Key Vault",
            description=f"{n.data.display_name} is not connected to Key Vault for secrets management.",
            recommendation="Add a private-endpoint connection from this compute service to Key Vault.",
        )
        for n in ctx.of_type(*COMPUTE_TYPES)
        if not ctx.linked(n.id, vaults)
    ]


def _check_public_data_inbound(ctx: LintContext) -> list[Finding]:
    out = []
    for n in ctx.of_type(*DATA_TYPES):
        if any(e.target == n.id and e.connection_type == "public" for e in ctx.edges):
            out.append(
                Finding(
                    rule="public_data_inbound",
                    pillar="security",
                    severity="warning",
                    node_id=n.id,
                    title="Data service has public inbound connection",
                    description=(
                        f"{n.data.display_name} receives traffic over a public connection. "
                        "Data services should use private endpoints."
                    ),
                    recommendation="Change the connection type to private-endpoint.",
                )
            )
    return out


def _check_flat_vnet(ctx: LintContext) -> list[Finding]:
    vnets = ctx.vnets()
    if not vnets:
        return []
    nesting = group_nesting(ctx.groups)
    by_id = {g.id: g for g in ctx.groups}

    def _enclosing_vnet(group_id: str) -> str | None:
        seen = {group_id}
        parent = nesting.get(group_id)
        while parent is not None and parent not in seen:
            if by_id[parent].data.group_type == "virtual-network":
                return parent
            seen.add(parent)
            parent = nesting.get(parent)
        return None

    subnet_counts: dict[str, int] = {}
    for g in ctx.groups:
        if g.data.group_type != "subnet":
            continue
        vnet = _enclosing_vnet(g.id)
        if vnet is not None:
            subnet_counts[vnet] = subnet_counts.get(vnet, 0) + 1

    out = []
    for vnet in vnets:
        count = subnet_counts.get(vnet.id, 0)
        if count >= MIN_SUBNETS:
            continue
        detail = "has no subnet segmentation" if count == 0 else "has a single subnet"
        out.append(
            Finding(
                rule="flat_vnet",
                pillar="security",
                severity="warning",
                node_id=vnet.id,
                title="Flat VNet: no subnet segmentation",
                description=f"{vnet.data.display_name} {detail}. Services share the same network segment.",
                recommendation="Add at least 2 subnets (App Subnet, Data Subnet) for network segmentation and NSG isolation.",
            )
        )
    return out


def _check_missing_log_analytics(ctx: LintContext) -> list[Finding]:
    if not ctx.services or ctx.has_any("log-analytics"):
        return []
    return [
        Finding(
            rule="missing_log_analytics",
            pillar="operational-excellence",
            severity="warning",
            title="Missing Log Analytics",
            description=(
                "No Log Analytics workspace found. Platform logs, metrics and security events have no central aggregation."
            ),
            recommendation="Add a Log Analytics workspace and route all resource diagnostic settings to it.",
        )
    ]


def _check_missing_entra_id(ctx: LintContext) -> list[Finding]:
    if not ctx.services or ctx.has_any("entra-id"):
        return []
    return [
        Finding(
            rule="missing_entra_id",
            pillar="security",
            severity="warning",
            title="Missing Entra ID",
            description="No identity provider found. Authentication and RBAC are not represented in the architecture.",
            recommendation="Add Entra ID for user authentication, managed identities and role-based access control.",
        )
    ]


def _check_database_without_cache(ctx: LintContext) -> list[Finding]:
    if not ctx.has_any("azure-sql", "cosmos-db") or ctx.has_any("redis-cache"):
        return []
    return [
        Finding(
            rule="database_without_cache",
            pillar="performance",
            severity="warning",
            title="Database without caching layer",
            description="Database services exist but no Redis Cache for response caching and session state.",
            recommendation="Add Redis Cache to reduce database load and improve response latency.",
        )
    ]


def _check_no_entry_point(ctx: LintContext) -> list[Finding]:
    if len(ctx.services) <= LARGE_ARCHITECTURE or ctx.has_any(*ENTRY_POINT_TYPES):
        return []
    return [
        Finding(
            rule="no_entry_point",
            pillar="reliability",
            severity="warning",
            title="No load balancer or entry point",
            description=(
                f"Architecture has {len(ctx.services)} services but no Front Door, App Gateway, "
                "Load Balancer or API Management for traffic distribution."
            ),
            recommendation="Add a load balancer or API gateway as the entry point for reliability and scalability.",
        )
    ]


def _check_compute_without_app_insights(ctx: LintContext) -> list[Finding]:
    insights = {n.id for n in ctx.of_type("application-insights")}
    if not insights:
        return []
    return [
        Finding(
            rule="compute_without_app_insights",
            pillar="operational-excellence",
            severity="info",
            node_id=n.id,
            title="Compute not connected to Application Insights",
            description=f"{n.data.display_name} is not connected to Application Insights for APM and distributed tracing.",
            recommendation="Add a service-endpoint connection from Application Insights to this compute service.",
        )
        for n in ctx.of_type(*COMPUTE_TYPES)
        if not ctx.linked(n.id, insights)
    ]


def _check_missing_description(ctx: LintContext) -> list[Finding]:
    return [
        Finding(
            rule="missing_description",
            pillar="operational-excellence",
            severity="info",
            node_id=n.id,
            title="Missing service description",
            description=f"{n.data.display_name} has no meaningful description explaining its role.",
            recommendation="Add a description mentioning HA, security, SKU, cost or scaling details.",
        )
        for n in ctx.services
        if len(n.data.description.strip()) < MIN_DESCRIPTION_LENGTH
    ]


def _check_no_virtual_network(ctx: LintContext) -> list[Finding]:
    if len(ctx.services) <= LARGE_ARCHITECTURE:
        return []
    if ctx.vnets():
        return []
    return [
        Finding(
            rule="no_virtual_network",
            pillar="security",
            severity="warning",
            title="No Virtual Network",
            description=f"Architecture has {len(ctx.services)} services but no Virtual Network for network isolation.",
            recommendation="Add a VNet and place compute and data services inside it with appropriate subnets.",
        )
    ]


def _check_storage_without_lifecycle(ctx: LintContext) -> list[Finding]:
    out = []
    for n in ctx.of_type("storage-account"):
        text = n.data.description.lower()
        if any(k in text for k in LIFECYCLE_KEYWORDS):
            continue
        out.append(
            Finding(
                rule="storage_without_lifecycle",
                pillar="cost",
                severity="info",
                node_id=n.id,
                title="Storage without lifecycle management",
                description=f"{n.data.display_name} description doesn't mention lifecycle policies for cost optimization.",
                recommendation="Consider adding lifecycle management to auto-tier data to Cool or Archive storage.",
            )
        )
    return out


def _check_sensitive_service_exposed(ctx: LintContext) -> list[Finding]:
    out = []
    for n in ctx.of_type(*SENSITIVE_TYPES):
        exposed = any(
            (e.source == n.id or e.target == n.id) and e.connection_type == "public" for e in ctx.edges
        )
        if exposed:
            out.append(
                Finding(
                    rule="sensitive_service_exposed",
                    pillar="security",
                    severity="critical",
                    node_id=n.id,
                    title="Sensitive service exposed",
                    description=(
                        f"{n.data.display_name} ({n.data.service_type}) is using a public connection "
                        "instead of a private endpoint."
                    ),
                    recommendation=(
                        "Use private-endpoint connections for databases, storage and key vaults "
                        "to keep them isolated from the public internet."
                    ),
                )
            )
    return out


def _check_ingress_protection(ctx: LintContext) -> list[Finding]:
    public_facing = ctx.of_type(*PUBLIC_FACING_TYPES)
    if not public_facing:
        return []

    ingress = {n.id for n in ctx.of_type(*INGRESS_TYPES)}
    if not ingress:
        names = ", ".join(n.data.display_name for n in public_facing)
        return [
            Finding(
                rule="missing_ingress_protection",
                pillar="security",
                severity="critical",
                title="Missing ingress protection",
                description=(
                    f"Architecture has public-facing services ({names}) but no ingress protection "
                    "(Front Door, App Gateway or API Management)."
                ),
                recommendation=(
                    "Add Front Door or Application Gateway to provide WAF, SSL termination "
                    "and global load balancing in front of public-facing services."
                ),
            )
        ]

    return [
        Finding(
            rule="service_not_behind_ingress",
            pillar="security",
            severity="warning",
            node_id=n.id,
            title="Service not behind ingress",
            description=f"{n.data.display_name} is not connected to an ingress service (Front Door/App Gateway).",
            recommendation="Route traffic through the ingress layer for security and performance.",
        )
        for n in public_facing
        if not any(e.source in ingress and e.target == n.id for e in ctx.edges)
    ]


def _check_missing_vnet(ctx: LintContext) -> list[Finding]:
    if not ctx.compute_services() or ctx.vnets():
        return []
    return [
        Finding(
            rule="missing_vnet",
            pillar="security",
            severity="warning",
            title="Missing Virtual Network",
            description="Architecture has compute services but no Virtual Network for network isolation.",
            recommendation="Use Virtual Networks to isolate resources and control traffic flow.",
        )
    ]


def _check_services_outside_vnet(ctx: LintContext) -> list[Finding]:
    if not ctx.vnets():
        return []
    network_groups = {g.id for g in ctx.groups if g.data.group_type in ("virtual-network", "subnet")}
    outside = [n for n in ctx.compute_services() if n.parent_id not in network_groups]
    if not outside:
        return []
    names = ", ".join(n.data.display_name for n in outside)
    return [
        Finding(
            rule="services_outside_vnet",
            pillar="security",
            severity="warning",
            title="Services not in Virtual Network",
            description=f"{len(outside)} compute service(s) are not placed in the Virtual Network: {names}",
            recommendation="Place compute services in subnets within the VNet for proper network isolation.",
        )
    ]


def _check_database_not_connected_to_compute(ctx: LintContext) -> list[Finding]:
    compute = {n.id for n in ctx.compute_services()}
    if not compute:
        return []
    return [
        Finding(
            rule="database_not_connected_to_compute",
            pillar="reliability",
            severity="warning",
            node_id=n.id,
            title="Database not connected to compute",
            description=f"{n.data.display_name} is not connected to any compute services.",
            recommendation="Connect databases to the compute services that use them.",
        )
        for n in ctx.services
        if n.data.category == "databases" and not any(e.source in compute and e.target == n.id for e in ctx.edges)
    ]


def _check_budget(ctx: LintContext) -> list[Finding]:
    if ctx.budget_monthly is None or ctx.cost_summary is None:
        return []
    monthly = ctx.cost_summary.monthly
    if monthly <= ctx.budget_monthly:
        return []
    return [
        Finding(
            rule="budget_exceeded",
            pillar="cost",
            severity="warning",
            title="Monthly budget exceeded",
            description=f"Estimated monthly cost ${monthly:,.2f} exceeds the ${ctx.budget_monthly:,.2f} budget.",
            recommendation="Right-size the most expensive services or lower tiers for non-production workloads.",
        )
    ]


RULES = (
    _check_orphan_service,
    _check_missing_app_insights,
    _check_missing_ddos_protection,
    _check_missing_key_vault,
    _check_compute_without_key_vault,
    _check_public_data_inbound,
    _check_flat_vnet,
    _check_missing_log_analytics,
    _check_missing_entra_id,
    _check_database_without_cache,
    _check_no_entry_point,
    _check_compute_without_app_insights,
    _check_missing_description,
    _check_no_virtual_network,
    _check_storage_without_lifecycle,
    _check_sensitive_service_exposed,
    _check_ingress_protection,
    _check_missing_vnet,
    _check_services_outside_vnet,
    _check_database_not_connected_to_compute,
    _check_budget,
)
