"""Shared fixtures for core tests."""

from __future__ import annotations

import pytest
from azurecraft.diagram import DiagramGraph, Edge, Node, NodeData, Position


def service(
    id: str,
    service_type: str,
    *,
    x: float = 0.0,
    y: float = 0.0,
    parent_id: str | None = None,
    description: str = "",
    **data,
) -> Node:
    return Node(
        id=id,
        position=Position(x=x, y=y),
        parent_id=parent_id,
        data=NodeData(service_type=service_type, display_name=data.pop("display_name", id), description=description, **data),
    )


def group(
    id: str,
    group_type: str = "resource-group",
    *,
    x: float = 0.0,
    y: float = 0.0,
    parent_id: str | None = None,
    width: float = 400.0,
    height: float = 200.0,
) -> Node:
    return Node(
        id=id,
        kind="group",
        position=Position(x=x, y=y),
        parent_id=parent_id,
        width=width,
        height=height,
        data=NodeData(service_type="resource-group", display_name=id, group_type=group_type),
    )


def edge(source: str, target: str, connection_type: str = "public", id: str | None = None) -> Edge:
    return Edge(id=id or f"{source}-{target}", source=source, target=target, connection_type=connection_type)


@pytest.fixture
def make_service():
    return service


@pytest.fixture
def make_group():
    return group


@pytest.fixture
def make_edge():
    return edge


@pytest.fixture
def web_app_graph() -> DiagramGraph:
    """A well-formed web architecture: nested groups, every baseline service, private data paths."""
    nodes = [
        group("rg", x=20, y=20, width=1200, height=800),
        group("vnet", "virtual-network", x=40, y=60, parent_id="rg", width=1000, height=600),
        group("app-subnet", "subnet", x=40, y=60, parent_id="vnet"),
        group("data-subnet", "subnet", x=480, y=60, parent_id="vnet"),
        service("fd", "front-door", x=1400, y=100, description="Global entry with WAF policy"),
        service("app", "app-service", x=40, y=80, parent_id="app-subnet", description="Web API, 3 instances, zone redundant"),
        service("sql", "azure-sql", x=40, y=80, parent_id="data-subnet", description="Primary relational store, geo backup"),
        service("redis", "redis-cache", x=200, y=80, parent_id="data-subnet", description="Session and response cache"),
        service("kv", "key-vault", x=1400, y=300, description="Secrets and certificates"),
        service("ai", "application-insights", x=1400, y=500, description="APM and distributed tracing"),
        service("la", "log-analytics", x=1400, y=700, description="Central diagnostic log sink"),
        service("entra", "entra-id", x=1400, y=900, description="User sign-in and managed identities"),
        service("ddos", "ddos-protection", x=1400, y=1100, description="Network protection plan for public IPs"),
    ]
    edges = [
        edge("fd", "app"),
        edge("app", "sql", "private-endpoint"),
        edge("app", "redis", "private-endpoint"),
        edge("app", "kv", "private-endpoint"),
        edge("ai", "app", "service-endpoint"),
        edge("la", "ai", "service-endpoint"),
        edge("entra", "app"),
        edge("ddos", "fd"),
    ]
    return DiagramGraph(name="Web App", nodes=nodes, edges=edges)


@pytest.fixture
def chain_graph() -> DiagramGraph:
    """Ungrouped services across four tiers."""
    nodes = [
        service("kv", "key-vault"),
        service("gw", "application-gateway"),
        service("api", "app-service"),
        service("fn", "function-app"),
        service("db", "azure-sql"),
        service("logs", "log-analytics"),
    ]
    edges = [
        edge("gw", "api"),
        edge("gw", "fn"),
        edge("api", "db", "private-endpoint"),
        edge("fn", "db", "private-endpoint"),
        edge("api", "kv", "private-endpoint"),
    ]
    return DiagramGraph(name="Chain", nodes=nodes, edges=edges)
