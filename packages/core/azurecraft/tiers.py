"""Tier classification: maps a service category to its left-to-right lane."""

from __future__ import annotations

CATEGORIES = (
    "compute",
    "networking",
    "databases",
    "storage",
    "security",
    "integration",
    "ai-ml",
    "analytics",
    "devops",
    "identity",
    "management",
    "web",
    "containers",
    "messaging",
)

DEFAULT_TIER = 2

# Lower tier = further left (or higher up when the layout is transposed)
TIER_ORDER: dict[str, int] = {
    "security": 0,
    "identity": 0,
    "networking": 1,
    "compute": 2,
    "containers": 2,
    "integration": 2,
    "messaging": 2,
    "web": 2,
    "databases": 3,
    "storage": 3,
    "ai-ml": 4,
    "analytics": 4,
    "management": 5,
    "devops": 5,
}

_TIER_LABELS = {
    0: "Security & Identity",
    1: "Networking",
    2: "Compute & Integration",
    3: "Data & Storage",
    4: "AI/ML & Analytics",
    5: "Management & DevOps",
}

# Palette category of each service type, used when a node arrives without one
SERVICE_CATEGORIES: dict[str, str] = {
    "app-service": "web",
    "function-app": "compute",
    "virtual-machine": "compute",
    "container-apps": "containers",
    "aks": "containers",
    "azure-sql": "databases",
    "cosmos-db": "databases",
    "storage-account": "storage",
    "redis-cache": "databases",
    "virtual-network": "networking",
    "application-gateway": "networking",
    "load-balancer": "networking",
    "front-door": "networking",
    "key-vault": "security",
    "api-management": "integration",
    "service-bus": "messaging",
    "event-hub": "messaging",
    "azure-openai": "ai-ml",
    "entra-id": "identity",
    "log-analytics": "management",
    "application-insights": "management",
    "ai-search": "ai-ml",
    "ddos-protection": "security",
    "event-grid": "integration",
    "static-web-app": "web",
    "resource-group": "management",
}


def tier_for_category(category: str | None) -> int:
    """Tier index for a category; unknown categories land in the middle tier."""
    if category is None:
        return DEFAULT_TIER
    return TIER_ORDER.get(category, DEFAULT_TIER)


def tier_label(tier: int) -> str:
    return _TIER_LABELS.get(tier, "Other")


def category_for_service(service_type: str) -> str:
    return SERVICE_CATEGORIES.get(service_type, "compute")
