"""Registry of pricing descriptors keyed by service type.

Group containers (resource groups, subnets) carry no price and have no entry.
"""

from __future__ import annotations

from azurecraft.pricing.descriptors.ai import AI_SEARCH, AZURE_OPENAI
from azurecraft.pricing.descriptors.compute import AKS, APP_SERVICE, CONTAINER_APPS, FUNCTION_APP, VIRTUAL_MACHINE
from azurecraft.pricing.descriptors.databases import AZURE_SQL, COSMOS_DB, REDIS_CACHE
from azurecraft.pricing.descriptors.identity import ENTRA_ID
from azurecraft.pricing.descriptors.integration import API_MANAGEMENT, EVENT_GRID, EVENT_HUB, SERVICE_BUS
from azurecraft.pricing.descriptors.management import APPLICATION_INSIGHTS, LOG_ANALYTICS
from azurecraft.pricing.descriptors.networking import APPLICATION_GATEWAY, FRONT_DOOR, LOAD_BALANCER, VIRTUAL_NETWORK
from azurecraft.pricing.descriptors.security import DDOS_PROTECTION, KEY_VAULT
from azurecraft.pricing.descriptors.storage import STORAGE_ACCOUNT
from azurecraft.pricing.descriptors.web import STATIC_WEB_APP
from azurecraft.pricing.types import ServiceDescriptor

PRICING_DESCRIPTORS: dict[str, ServiceDescriptor] = {
    d.service_type: d
    for d in (
        APP_SERVICE,
        FUNCTION_APP,
        VIRTUAL_MACHINE,
        CONTAINER_APPS,
        AKS,
        AZURE_SQL,
        COSMOS_DB,
        STORAGE_ACCOUNT,
        REDIS_CACHE,
        VIRTUAL_NETWORK,
        APPLICATION_GATEWAY,
        LOAD_BALANCER,
        FRONT_DOOR,
        KEY_VAULT,
        DDOS_PROTECTION,
        ENTRA_ID,
        API_MANAGEMENT,
        SERVICE_BUS,
        EVENT_HUB,
        EVENT_GRID,
        AZURE_OPENAI,
        AI_SEARCH,
        LOG_ANALYTICS,
        APPLICATION_INSIGHTS,
        STATIC_WEB_APP,
    )
}

__all__ = ["PRICING_DESCRIPTORS"]
