"""East US pay-as-you-go list prices (USD / month) and regional multipliers.

Tables are keyed by the option values used on the pricing forms. Hourly list
prices are already converted at 730 hours per month.
"""

from __future__ import annotations

import logging

log = logging.getLogger(__name__)

HOURS_PER_MONTH = 730

REGION_MULTIPLIERS: dict[str, float] = {
    "eastus": 1.0,
    "eastus2": 1.0,
    "westus": 1.02,
    "westus2": 1.0,
    "centralus": 1.0,
    "northeurope": 1.08,
    "westeurope": 1.12,
    "uksouth": 1.10,
    "southeastasia": 1.06,
    "australiaeast": 1.15,
}


def region_multiplier(region: str | None) -> float:
    if not region:
        return 1.0
    mul = REGION_MULTIPLIERS.get(region)
    if mul is None:
        log.debug("No price multiplier for region %r, using East US prices", region)
        return 1.0
    return mul


# Compute

APP_SERVICE_RATES: dict[str, float] = {
    "free-f1": 0.0,
    "shared-d1": 9.49,
    "basic-b1": 54.75,
    "basic-b2": 109.50,
    "basic-b3": 219.00,
    "standard-s1": 73.00,
    "standard-s2": 146.00,
    "standard-s3": 292.00,
    "premium-p1v3": 138.70,
    "premium-p2v3": 277.40,
    "premium-p3v3": 554.80,
    "isolated-i1v2": 298.00,
    "isolated-i2v2": 596.00,
}

# Windows licensing on top of the Linux rate
WINDOWS_PREMIUM = 0.08

FUNCTION_APP_CONSUMPTION = {
    "per_million_executions": 0.20,
    "per_gb_second": 0.000016,
    "free_executions": 1_000_000,
    "free_gb_seconds": 400_000,
}

FUNCTION_APP_PREMIUM_RATES: dict[str, float] = {
    "premium-ep1": 150.74,
    "premium-ep2": 301.49,
    "premium-ep3": 602.98,
}

VM_RATES: dict[str, float] = {
    "b1s": 7.59,
    "b2s": 30.37,
    "b2ms": 60.74,
    "d2s-v5": 70.08,
    "d4s-v5": 140.16,
    "d8s-v5": 280.32,
    "d2as-v5": 62.05,
    "d4as-v5": 124.10,
    "e2s-v5": 91.98,
    "e4s-v5": 183.96,
    "f2s-v2": 61.32,
    "f4s-v2": 122.64,
}

CONTAINER_APPS_CONSUMPTION = {
    "per_vcpu_second": 0.000024,
    "per_gib_second": 0.000003,
    "free_vcpu_seconds": 180_000,
    "free_gib_seconds": 360_000,
}

CONTAINER_APPS_DEDICATED_RATES: dict[str, float] = {
    "dedicated-d4": 215.35,
    "dedicated-d8": 430.70,
    "dedicated-d16": 861.40,
}

AKS_CLUSTER_MANAGEMENT: dict[str, float] = {
    "free": 0.0,
    "standard": 73.00,
    "premium": 292.00,
}

# Databases

# tier -> (base, per GB above the included storage)
AZURE_SQL_DTU_RATES: dict[str, tuple[float, float]] = {
    "basic-5dtu": (4.99, 0.085),
    "standard-10dtu": (14.72, 0.085),
    "standard-20dtu": (29.44, 0.085),
    "standard-50dtu": (73.60, 0.085),
    "standard-100dtu": (147.20, 0.085),
    "premium-125dtu": (465.00, 0.25),
    "premium-250dtu": (930.00, 0.25),
    "premium-500dtu": (1860.00, 0.25),
}

AZURE_SQL_INCLUDED_STORAGE_GB = {"basic": 2, "standard": 250, "premium": 500}

# tier -> (per vCore, per GB storage)
AZURE_SQL_VCORE_RATES: dict[str, tuple[float, float]] = {
    "general-purpose": (120.67, 0.115),
    "business-critical": (349.63, 0.25),
    "hyperscale": (120.67, 0.25),
}

COSMOS_DB_RATES = {
    "provisioned_per_100_ru": 5.84,
    "autoscale_per_100_ru": 8.76,
    "serverless_per_million_ru": 0.25,
    "per_gb_storage": 0.25,
}

REDIS_RATES: dict[str, float] = {
    "basic-c0": 16.37,
    "basic-c1": 40.15,
    "basic-c2": 62.05,
    "basic-c3": 124.10,
    "standard-c0": 40.15,
    "standard-c1": 80.30,
    "standard-c2": 155.13,
    "standard-c3": 310.25,
    "premium-p1": 225.04,
    "premium-p2": 449.33,
    "premium-p3": 914.71,
    "premium-p4": 1793.59,
}

# Storage

STORAGE_RATES: dict[str, float] = {
    "hot-lrs": 0.018,
    "hot-zrs": 0.023,
    "hot-grs": 0.036,
    "hot-ragrs": 0.046,
    "cool-lrs": 0.010,
    "cool-zrs": 0.013,
    "cool-grs": 0.020,
    "archive-lrs": 0.00099,
    "archive-grs": 0.00198,
}

# per 10K write operations
STORAGE_TRANSACTION_RATES: dict[str, float] = {
    "hot": 0.0044,
    "cool": 0.010,
    "archive": 0.50,
}

# Networking

VNET_PEERING_PER_GB = {"inbound": 0.01, "outbound": 0.01}

# tier -> (fixed, per capacity unit)
APP_GATEWAY_RATES: dict[str, tuple[float, float]] = {
    "standard-v2": (179.58, 5.84),
    "waf-v2": (262.80, 5.84),
}

LOAD_BALANCER_RATES = {
    "basic": 0.0,
    "standard": 18.25,
    "included_rules": 5,
    "per_extra_rule": 7.30,
    "per_gb_processed": 0.005,
}

FRONT_DOOR_RATES: dict[str, float] = {
    "standard": 335.00,
    "premium": 615.00,
}

# Security

KEY_VAULT_RATES = {
    "per_10k_operations": 0.03,
    "per_certificate_renewal": 3.00,
    "per_hsm_key": 1.00,
}

DDOS_RATES: dict[str, float] = {
    "ip-protection": 199.00,
    "network-protection": 2944.00,
}

# Identity

ENTRA_ID_RATES: dict[str, float] = {
    "free": 0.0,
    "p1": 6.00,
    "p2": 9.00,
}

# Integration

APIM_RATES: dict[str, float] = {
    "consumption": 3.50,
    "developer": 48.36,
    "basic": 151.13,
    "standard": 677.08,
    "premium": 2797.57,
}

SERVICE_BUS_RATES = {
    "basic_per_million_ops": 0.05,
    "standard_base": 9.81,
    "standard_per_million_ops": 0.01,
    "premium_per_messaging_unit": 668.86,
}

# per throughput / processing unit
EVENT_HUB_RATES: dict[str, float] = {
    "basic": 10.95,
    "standard": 21.90,
    "premium": 87.60,
    "dedicated": 6570.00,
}

EVENT_GRID_RATES = {
    "per_million_ops": 0.60,
    "free_ops": 100_000,
}

# AI

# model -> (per million input tokens, per million output tokens)
AZURE_OPENAI_RATES: dict[str, tuple[float, float]] = {
    "gpt-4o": (2.50, 10.00),
    "gpt-4o-mini": (0.15, 0.60),
    "gpt-4-turbo": (10.00, 30.00),
    "gpt-35-turbo": (0.50, 1.50),
    "text-embedding-ada-002": (0.10, 0.0),
    "text-embedding-3-small": (0.02, 0.0),
}

AI_SEARCH_RATES: dict[str, float] = {
    "free": 0.0,
    "basic": 75.19,
    "standard-s1": 250.39,
    "standard-s2": 1001.56,
    "standard-s3": 2003.12,
}

# Management

LOG_ANALYTICS_RATES = {
    "per_gb_ingestion": 2.76,
    "free_gb": 5,
    "free_retention_days": 31,
    "per_gb_per_30_extra_days": 0.10,
}

APP_INSIGHTS_RATES = {
    "per_gb_ingestion": 2.76,
    "free_gb": 5,
}

# Web

STATIC_WEB_APP_RATES: dict[str, float] = {
    "free": 0.0,
    "standard": 9.00,
}
