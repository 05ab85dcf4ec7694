"""Azure SQL, Cosmos DB and Azure Cache for Redis."""

from __future__ import annotations

from typing import Any

from azurecraft.pricing import rates
from azurecraft.pricing.types import LineItem, ServiceDescriptor, number_field, options, select_field


def _azure_sql(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    storage_gb = cfg["storage_gb"]
    if cfg["model"] == "dtu":
        tier = cfg["dtu_tier"]
        base, per_extra_gb = rates.AZURE_SQL_DTU_RATES[tier]
        included = rates.AZURE_SQL_INCLUDED_STORAGE_GB[tier.split("-", 1)[0]]
        extra = max(0, storage_gb - included)
        items = [LineItem(label=f"Compute ({tier})", monthly_cost=base * mul)]
        if extra > 0:
            items.append(LineItem(label=f"Extra Storage ({extra} GB)", monthly_cost=extra * per_extra_gb * mul))
        return items

    tier, vcores = cfg["vcore_tier"], cfg["vcores"]
    per_vcore, per_gb = rates.AZURE_SQL_VCORE_RATES[tier]
    return [
        LineItem(label=f"Compute ({vcores} vCores, {tier})", monthly_cost=per_vcore * vcores * mul),
        LineItem(label=f"Storage ({storage_gb} GB)", monthly_cost=storage_gb * per_gb * mul),
    ]


AZURE_SQL = ServiceDescriptor(
    service_type="azure-sql",
    label="Azure SQL Database",
    fields=[
        select_field(
            "model", "Purchasing Model", "dtu", choices=options(("dtu", "DTU-based"), ("vcore", "vCore-based"))
        ),
        select_field(
            "dtu_tier",
            "DTU Tier",
            "standard-50dtu",
            groups={
                "Basic": options(("basic-5dtu", "Basic (5 DTUs)")),
                "Standard": options(
                    ("standard-10dtu", "Standard S0 (10 DTUs)"),
                    ("standard-20dtu", "Standard S1 (20 DTUs)"),
                    ("standard-50dtu", "Standard S2 (50 DTUs)"),
                    ("standard-100dtu", "Standard S3 (100 DTUs)"),
                ),
                "Premium": options(
                    ("premium-125dtu", "Premium P1 (125 DTUs)"),
                    ("premium-250dtu", "Premium P2 (250 DTUs)"),
                    ("premium-500dtu", "Premium P4 (500 DTUs)"),
                ),
            },
            depends_on=("model", "dtu"),
        ),
        select_field(
            "vcore_tier",
            "vCore Tier",
            "general-purpose",
            choices=options(
                ("general-purpose", "General Purpose"),
                ("business-critical", "Business Critical"),
                ("hyperscale", "Hyperscale"),
            ),
            depends_on=("model", "vcore"),
        ),
        number_field("vcores", "vCores", 4, min=2, max=128, step=2, unit="vCores", depends_on=("model", "vcore")),
        number_field("storage_gb", "Storage", 250, min=1, max=4096, step=10, unit="GB"),
    ],
    calculate=_azure_sql,
)


def _cosmos_db(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    model, storage_gb = cfg["throughput_model"], cfg["storage_gb"]
    storage = LineItem(label=f"Storage ({storage_gb} GB)", monthly_cost=storage_gb * rates.COSMOS_DB_RATES["per_gb_storage"] * mul)
    if model == "serverless":
        million = cfg["million_requests"]
        ru_cost = million * rates.COSMOS_DB_RATES["serverless_per_million_ru"] * mul
        return [LineItem(label=f"Request Units ({million}M)", monthly_cost=ru_cost), storage]

    ru = cfg["ru_per_sec"]
    per_100 = rates.COSMOS_DB_RATES["autoscale_per_100_ru" if model == "autoscale" else "provisioned_per_100_ru"]
    return [LineItem(label=f"Throughput ({ru} RU/s, {model})", monthly_cost=ru / 100 * per_100 * mul), storage]


COSMOS_DB = ServiceDescriptor(
    service_type="cosmos-db",
    label="Azure Cosmos DB",
    fields=[
        select_field(
            "throughput_model",
            "Throughput Model",
            "provisioned",
            choices=options(
                ("provisioned", "Provisioned throughput"),
                ("autoscale", "Autoscale"),
                ("serverless", "Serverless"),
            ),
        ),
        number_field(
            "ru_per_sec",
            "Request Units / sec",
            1000,
            min=400,
            max=1_000_000,
            step=100,
            unit="RU/s",
            depends_on=("throughput_model", ["provisioned", "autoscale"]),
        ),
        number_field(
            "million_requests",
            "Million RUs / month",
            10,
            min=0,
            max=10_000,
            unit="M RUs",
            depends_on=("throughput_model", "serverless"),
        ),
        number_field("storage_gb", "Storage", 50, min=1, max=10_000, step=10, unit="GB"),
    ],
    calculate=_cosmos_db,
)

_REDIS_PREMIUM = ["premium-p1", "premium-p2", "premium-p3", "premium-p4"]


def _redis_cache(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    tier, shards = cfg["tier"], cfg["shards"]
    premium = tier.startswith("premium")
    # Shards only exist on clustered premium caches
    multiplier = shards if premium else 1
    label = f"Cache ({tier} x {shards} shards)" if premium and shards > 1 else f"Cache ({tier})"
    return [LineItem(label=label, monthly_cost=rates.REDIS_RATES[tier] * multiplier * mul)]


REDIS_CACHE = ServiceDescriptor(
    service_type="redis-cache",
    label="Azure Cache for Redis",
    fields=[
        select_field(
            "tier",
            "Cache Tier / Size",
            "standard-c1",
            groups={
                "Basic": options(
                    ("basic-c0", "Basic C0 (250 MB)"),
                    ("basic-c1", "Basic C1 (1 GB)"),
                    ("basic-c2", "Basic C2 (2.5 GB)"),
                    ("basic-c3", "Basic C3 (6 GB)"),
                ),
                "Standard (replicated)": options(
                    ("standard-c0", "Standard C0 (250 MB)"),
                    ("standard-c1", "Standard C1 (1 GB)"),
                    ("standard-c2", "Standard C2 (2.5 GB)"),
                    ("standard-c3", "Standard C3 (6 GB)"),
                ),
                "Premium": options(
                    ("premium-p1", "Premium P1 (6 GB)"),
                    ("premium-p2", "Premium P2 (13 GB)"),
                    ("premium-p3", "Premium P3 (26 GB)"),
                    ("premium-p4", "Premium P4 (53 GB)"),
                ),
            },
        ),
        number_field(
            "shards",
            "Shard Count",
            1,
            min=1,
            max=10,
            unit="shards",
            depends_on=("tier", _REDIS_PREMIUM),
            tooltip="Premium only: clustering for horizontal scale",
        ),
    ],
    calculate=_redis_cache,
)
