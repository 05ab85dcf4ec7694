from __future__ import annotations

import math
from typing import Any

from azurecraft.pricing import rates
from azurecraft.pricing.types import LineItem, ServiceDescriptor, number_field


def _log_analytics(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    la = rates.LOG_ANALYTICS_RATES
    ingestion, retention = cfg["ingestion_gb"], cfg["retention_days"]
    ingestion_cost = max(0, ingestion - la["free_gb"]) * la["per_gb_ingestion"] * mul
    # Retention beyond the free window is billed per started 30-day period
    periods = math.ceil(max(0, retention - la["free_retention_days"]) / 30)
    retention_cost = ingestion * periods * la["per_gb_per_30_extra_days"] * mul
    items = [LineItem(label=f"Ingestion ({ingestion} GB, 5 GB free)", monthly_cost=ingestion_cost)]
    if retention_cost > 0:
        items.append(LineItem(label=f"Retention ({retention} days)", monthly_cost=retention_cost))
    return items


LOG_ANALYTICS = ServiceDescriptor(
    service_type="log-analytics",
    label="Log Analytics Workspace",
    fields=[
        number_field(
            "ingestion_gb", "Data Ingestion", 50, min=0, max=10_000, step=10, unit="GB/mo", tooltip="First 5 GB/mo free"
        ),
        number_field(
            "retention_days", "Retention Period", 90, min=31, max=730, step=30, unit="days", tooltip="First 31 days free"
        ),
    ],
    calculate=_log_analytics,
)


def _application_insights(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    ai = rates.APP_INSIGHTS_RATES
    ingestion = cfg["ingestion_gb"]
    cost = max(0, ingestion - ai["free_gb"]) * ai["per_gb_ingestion"] * mul
    return [LineItem(label=f"Ingestion ({ingestion} GB, 5 GB free)", monthly_cost=cost)]


APPLICATION_INSIGHTS = ServiceDescriptor(
    service_type="application-insights",
    label="Application Insights",
    fields=[
        number_field(
            "ingestion_gb",
            "Data Ingestion",
            20,
            min=0,
            max=5_000,
            step=5,
            unit="GB/mo",
            tooltip="First 5 GB/mo free (backed by Log Analytics workspace)",
        ),
    ],
    calculate=_application_insights,
)
