from __future__ import annotations

from typing import Any

from azurecraft.pricing import rates
from azurecraft.pricing.types import LineItem, ServiceDescriptor, options, select_field


def _static_web_app(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    tier = cfg["tier"]
    return [LineItem(label=f"Static Web App ({tier})", monthly_cost=rates.STATIC_WEB_APP_RATES[tier] * mul)]


STATIC_WEB_APP = ServiceDescriptor(
    service_type="static-web-app",
    label="Static Web App",
    fields=[select_field("tier", "Plan", "free", choices=options(("free", "Free"), ("standard", "Standard ($9/mo)")))],
    calculate=_static_web_app,
)
