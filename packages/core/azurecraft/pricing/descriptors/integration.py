"""API Management, Service Bus, Event Hubs and Event Grid."""

from __future__ import annotations

from typing import Any

from azurecraft.pricing import rates
from azurecraft.pricing.types import LineItem, ServiceDescriptor, number_field, options, select_field

_APIM_SCALED = ["basic", "standard", "premium"]


def _api_management(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    tier = cfg["tier"]
    if tier == "consumption":
        calls = cfg["million_calls"]
        return [LineItem(label=f"Consumption ({calls}M calls)", monthly_cost=calls * rates.APIM_RATES["consumption"] * mul)]
    # The developer tier cannot scale out
    units = cfg["units"] if tier in _APIM_SCALED else 1
    plural = "s" if units > 1 else ""
    return [LineItem(label=f"{tier} ({units} unit{plural})", monthly_cost=rates.APIM_RATES[tier] * units * mul)]


API_MANAGEMENT = ServiceDescriptor(
    service_type="api-management",
    label="API Management",
    fields=[
        select_field(
            "tier",
            "Tier",
            "developer",
            choices=options(
                ("consumption", "Consumption (per call)"),
                ("developer", "Developer"),
                ("basic", "Basic"),
                ("standard", "Standard"),
                ("premium", "Premium"),
            ),
        ),
        number_field(
            "million_calls", "Million Calls / month", 1, min=0, max=1_000, unit="M calls", depends_on=("tier", "consumption")
        ),
        number_field("units", "Scale Units", 1, min=1, max=12, unit="units", depends_on=("tier", _APIM_SCALED)),
    ],
    calculate=_api_management,
)


def _service_bus(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    sb = rates.SERVICE_BUS_RATES
    tier = cfg["tier"]
    if tier == "premium":
        mus = cfg["messaging_units"]
        return [LineItem(label=f"Premium ({mus} MUs)", monthly_cost=sb["premium_per_messaging_unit"] * mus * mul)]
    ops = cfg["million_ops"]
    if tier == "basic":
        return [LineItem(label=f"Basic ({ops}M ops)", monthly_cost=ops * sb["basic_per_million_ops"] * mul)]
    return [
        LineItem(label="Standard (base)", monthly_cost=sb["standard_base"] * mul),
        LineItem(label=f"Operations ({ops}M)", monthly_cost=ops * sb["standard_per_million_ops"] * mul),
    ]


SERVICE_BUS = ServiceDescriptor(
    service_type="service-bus",
    label="Service Bus",
    fields=[
        select_field(
            "tier", "Tier", "standard", choices=options(("basic", "Basic"), ("standard", "Standard"), ("premium", "Premium"))
        ),
        number_field(
            "million_ops",
            "Million Operations / month",
            10,
            min=0,
            max=10_000,
            unit="M ops",
            depends_on=("tier", ["basic", "standard"]),
        ),
        number_field("messaging_units", "Messaging Units", 1, min=1, max=16, unit="MUs", depends_on=("tier", "premium")),
    ],
    calculate=_service_bus,
)


def _event_hub(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    tier, tus = cfg["tier"], cfg["throughput_units"]
    return [LineItem(label=f"{tier} ({tus} TUs)", monthly_cost=rates.EVENT_HUB_RATES[tier] * tus * mul)]


EVENT_HUB = ServiceDescriptor(
    service_type="event-hub",
    label="Event Hubs",
    fields=[
        select_field(
            "tier",
            "Tier",
            "standard",
            choices=options(("basic", "Basic"), ("standard", "Standard"), ("premium", "Premium"), ("dedicated", "Dedicated")),
        ),
        number_field("throughput_units", "Throughput / Processing Units", 2, min=1, max=40, unit="TUs"),
    ],
    calculate=_event_hub,
)


def _event_grid(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    eg = rates.EVENT_GRID_RATES
    million = cfg["million_ops"]
    billable = max(0, million * 1_000_000 - eg["free_ops"])
    return [
        LineItem(
            label=f"Operations ({million}M, first 100K free)",
            monthly_cost=billable / 1_000_000 * eg["per_million_ops"] * mul,
        )
    ]


EVENT_GRID = ServiceDescriptor(
    service_type="event-grid",
    label="Event Grid",
    fields=[number_field("million_ops", "Million Operations / month", 5, min=0, max=10_000, unit="M ops")],
    calculate=_event_grid,
)
