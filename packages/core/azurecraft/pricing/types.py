"""Descriptor types for the per-service pricing forms."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, Field

from azurecraft.pricing.rates import region_multiplier

log = logging.getLogger(__name__)

FieldType = Literal["select", "number", "toggle"]


class Option(BaseModel):
    value: str
    label: str


class OptionGroup(BaseModel):
    group: str
    options: list[Option]


class DependsOn(BaseModel):
    field: str
    value: str | list[str]

    def matches(self, config: dict[str, Any]) -> bool:
        current = config.get(self.field)
        if isinstance(self.value, list):
            return current in self.value
        return current == self.value


class PricingField(BaseModel):
    """One configurable input on a service's pricing form."""

    key: str
    label: str
    type: FieldType
    options: list[Option] = Field(default_factory=list)
    option_groups: list[OptionGroup] = Field(default_factory=list)
    min: float | None = None
    max: float | None = None
    step: float | None = None
    unit: str | None = None
    tooltip: str | None = None
    depends_on: DependsOn | None = None
    default: str | bool | int | float | None = None

    def is_visible(self, config: dict[str, Any]) -> bool:
        return self.depends_on is None or self.depends_on.matches(config)

    def all_options(self) -> list[Option]:
        return [*self.options, *(o for g in self.option_groups for o in g.options)]

    def option_label(self, value: str) -> str:
        for opt in self.all_options():
            if opt.value == value:
                return opt.label
        return value

    def coerce(self, value: Any) -> Any:
        """Bring a raw config value into this field's domain, falling back to the default."""
        if self.type == "select":
            allowed = {o.value for o in self.all_options()}
            if value in allowed:
                return value
            if value is not None:
                log.debug("Unknown %s %r, using %r", self.key, value, self.default)
            return self.default
        if self.type == "toggle":
            return self.default if value is None else bool(value)

        if isinstance(value, bool) or value is None:
            return self.default
        try:
            number = float(value)
        except (TypeError, ValueError):
            log.debug("Non-numeric %s %r, using %r", self.key, value, self.default)
            return self.default
        if self.min is not None:
            number = max(self.min, number)
        if self.max is not None:
            number = min(self.max, number)
        return int(number) if number.is_integer() else number


class LineItem(BaseModel):
    label: str
    monthly_cost: float


class CostBreakdown(BaseModel):
    line_items: list[LineItem] = Field(default_factory=list)
    total: float = 0.0

    @classmethod
    def from_items(cls, items: list[LineItem]) -> CostBreakdown:
        rounded = [LineItem(label=i.label, monthly_cost=round(max(0.0, i.monthly_cost), 2)) for i in items]
        return cls(line_items=rounded, total=round(sum(i.monthly_cost for i in rounded), 2))


# (validated config, region multiplier) -> line items
Calculator = Callable[[dict[str, Any], float], list[LineItem]]


@dataclass
class ServiceDescriptor:
    service_type: str
    label: str
    fields: list[PricingField]
    calculate: Calculator

    def default_config(self) -> dict[str, Any]:
        return {f.key: f.default for f in self.fields}

    def field(self, key: str) -> PricingField | None:
        for f in self.fields:
            if f.key == key:
                return f
        return None

    def validate_config(self, config: dict[str, Any] | None) -> dict[str, Any]:
        """Fill missing keys from defaults, clamp numbers and reset unknown select values."""
        config = dict(config or {})
        for f in self.fields:
            config[f.key] = f.coerce(config.get(f.key))
        return config

    def visible_fields(self, config: dict[str, Any] | None = None) -> list[PricingField]:
        config = self.validate_config(config)
        return [f for f in self.fields if f.is_visible(config)]

    def calculate_cost(self, config: dict[str, Any] | None, region: str = "eastus") -> CostBreakdown:
        cfg = self.validate_config(config)
        return CostBreakdown.from_items(self.calculate(cfg, region_multiplier(region)))


def options(*pairs: tuple[str, str]) -> list[Option]:
    return [Option(value=v, label=label) for v, label in pairs]


def select_field(
    key: str,
    label: str,
    default: str,
    *,
    choices: list[Option] | None = None,
    groups: dict[str, list[Option]] | None = None,
    depends_on: tuple[str, str | list[str]] | None = None,
    tooltip: str | None = None,
) -> PricingField:
    return PricingField(
        key=key,
        label=label,
        type="select",
        options=choices or [],
        option_groups=[OptionGroup(group=g, options=opts) for g, opts in (groups or {}).items()],
        default=default,
        depends_on=DependsOn(field=depends_on[0], value=depends_on[1]) if depends_on else None,
        tooltip=tooltip,
    )


def number_field(
    key: str,
    label: str,
    default: float,
    *,
    min: float,
    max: float,
    step: float = 1,
    unit: str | None = None,
    depends_on: tuple[str, str | list[str]] | None = None,
    tooltip: str | None = None,
) -> PricingField:
    return PricingField(
        key=key,
        label=label,
        type="number",
        min=min,
        max=max,
        step=step,
        unit=unit,
        default=default,
        depends_on=DependsOn(field=depends_on[0], value=depends_on[1]) if depends_on else None,
        tooltip=tooltip,
    )
