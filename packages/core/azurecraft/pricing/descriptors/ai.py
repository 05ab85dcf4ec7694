from __future__ import annotations

from typing import Any

from azurecraft.pricing import rates
from azurecraft.pricing.types import LineItem, ServiceDescriptor, number_field, options, select_field


def _azure_openai(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    per_input, per_output = rates.AZURE_OPENAI_RATES[cfg["model"]]
    tokens_in, tokens_out = cfg["million_input_tokens"], cfg["million_output_tokens"]
    items = [LineItem(label=f"Input tokens ({tokens_in}M)", monthly_cost=tokens_in * per_input * mul)]
    # Embedding models bill input only
    if per_output > 0:
        items.append(LineItem(label=f"Output tokens ({tokens_out}M)", monthly_cost=tokens_out * per_output * mul))
    return items


AZURE_OPENAI = ServiceDescriptor(
    service_type="azure-openai",
    label="Azure OpenAI Service",
    fields=[
        select_field(
            "model",
            "Model",
            "gpt-4o",
            choices=options(
                ("gpt-4o", "GPT-4o"),
                ("gpt-4o-mini", "GPT-4o mini"),
                ("gpt-4-turbo", "GPT-4 Turbo"),
                ("gpt-35-turbo", "GPT-3.5 Turbo"),
                ("text-embedding-ada-002", "text-embedding-ada-002"),
                ("text-embedding-3-small", "text-embedding-3-small"),
            ),
        ),
        number_field("million_input_tokens", "Input Tokens (millions/mo)", 10, min=0, max=1_000, unit="M tokens"),
        number_field("million_output_tokens", "Output Tokens (millions/mo)", 5, min=0, max=500, unit="M tokens"),
    ],
    calculate=_azure_openai,
)

_SEARCH_PAID = ["basic", "standard-s1", "standard-s2", "standard-s3"]


def _ai_search(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    tier, replicas = cfg["tier"], cfg["replicas"]
    rate = rates.AI_SEARCH_RATES[tier]
    if rate == 0:
        return [LineItem(label="AI Search (Free)", monthly_cost=0.0)]
    return [LineItem(label=f"Search ({tier} x {replicas})", monthly_cost=rate * replicas * mul)]


AI_SEARCH = ServiceDescriptor(
    service_type="ai-search",
    label="Azure AI Search",
    fields=[
        select_field(
            "tier",
            "Tier",
            "standard-s1",
            choices=options(
                ("free", "Free"),
                ("basic", "Basic"),
                ("standard-s1", "Standard S1"),
                ("standard-s2", "Standard S2"),
                ("standard-s3", "Standard S3"),
            ),
        ),
        number_field("replicas", "Replicas", 1, min=1, max=12, unit="replicas", depends_on=("tier", _SEARCH_PAID)),
    ],
    calculate=_ai_search,
)
