from __future__ import annotations

from typing import Any

from azurecraft.pricing import rates
from azurecraft.pricing.types import LineItem, ServiceDescriptor, number_field, options, select_field


def _key_vault(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    kv = rates.KEY_VAULT_RATES
    ops, certs = cfg["operations_10k"], cfg["certificates"]
    # HSM-backed keys only exist on the premium tier
    hsm_keys = cfg["hsm_keys"] if cfg["tier"] == "premium" else 0
    items = [LineItem(label=f"Operations ({ops}x10K)", monthly_cost=ops * kv["per_10k_operations"] * mul)]
    if certs > 0:
        items.append(LineItem(label=f"Certificates ({certs})", monthly_cost=certs * kv["per_certificate_renewal"] * mul))
    if hsm_keys > 0:
        items.append(LineItem(label=f"HSM Keys ({hsm_keys})", monthly_cost=hsm_keys * kv["per_hsm_key"] * mul))
    return items


KEY_VAULT = ServiceDescriptor(
    service_type="key-vault",
    label="Azure Key Vault",
    fields=[
        select_field(
            "tier",
            "Tier",
            "standard",
            choices=options(("standard", "Standard (software keys)"), ("premium", "Premium (HSM-backed keys)")),
        ),
        number_field("operations_10k", "Operations (10K / month)", 100, min=0, max=10_000, step=10, unit="x10K"),
        number_field("certificates", "Certificate Renewals", 0, min=0, max=100, unit="renewals/mo"),
        number_field("hsm_keys", "HSM-Protected Keys", 0, min=0, max=100, unit="keys", depends_on=("tier", "premium")),
    ],
    calculate=_key_vault,
)


def _ddos_protection(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    if cfg["tier"] == "ip-protection":
        ips = cfg["protected_ips"]
        return [LineItem(label=f"IP Protection ({ips} IPs)", monthly_cost=ips * rates.DDOS_RATES["ip-protection"] * mul)]
    return [LineItem(label="Network Protection (flat)", monthly_cost=rates.DDOS_RATES["network-protection"] * mul)]


DDOS_PROTECTION = ServiceDescriptor(
    service_type="ddos-protection",
    label="DDoS Protection",
    fields=[
        select_field(
            "tier",
            "Plan",
            "network-protection",
            choices=options(
                ("ip-protection", "IP Protection ($199/IP/mo)"),
                ("network-protection", "Network Protection ($2,944/mo)"),
            ),
        ),
        number_field(
            "protected_ips", "Protected Public IPs", 1, min=1, max=100, unit="IPs", depends_on=("tier", "ip-protection")
        ),
    ],
    calculate=_ddos_protection,
)
