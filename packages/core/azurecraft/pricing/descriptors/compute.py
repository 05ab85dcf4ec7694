"""App Service, Functions, VMs, Container Apps and AKS."""

from __future__ import annotations

from typing import Any

from azurecraft.pricing import rates
from azurecraft.pricing.types import LineItem, ServiceDescriptor, number_field, options, select_field

_OS = options(("linux", "Linux"), ("windows", "Windows"))


def _os_factor(os: str) -> float:
    return 1 + rates.WINDOWS_PREMIUM if os == "windows" else 1.0


def _app_service(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    tier, instances = cfg["tier"], cfg["instances"]
    base = rates.APP_SERVICE_RATES.get(tier, rates.APP_SERVICE_RATES["standard-s1"])
    label = f"Compute ({tier} x {instances})"
    if cfg["os"] == "windows" and base > 0:
        label += " [Windows]"
    return [LineItem(label=label, monthly_cost=base * _os_factor(cfg["os"]) * mul * instances)]


APP_SERVICE = ServiceDescriptor(
    service_type="app-service",
    label="App Service",
    fields=[
        select_field(
            "tier",
            "Plan / SKU",
            "standard-s1",
            groups={
                "Free / Shared": options(("free-f1", "Free F1"), ("shared-d1", "Shared D1")),
                "Basic": options(
                    ("basic-b1", "Basic B1 (1 core, 1.75 GB)"),
                    ("basic-b2", "Basic B2 (2 core, 3.5 GB)"),
                    ("basic-b3", "Basic B3 (4 core, 7 GB)"),
                ),
                "Standard": options(
                    ("standard-s1", "Standard S1 (1 core, 1.75 GB)"),
                    ("standard-s2", "Standard S2 (2 core, 3.5 GB)"),
                    ("standard-s3", "Standard S3 (4 core, 7 GB)"),
                ),
                "Premium v3": options(
                    ("premium-p1v3", "Premium P1v3 (2 core, 8 GB)"),
                    ("premium-p2v3", "Premium P2v3 (4 core, 16 GB)"),
                    ("premium-p3v3", "Premium P3v3 (8 core, 32 GB)"),
                ),
                "Isolated v2": options(
                    ("isolated-i1v2", "Isolated I1v2 (2 core, 8 GB)"),
                    ("isolated-i2v2", "Isolated I2v2 (4 core, 16 GB)"),
                ),
            },
        ),
        select_field("os", "Operating System", "linux", choices=_OS),
        number_field("instances", "Instance Count", 1, min=1, max=30, unit="instances"),
    ],
    calculate=_app_service,
)

_FUNCTION_PREMIUM = list(rates.FUNCTION_APP_PREMIUM_RATES)


def _function_app(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    if cfg["plan"] == "consumption":
        c = rates.FUNCTION_APP_CONSUMPTION
        execs = cfg["executions_per_month"]
        billable_execs = max(0, execs - c["free_executions"])
        exec_cost = billable_execs / 1_000_000 * c["per_million_executions"]
        gb_seconds = execs * (cfg["avg_duration_ms"] / 1000) * (cfg["memory_mb"] / 1024)
        gb_cost = max(0, gb_seconds - c["free_gb_seconds"]) * c["per_gb_second"]
        return [
            LineItem(label="Executions", monthly_cost=exec_cost * mul),
            LineItem(label="GB-seconds", monthly_cost=gb_cost * mul),
        ]
    plan, instances = cfg["plan"], cfg["instances"]
    base = rates.FUNCTION_APP_PREMIUM_RATES.get(plan, 0.0)
    return [LineItem(label=f"Compute ({plan} x {instances})", monthly_cost=base * instances * mul)]


FUNCTION_APP = ServiceDescriptor(
    service_type="function-app",
    label="Function App",
    fields=[
        select_field(
            "plan",
            "Hosting Plan",
            "consumption",
            choices=options(
                ("consumption", "Consumption (pay-per-execution)"),
                ("premium-ep1", "Premium EP1 (1 core, 3.5 GB)"),
                ("premium-ep2", "Premium EP2 (2 core, 7 GB)"),
                ("premium-ep3", "Premium EP3 (4 core, 14 GB)"),
            ),
        ),
        number_field(
            "executions_per_month",
            "Executions / month",
            1_000_000,
            min=0,
            max=1_000_000_000,
            step=100_000,
            unit="executions",
            depends_on=("plan", "consumption"),
        ),
        number_field(
            "avg_duration_ms",
            "Avg Duration",
            500,
            min=1,
            max=600_000,
            step=100,
            unit="ms",
            depends_on=("plan", "consumption"),
        ),
        number_field(
            "memory_mb",
            "Memory Allocation",
            256,
            min=128,
            max=1536,
            step=128,
            unit="MB",
            depends_on=("plan", "consumption"),
        ),
        number_field(
            "instances", "Instance Count", 1, min=1, max=20, unit="instances", depends_on=("plan", _FUNCTION_PREMIUM)
        ),
    ],
    calculate=_function_app,
)

_VM_SIZES = {
    "Burstable (B-series)": options(
        ("b1s", "B1s (1 vCPU, 1 GB)"),
        ("b2s", "B2s (2 vCPU, 4 GB)"),
        ("b2ms", "B2ms (2 vCPU, 8 GB)"),
    ),
    "General Purpose (D-series v5)": options(
        ("d2s-v5", "D2s v5 (2 vCPU, 8 GB)"),
        ("d4s-v5", "D4s v5 (4 vCPU, 16 GB)"),
        ("d8s-v5", "D8s v5 (8 vCPU, 32 GB)"),
    ),
    "AMD (Das-series v5)": options(
        ("d2as-v5", "D2as v5 (2 vCPU, 8 GB)"),
        ("d4as-v5", "D4as v5 (4 vCPU, 16 GB)"),
    ),
    "Memory Optimized (E-series)": options(
        ("e2s-v5", "E2s v5 (2 vCPU, 16 GB)"),
        ("e4s-v5", "E4s v5 (4 vCPU, 32 GB)"),
    ),
    "Compute Optimized (F-series)": options(
        ("f2s-v2", "F2s v2 (2 vCPU, 4 GB)"),
        ("f4s-v2", "F4s v2 (4 vCPU, 8 GB)"),
    ),
}


def _virtual_machine(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    size, count = cfg["size"], cfg["count"]
    base = rates.VM_RATES.get(size, rates.VM_RATES["d2s-v5"])
    suffix = " [Windows]" if cfg["os"] == "windows" else ""
    return [LineItem(label=f"VM ({size} x {count}){suffix}", monthly_cost=base * _os_factor(cfg["os"]) * mul * count)]


VIRTUAL_MACHINE = ServiceDescriptor(
    service_type="virtual-machine",
    label="Virtual Machine",
    fields=[
        select_field("size", "VM Size", "d2s-v5", groups=_VM_SIZES),
        select_field("os", "Operating System", "linux", choices=_OS),
        number_field("count", "Number of VMs", 1, min=1, max=100, unit="VMs"),
    ],
    calculate=_virtual_machine,
)

_DEDICATED = list(rates.CONTAINER_APPS_DEDICATED_RATES)


def _container_apps(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    if cfg["plan"] == "consumption":
        c = rates.CONTAINER_APPS_CONSUMPTION
        vcpu = max(0, cfg["vcpu_seconds"] - c["free_vcpu_seconds"]) * c["per_vcpu_second"]
        gib = max(0, cfg["gib_seconds"] - c["free_gib_seconds"]) * c["per_gib_second"]
        return [
            LineItem(label="vCPU-seconds", monthly_cost=vcpu * mul),
            LineItem(label="GiB-seconds", monthly_cost=gib * mul),
        ]
    plan, replicas = cfg["plan"], cfg["replicas"]
    base = rates.CONTAINER_APPS_DEDICATED_RATES.get(plan, 0.0)
    return [LineItem(label=f"Dedicated ({plan} x {replicas})", monthly_cost=base * replicas * mul)]


CONTAINER_APPS = ServiceDescriptor(
    service_type="container-apps",
    label="Container Apps",
    fields=[
        select_field(
            "plan",
            "Environment Type",
            "consumption",
            choices=options(
                ("consumption", "Consumption (pay-per-use)"),
                ("dedicated-d4", "Dedicated D4 (4 vCPU, 16 GB)"),
                ("dedicated-d8", "Dedicated D8 (8 vCPU, 32 GB)"),
                ("dedicated-d16", "Dedicated D16 (16 vCPU, 64 GB)"),
            ),
        ),
        number_field(
            "vcpu_seconds",
            "Active vCPU-seconds / month",
            2_000_000,
            min=0,
            max=100_000_000,
            step=100_000,
            unit="vCPU-sec",
            depends_on=("plan", "consumption"),
        ),
        number_field(
            "gib_seconds",
            "Active GiB-seconds / month",
            4_000_000,
            min=0,
            max=200_000_000,
            step=100_000,
            unit="GiB-sec",
            depends_on=("plan", "consumption"),
        ),
        number_field("replicas", "Replicas", 1, min=1, max=30, unit="replicas", depends_on=("plan", _DEDICATED)),
    ],
    calculate=_container_apps,
)


def _aks(cfg: dict[str, Any], mul: float) -> list[LineItem]:
    tier, size, nodes = cfg["cluster_tier"], cfg["node_size"], cfg["node_count"]
    mgmt = rates.AKS_CLUSTER_MANAGEMENT.get(tier, 0.0) * mul
    node_rate = rates.VM_RATES.get(size, rates.VM_RATES["d4s-v5"]) * mul
    return [
        LineItem(label=f"Cluster Management ({tier})", monthly_cost=mgmt),
        LineItem(label=f"Nodes ({size} x {nodes})", monthly_cost=node_rate * nodes),
    ]


AKS = ServiceDescriptor(
    service_type="aks",
    label="Azure Kubernetes Service",
    fields=[
        select_field(
            "cluster_tier",
            "Cluster Management",
            "standard",
            choices=options(("free", "Free"), ("standard", "Standard ($73/mo)"), ("premium", "Premium ($292/mo)")),
        ),
        select_field(
            "node_size",
            "Node VM Size",
            "d4s-v5",
            groups={
                "General Purpose": options(
                    ("d2s-v5", "D2s v5 (2 vCPU, 8 GB)"),
                    ("d4s-v5", "D4s v5 (4 vCPU, 16 GB)"),
                    ("d8s-v5", "D8s v5 (8 vCPU, 32 GB)"),
                ),
                "Memory Optimized": options(
                    ("e2s-v5", "E2s v5 (2 vCPU, 16 GB)"),
                    ("e4s-v5", "E4s v5 (4 vCPU, 32 GB)"),
                ),
            },
        ),
        number_field("node_count", "Node Count", 3, min=1, max=100, unit="nodes"),
    ],
    calculate=_aks,
)
