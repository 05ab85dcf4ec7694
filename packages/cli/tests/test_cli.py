"""CLI command tests using Typer's CliRunner."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from azurecraft import DiagramGraph
from azurecraft_cli import __version__
from azurecraft_cli.main import app
from typer.testing import CliRunner

runner = CliRunner()

# Front Door -> App Service -> SQL, no monitoring or secrets
_DIAGRAM_YAML = """\
name: Shop
nodes:
  - id: fd
    position: {x: 600, y: 40}
    data:
      service_type: front-door
      display_name: Front Door
      description: Global entry point with WAF
  - id: app
    position: {x: 40, y: 40}
    data:
      service_type: app-service
      display_name: Shop API
      description: Storefront API, two instances
      pricing_config:
        tier: standard-s1
        instances: 2
  - id: sql
    position: {x: 300, y: 300}
    data:
      service_type: azure-sql
      display_name: Orders DB
      description: Orders and inventory tables
edges:
  - id: fd-app
    source: fd
    target: app
  - id: app-sql
    source: app
    target: sql
    connection_type: private-endpoint
"""


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("AZURECRAFT_REGION", raising=False)


@pytest.fixture
def diagram_file(tmp_path: Path) -> Path:
    p = tmp_path / "shop.yaml"
    p.write_text(_DIAGRAM_YAML)
    return p


def _json(result) -> dict | list:
    return json.loads(result.stdout)


class TestApp:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("layout", "route", "cost", "price", "fields", "lint"):
            assert command in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"azurecraft {__version__}" in result.output


class TestPrice:
    def test_json(self):
        result = runner.invoke(app, ["--json", "price", "app-service", "-s", "instances=3"])
        assert result.exit_code == 0
        data = _json(result)
        assert data["total"] == 219.0
        assert data["sku"] == "Standard S1 (3x)"
        assert data["config"]["instances"] == 3
        assert data["region"] == "eastus"

    def test_region(self):
        result = runner.invoke(app, ["--json", "price", "app-service", "--region", "westeurope"])
        assert _json(result)["total"] == pytest.approx(81.76)

    def test_table(self):
        result = runner.invoke(app, ["price", "key-vault"])
        assert result.exit_code == 0
        assert "$3.00" in result.output

    def test_unknown_type_flat_estimate(self):
        result = runner.invoke(app, ["--json", "price", "quantum-widget"])
        assert result.exit_code == 0
        assert _json(result)["total"] == 0.0

    def test_bad_assignment(self):
        result = runner.invoke(app, ["price", "app-service", "-s", "instances"])
        assert result.exit_code == 1
        assert "Expected key=value" in result.output

    def test_bad_assignment_json(self):
        result = runner.invoke(app, ["--json", "price", "app-service", "-s", "instances"])
        assert result.exit_code == 1
        assert "error" in _json(result)


class TestFields:
    def test_visible_fields(self):
        result = runner.invoke(app, ["--json", "fields", "azure-sql"])
        assert result.exit_code == 0
        assert [f["key"] for f in _json(result)] == ["model", "dtu_tier", "storage_gb"]

    def test_dependent_fields(self):
        result = runner.invoke(app, ["--json", "fields", "azure-sql", "-s", "model=vcore"])
        data = _json(result)
        assert [f["key"] for f in data] == ["model", "vcore_tier", "vcores", "storage_gb"]
        assert data[0]["value"] == "vcore"

    def test_all_fields(self):
        result = runner.invoke(app, ["--json", "fields", "azure-sql", "--all"])
        assert len(_json(result)) == 5

    def test_table(self):
        result = runner.invoke(app, ["fields", "key-vault"])
        assert result.exit_code == 0
        assert "pricing fields" in result.output

    def test_no_form(self):
        result = runner.invoke(app, ["fields", "resource-group"])
        assert result.exit_code == 1
        assert "No pricing form" in result.output


class TestCost:
    def test_json(self, diagram_file):
        result = runner.invoke(app, ["--json", "cost", str(diagram_file)])
        assert result.exit_code == 0
        data = _json(result)
        assert data["summary"]["monthly"] == pytest.approx(335.0 + 146.0 + 73.60)
        services = {s["id"]: s for s in data["services"]}
        assert services["app"]["sku"] == "Standard S1 (2x)"
        assert services["app"]["group"] == "Unattributed"

    def test_table(self, diagram_file):
        result = runner.invoke(app, ["cost", str(diagram_file)])
        assert result.exit_code == 0
        assert "$554.60" in result.output

    def test_by_group(self, diagram_file):
        result = runner.invoke(app, ["cost", str(diagram_file), "--by-group"])
        assert result.exit_code == 0
        assert "Unattributed" in result.output

    def test_region_from_environment(self, diagram_file, monkeypatch):
        monkeypatch.setenv("AZURECRAFT_REGION", "westeurope")
        data = _json(runner.invoke(app, ["--json", "cost", str(diagram_file)]))
        assert data["region"] == "westeurope"

    def test_region_option_beats_environment(self, diagram_file, monkeypatch):
        monkeypatch.setenv("AZURECRAFT_REGION", "westeurope")
        data = _json(runner.invoke(app, ["--json", "cost", str(diagram_file), "--region", "uksouth"]))
        assert data["region"] == "uksouth"

    def test_project_diagram(self, tmp_path):
        project = tmp_path / ".azurecraft"
        project.mkdir()
        (project / "diagram.yaml").write_text(_DIAGRAM_YAML)
        (project / "config.yaml").write_text("region: northeurope\n")
        result = runner.invoke(app, ["--json", "cost"])
        assert result.exit_code == 0
        assert _json(result)["region"] == "northeurope"

    def test_no_diagram(self):
        result = runner.invoke(app, ["cost"])
        assert result.exit_code == 1
        assert "No diagram file specified" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["cost", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_invalid_yaml(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("nodes: [unclosed\n")
        result = runner.invoke(app, ["cost", str(bad)])
        assert result.exit_code == 1
        assert "Invalid YAML" in result.output

    def test_invalid_diagram(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("nodes:\n  - id: x\n    data: {}\n")
        result = runner.invoke(app, ["cost", str(bad)])
        assert result.exit_code == 1
        assert "Invalid diagram" in result.output


class TestLayout:
    def test_json(self, diagram_file):
        result = runner.invoke(app, ["--json", "layout", str(diagram_file)])
        assert result.exit_code == 0
        positions = _json(result)["positions"]
        assert set(positions) == {"fd", "app", "sql"}
        # Networking sits left of web, web left of data
        assert positions["fd"]["x"] < positions["app"]["x"] < positions["sql"]["x"]

    def test_top_to_bottom(self, diagram_file):
        positions = _json(runner.invoke(app, ["--json", "layout", str(diagram_file), "--direction", "TB"]))["positions"]
        assert positions["fd"]["y"] < positions["app"]["y"] < positions["sql"]["y"]

    def test_writes_output(self, diagram_file, tmp_path):
        out = tmp_path / "laid-out.yaml"
        result = runner.invoke(app, ["layout", str(diagram_file), "-o", str(out)])
        assert result.exit_code == 0
        graph = DiagramGraph.from_file(out)
        fd = graph.node("fd")
        assert (fd.position.x, fd.position.y) == (60.0, 60.0)

    def test_table(self, diagram_file):
        result = runner.invoke(app, ["layout", str(diagram_file)])
        assert result.exit_code == 0
        assert "Networking" in result.output


class TestRoute:
    def test_json(self, diagram_file):
        result = runner.invoke(app, ["--json", "route", str(diagram_file)])
        assert result.exit_code == 0
        data = _json(result)
        assert set(data) == {"fd-app", "app-sql"}
        assert all(r["path"].startswith("M ") for r in data.values())

    def test_isometric(self, diagram_file):
        data = _json(runner.invoke(app, ["--json", "route", str(diagram_file), "--view-mode", "isometric"]))
        assert all(len(r["points"]) == 3 for r in data.values())

    def test_no_edges(self, tmp_path):
        empty = tmp_path / "empty.yaml"
        empty.write_text("name: Empty\n")
        result = runner.invoke(app, ["route", str(empty)])
        assert result.exit_code == 0
        assert "No routable connections" in result.output


class TestLint:
    def test_criticals_fail(self, diagram_file):
        result = runner.invoke(app, ["--json", "lint", str(diagram_file)])
        assert result.exit_code == 1
        data = _json(result)
        rules = {f["rule"] for f in data["findings"]}
        assert {"missing_app_insights", "missing_key_vault"} <= rules
        assert data["passed"] is False
        assert data["score"] < 100

    def test_budget(self, diagram_file):
        data = _json(runner.invoke(app, ["--json", "lint", str(diagram_file), "--budget", "100"]))
        assert "budget_exceeded" in {f["rule"] for f in data["findings"]}

    def test_budget_from_project_config(self, diagram_file, tmp_path):
        (tmp_path / ".azurecraft").mkdir()
        (tmp_path / ".azurecraft" / "config.yaml").write_text("budget_monthly: 50\n")
        data = _json(runner.invoke(app, ["--json", "lint", str(diagram_file)]))
        assert "budget_exceeded" in {f["rule"] for f in data["findings"]}

    def test_table(self, diagram_file):
        result = runner.invoke(app, ["lint", str(diagram_file)])
        assert result.exit_code == 1
        assert "FAIL" in result.output

    def test_empty_diagram_passes(self, tmp_path):
        empty = tmp_path / "empty.yaml"
        empty.write_text("name: Empty\n")
        result = runner.invoke(app, ["lint", str(empty), "--strict"])
        assert result.exit_code == 0
        assert "No findings" in result.output
