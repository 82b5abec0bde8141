"""Tests for the settle CLI commands."""

import json

import pytest
from typer.testing import CliRunner

from ledger_tools.cli import app

runner = CliRunner()


@pytest.fixture
def snapshot_path(tmp_path, monkeypatch):
    """Write a snapshot file and run from a directory without a .env file."""
    monkeypatch.chdir(tmp_path)
    document = {
        "groupId": "trip",
        "name": "Lisbon Trip",
        "members": [
            {"id": "a", "name": "Alice"},
            {"id": "b", "name": "Bob"},
            {"id": "c", "name": "Cara"},
        ],
        "expenses": [
            {"id": "e1", "amount": 300, "payerId": "a", "description": "Apartment"}
        ],
        "payments": [{"id": "p1", "fromMemberId": "b", "toMemberId": "a", "amount": 40}],
    }
    path = tmp_path / "trip.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


class TestBalancesCommand:
    def test_table_output(self, snapshot_path):
        result = runner.invoke(app, ["settle", "balances", str(snapshot_path)])

        assert result.exit_code == 0
        assert "Alice" in result.stdout
        assert "Gets back" in result.stdout

    def test_json_output(self, snapshot_path):
        result = runner.invoke(app, ["settle", "balances", str(snapshot_path), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["totalExpenses"] == 300.0
        assert [b["balance"] for b in data["balances"]] == [160.0, -60.0, -100.0]

    def test_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["settle", "balances", str(tmp_path / "nope.json")])

        assert result.exit_code == 1
        assert "Error" in result.stdout


class TestPlanCommand:
    def test_json_output(self, snapshot_path):
        result = runner.invoke(app, ["settle", "plan", str(snapshot_path), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [(s["fromName"], s["toName"], s["amount"]) for s in data["settlements"]] == [
            ("Cara", "Alice", 100.0),
            ("Bob", "Alice", 60.0),
        ]

    def test_table_output(self, snapshot_path):
        result = runner.invoke(app, ["settle", "plan", str(snapshot_path)])

        assert result.exit_code == 0
        assert "2 payment(s) settle the group" in result.stdout


class TestGraphCommand:
    def test_optimized_view(self, snapshot_path):
        result = runner.invoke(
            app, ["settle", "graph", str(snapshot_path), "--view", "optimized"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert "rawEdges" not in data
        assert len(data["optimizedEdges"]) == 2

    def test_both_views(self, snapshot_path):
        result = runner.invoke(app, ["settle", "graph", str(snapshot_path)])

        data = json.loads(result.stdout)
        assert len(data["rawEdges"]) == 3
        assert len(data["nodes"]) == 3


class TestSummaryCommand:
    def test_export_to_directory(self, snapshot_path, tmp_path):
        result = runner.invoke(
            app, ["settle", "summary", str(snapshot_path), "--export", str(tmp_path)]
        )

        assert result.exit_code == 0
        exported = (tmp_path / "lisbon_trip_summary.txt").read_text(encoding="utf-8")
        assert "Lisbon Trip - Financial Summary" in exported
        assert "Bob paid $40.00 to Alice" in exported
        assert "Apartment" in exported

    def test_export_to_missing_directory(self, snapshot_path, tmp_path):
        target = tmp_path / "missing" / "x.txt"

        result = runner.invoke(
            app, ["settle", "summary", str(snapshot_path), "--export", str(target)]
        )

        assert result.exit_code == 1
        assert "Error:" in result.stdout
        assert "Cannot export summary" in result.stdout
        assert not target.exists()
