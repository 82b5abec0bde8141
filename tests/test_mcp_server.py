"""Tests for the MCP tool functions."""

import json

import pytest

from ledger_tools import mcp_server
from ledger_tools.mcp_server import SessionState


@pytest.fixture(autouse=True)
def fresh_state(monkeypatch, tmp_path):
    """Give every test its own session and a directory without a .env file."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(mcp_server, "_state", SessionState())


@pytest.fixture
def snapshot_path(tmp_path):
    document = {
        "groupId": "flat",
        "name": "Flat 3B",
        "members": [{"id": "a", "name": "Alice"}, {"id": "b", "name": "Bob"}],
        "expenses": [{"id": "e1", "amount": 90, "payerId": "a", "description": "Internet"}],
    }
    path = tmp_path / "flat.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


def test_tools_require_loaded_group():
    assert mcp_server.get_balances().startswith("Error: No group loaded")
    assert mcp_server.get_settlements().startswith("Error: No group loaded")


def test_load_group(snapshot_path):
    message = mcp_server.load_group(str(snapshot_path))

    assert message == "Loaded group Flat 3B: 2 members, 1 expenses, 0 payments."


def test_load_group_missing_file(tmp_path):
    message = mcp_server.load_group(str(tmp_path / "missing.json"))

    assert message.startswith("Error: Invalid snapshot")


def test_balances_and_settlements(snapshot_path):
    mcp_server.load_group(str(snapshot_path))

    balances = mcp_server.get_balances()
    settlements = mcp_server.get_settlements()

    assert "Alice: $45.00 (Gets back)" in balances
    assert "Bob: ($45.00) (Owes)" in balances
    assert "[0] Bob pays Alice $45.00" in settlements


def test_debt_graph_is_json(snapshot_path):
    mcp_server.load_group(str(snapshot_path))

    data = json.loads(mcp_server.get_debt_graph())

    assert data["optimizedEdges"] == [{"from": "b", "to": "a", "amount": 45.0}]
    assert data["rawEdges"] == [{"from": "b", "to": "a", "amount": 45.0}]


def test_summary(snapshot_path):
    mcp_server.load_group(str(snapshot_path))

    summary = mcp_server.get_summary()

    assert summary.startswith("Flat 3B - Financial Summary")
    assert "Bob needs to pay $45.00 to Alice" in summary
    assert "Internet: $90.00 (paid by Alice)" in summary


def test_workflow_prompt():
    assert "load_group" in mcp_server.settle_workflow()
