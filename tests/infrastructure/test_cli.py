"""End-to-end tests for the click CLI against a temporary data directory."""

import json

import pytest
from click.testing import CliRunner

from orderflow.config import get_settings
from orderflow.infrastructure.cli.main import cli

ITEMS = "SKU-1:Widget:50.00:2,SKU-2:Gadget:30.00:3"


@pytest.fixture
def runner(monkeypatch, tmp_path):
    monkeypatch.setenv("ORDERFLOW_DATA_DIR", str(tmp_path))
    get_settings.cache_clear()
    yield CliRunner()
    get_settings.cache_clear()


def _show_json(runner, external_id: str) -> dict:
    result = runner.invoke(cli, ["order", "show", "--external-id", external_id, "--json"])
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


def test_create_prints_calculated_total(runner):
    result = runner.invoke(cli, ["order", "create", "--external-id", "EXT-100", "--items", ITEMS])
    assert result.exit_code == 0, result.output
    assert "status=CALCULATED" in result.output
    assert "190.00" in result.output


def test_duplicate_create_fails(runner):
    runner.invoke(cli, ["order", "create", "--external-id", "EXT-001", "--items", ITEMS])
    result = runner.invoke(cli, ["order", "create", "--external-id", "EXT-001", "--items", ITEMS])
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_bad_item_format_is_a_usage_error(runner):
    result = runner.invoke(cli, ["order", "create", "--external-id", "EXT-1", "--items", "Widget:2"])
    assert result.exit_code == 2
    assert "Invalid item format" in result.output


def test_show_json_payload(runner):
    runner.invoke(cli, ["order", "create", "--external-id", "EXT-100", "--items", ITEMS])
    payload = _show_json(runner, "EXT-100")
    assert payload["externalOrderId"] == "EXT-100"
    assert payload["totalAmount"] == "190.00"
    assert payload["currency"] == "BRL"
    assert payload["status"] == "CALCULATED"
    assert [i["subtotal"] for i in payload["items"]] == ["100.00", "90.00"]


def test_show_missing_order(runner):
    result = runner.invoke(cli, ["order", "show", "--external-id", "EXT-404"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_show_requires_exactly_one_selector(runner):
    result = runner.invoke(cli, ["order", "show"])
    assert result.exit_code == 2


def test_lifecycle(runner, tmp_path):
    runner.invoke(cli, ["order", "create", "--external-id", "EXT-100", "--items", ITEMS])
    order_id = _show_json(runner, "EXT-100")["id"]

    result = runner.invoke(
        cli, ["order", "available", "--id", order_id, "--correlation-id", "corr-1"]
    )
    assert result.exit_code == 0, result.output
    assert "AVAILABLE" in result.output

    result = runner.invoke(cli, ["order", "fail", "--id", order_id, "--reason", "late"])
    assert result.exit_code == 1
    assert "Invalid status transition: AVAILABLE -> FAILED" in result.output

    events = [
        json.loads(line)
        for line in (tmp_path / "order_events.jsonl").read_text(encoding="utf-8").splitlines()
    ]
    assert [e["current_status"] for e in events] == ["CALCULATED", "AVAILABLE"]
    assert events[1]["correlation_id"] == "corr-1"


def test_process_calculated_order_rejected(runner):
    runner.invoke(cli, ["order", "create", "--external-id", "EXT-100", "--items", ITEMS])
    order_id = _show_json(runner, "EXT-100")["id"]
    result = runner.invoke(cli, ["order", "process", "--id", order_id])
    assert result.exit_code == 1
    assert "CALCULATED -> PROCESSING" in result.output


def test_fail_then_list_and_count(runner):
    runner.invoke(cli, ["order", "create", "--external-id", "EXT-1", "--items", ITEMS])
    runner.invoke(cli, ["order", "create", "--external-id", "EXT-2", "--items", ITEMS])
    order_id = _show_json(runner, "EXT-1")["id"]
    assert runner.invoke(cli, ["order", "fail", "--id", order_id]).exit_code == 0

    result = runner.invoke(cli, ["order", "list", "--status", "failed"])
    assert result.exit_code == 0
    assert "EXT-1" in result.output
    assert "EXT-2" not in result.output

    result = runner.invoke(cli, ["order", "count", "--status", "CALCULATED"])
    assert result.output.strip() == "CALCULATED: 1"


def test_list_empty(runner):
    result = runner.invoke(cli, ["order", "list"])
    assert result.exit_code == 0
    assert "No orders found." in result.output


def test_ingest_message(runner, tmp_path):
    message = tmp_path / "message.json"
    message.write_text(json.dumps({
        "correlation_id": "corr-9",
        "customer_id": "CUST-9",
        "items": [{"product_id": "SKU-1", "quantity": 4, "price": "2.50"}],
    }), encoding="utf-8")

    result = runner.invoke(cli, ["order", "ingest", "--file", str(message)])
    assert result.exit_code == 0, result.output
    assert _show_json(runner, "CUST-9")["totalAmount"] == "10.00"
