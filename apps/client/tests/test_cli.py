"""Tests for the click CLI with a mocked backend."""

from __future__ import annotations

import json
import re

import httpx
import pytest
from click.testing import CliRunner

from airease_client import cli as cli_module
from airease_client.config import ClientSettings
from airease_client.services import natural_search_service


@pytest.fixture
def backend(monkeypatch, make_client, make_flight_payload):
    """Route every CLI-created client to a fake backend."""
    flights = {
        "A": make_flight_payload("A", price=180.0, overall=8.4),
        "B": make_flight_payload("B", price=260.0, overall=7.2, stops=1),
    }

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/v1/flights/search":
            return httpx.Response(200, json={"flights": list(flights.values())})
        if path.startswith("/v1/flights/"):
            return httpx.Response(200, json=flights[path.rsplit("/", 1)[-1]])
        return httpx.Response(200, json={"ok": True})

    monkeypatch.setattr(cli_module, "AireaseClient", lambda: make_client(handler, token=""))
    return flights


def test_search(backend, requests_seen):
    result = CliRunner().invoke(
        cli_module.cli, ["search", "hkg", "nrt", "2026-11-02", "--sort", "price"]
    )

    assert result.exit_code == 0, result.output
    assert "Found 2 flight(s)" in result.output
    assert "[A] Cathay Pacific CX500" in result.output
    paths = sorted(r.url.path for r in requests_seen)
    assert paths == ["/v1/flights/search", "/v1/preferences/track/sort"]


def test_search_json_output(backend):
    result = CliRunner().invoke(
        cli_module.cli, ["search", "HKG", "NRT", "2026-11-02", "--json-output"]
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert [f["flight"]["id"] for f in data["flights"]] == ["A", "B"]


def test_compare_writes_pdf(backend, tmp_path):
    out = tmp_path / "compare.pdf"
    result = CliRunner().invoke(cli_module.cli, ["compare", "A", "B", "--pdf", str(out)])

    assert result.exit_code == 0, result.output
    assert re.search(r"best price\s+A\n", result.output)
    assert "best overall (cheapest and top score): A" in result.output
    assert re.search(r"A\s+10\.0 / 10\.0 / 10\.0 / 10\.0", result.output)
    assert re.search(r"B\s+2\.0 / 10\.0 / 8\.0 / 8\.0", result.output)
    assert out.read_bytes().startswith(b"%PDF")


def test_compare_rejects_too_many_flights(backend):
    result = CliRunner().invoke(cli_module.cli, ["compare", "A", "B", "C", "D"])

    assert result.exit_code != 0
    assert "Comparison needs 2 or 3 flights, got 4" in result.output


def test_multi_city_rejects_bad_leg(backend):
    result = CliRunner().invoke(cli_module.cli, ["multi-city", "HKG-NRT"])

    assert result.exit_code != 0
    assert "expected ORIGIN:DESTINATION:YYYY-MM-DD" in result.output


@pytest.mark.parametrize(
    ("args", "message"),
    [
        (["HKG", "NRT", "02/11/2026"], "expected YYYY-MM-DD"),
        (["HKG", "NRT", "2026-11-02", "--adults", "12"], "--adults"),
        (["HK", "NRT", "2026-11-02"], "Invalid search: origin"),
    ],
)
def test_search_rejects_bad_input(backend, requests_seen, args, message):
    result = CliRunner().invoke(cli_module.cli, ["search", *args])

    assert result.exit_code == 2
    assert message in result.output
    assert not isinstance(result.exception, ValueError)
    assert requests_seen == []


def test_ask_without_api_key_reports_failure(backend, monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("ANTHROPIC_AUTH_TOKEN", raising=False)
    monkeypatch.setattr(
        natural_search_service, "settings", ClientSettings(anthropic_api_key="")
    )
    result = CliRunner().invoke(
        cli_module.cli, ["ask", "fly to Tokyo", "--lat", "22.3", "--lng", "114.2"]
    )

    assert result.exit_code == 1
    assert "search form" in result.output
