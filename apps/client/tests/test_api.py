"""Tests for the backend REST client."""

from __future__ import annotations

import datetime as dt
import json

import httpx
import pytest

from airease_core.schemas import (
    PassengerCount,
    SearchHistoryCreate,
    SearchRequest,
    SortEvent,
)


async def test_search_flights(make_client, make_flight_payload, requests_seen):
    body = {
        "flights": [make_flight_payload("F1"), make_flight_payload("F2", price=310)],
        "meta": {"total": 2, "searchId": "s-1", "isAuthenticated": True},
    }
    client = make_client(lambda request: httpx.Response(200, json=body))
    request = SearchRequest(
        origin="HKG",
        destination="NRT",
        departure_date=dt.date(2026, 11, 2),
        passengers=PassengerCount(adults=2),
        stops=0,
    )

    response = await client.search_flights(request)
    await client.close()

    assert [f.flight.id for f in response.flights] == ["F1", "F2"]
    assert response.flights[1].flight.price == 310
    assert response.meta.search_id == "s-1"

    sent = requests_seen[0]
    assert sent.url.path == "/v1/flights/search"
    assert sent.url.params["from"] == "HKG"
    assert sent.url.params["adults"] == "2"
    assert sent.url.params["stops"] == "0"
    assert sent.headers["Authorization"] == "Bearer test-token"


async def test_anonymous_client_sends_no_token(make_client, requests_seen):
    client = make_client(lambda request: httpx.Response(200, json=[]), token="")
    assert not client.authenticated
    await client.get_search_history()
    await client.close()
    assert "Authorization" not in requests_seen[0].headers


async def test_http_errors_surface(make_client):
    client = make_client(lambda request: httpx.Response(503, json={"detail": "down"}))
    with pytest.raises(httpx.HTTPStatusError):
        await client.get_flight_detail("F1")
    await client.close()


async def test_flight_detail_with_price_history(make_client, make_flight_payload):
    payload = make_flight_payload("F9")
    payload["priceHistory"] = {
        "flightId": "F9",
        "points": [{"date": "2026-10-01", "price": 240}, {"date": "2026-10-08", "price": 220}],
        "currentPrice": 200,
        "trend": "falling",
    }
    client = make_client(lambda request: httpx.Response(200, json=payload))
    detail = await client.get_flight_detail("F9")
    await client.close()

    assert detail.flight.id == "F9"
    assert detail.price_history is not None
    assert detail.price_history.trend == "falling"
    assert len(detail.price_history.points) == 2


async def test_find_nearest_airport(make_client, requests_seen):
    airport = {
        "iataCode": "HKG",
        "name": "Hong Kong International Airport",
        "municipality": "Hong Kong",
        "latitude": 22.308,
        "longitude": 113.918,
    }
    client = make_client(lambda request: httpx.Response(200, json=airport))
    result = await client.find_nearest_airport(22.3, 114.2, max_distance_km=150)
    await client.close()

    assert result.iata_code == "HKG"
    assert requests_seen[0].url.path == "/v1/airports/nearest"
    assert requests_seen[0].url.params["max_distance_km"] == "150"


async def test_add_search_history(make_client, requests_seen):
    def handler(request: httpx.Request) -> httpx.Response:
        data = json.loads(request.content)
        return httpx.Response(
            201, json={**data, "id": 7, "created_at": "2026-10-18T10:00:00"}
        )

    client = make_client(handler)
    entry = SearchHistoryCreate(
        departure_city="HKG", arrival_city="NRT", departure_date=dt.date(2026, 11, 2)
    )
    saved = await client.add_search_history(entry)
    await client.close()

    assert saved.id == 7
    assert requests_seen[0].method == "POST"
    assert json.loads(requests_seen[0].content)["departure_date"] == "2026-11-02"


async def test_post_event(make_client, requests_seen):
    client = make_client(lambda request: httpx.Response(200, json={"ok": True}))
    await client.post_event(SortEvent(sort_by="price"))
    await client.close()

    sent = requests_seen[0]
    assert sent.url.path == "/v1/preferences/track/sort"
    assert json.loads(sent.content) == {"sort_by": "price"}


async def test_preferences(make_client, requests_seen):
    profile = {"preferred_sort": "price", "sort_counts": {"price": 4}, "has_preferences": True}
    client = make_client(lambda request: httpx.Response(200, json=profile))
    prefs = await client.get_my_preferences()
    await client.clear_preferences()
    await client.close()

    assert prefs.preferred_sort == "price"
    assert prefs.sort_counts == {"price": 4}
    assert requests_seen[1].method == "DELETE"
    assert requests_seen[1].url.path == "/v1/preferences/clear"


async def test_get_price_history(make_client, requests_seen):
    history = {
        "flightId": "F9",
        "points": [{"date": "2026-10-01", "price": 240}],
        "currentPrice": 260,
        "trend": "rising",
        "priceLevel": "high",
        "typicalPriceRange": [180, 230],
    }
    client = make_client(lambda request: httpx.Response(200, json=history))
    result = await client.get_price_history("F9")
    await client.close()

    assert requests_seen[0].url.path == "/v1/flights/F9/price-history"
    assert result.current_price == 260
    assert result.price_level == "high"
    assert result.typical_price_range == (180.0, 230.0)
    assert result.points[0].date == dt.date(2026, 10, 1)


async def test_get_seatmap_passes_payload_through(make_client, requests_seen):
    seatmap = {"decks": [{"rows": [{"number": 12, "seats": ["A", "C"]}]}]}
    client = make_client(lambda request: httpx.Response(200, json=seatmap))
    result = await client.get_seatmap("F9")
    await client.close()

    assert requests_seen[0].url.path == "/v1/seatmap/F9"
    assert result == seatmap


async def test_get_airport_coordinates(make_client, requests_seen):
    airport = {
        "iataCode": "NRT",
        "name": "Narita International Airport",
        "municipality": "Tokyo",
        "latitude": 35.764,
        "longitude": 140.386,
    }
    client = make_client(lambda request: httpx.Response(200, json=airport))
    result = await client.get_airport_coordinates("NRT")
    await client.close()

    assert requests_seen[0].url.path == "/v1/airports/coordinates/NRT"
    assert result.municipality == "Tokyo"
    assert result.latitude == pytest.approx(35.764)


async def test_delete_search_history(make_client, requests_seen):
    client = make_client(lambda request: httpx.Response(204))
    await client.delete_search_history(7)
    await client.clear_search_history()
    await client.close()

    assert [(r.method, r.url.path) for r in requests_seen] == [
        ("DELETE", "/v1/users/search-history/7"),
        ("DELETE", "/v1/users/search-history"),
    ]


async def test_delete_missing_search_history_raises(make_client):
    client = make_client(lambda request: httpx.Response(404, json={"detail": "not found"}))
    with pytest.raises(httpx.HTTPStatusError):
        await client.delete_search_history(99)
    await client.close()
