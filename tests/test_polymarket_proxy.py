import logging

import httpx
import pytest

from vantake.settings import settings

REQUIRED_PARAMS = [
    ("/api/polymarket/book", "token_id"),
    ("/api/polymarket/price?token_id=1", "side"),
    ("/api/polymarket/midpoint", "token_id"),
    ("/api/polymarket/spread", "token_id"),
    ("/api/polymarket/prices-history", "token_id"),
    ("/api/polymarket/search", "query"),
    ("/api/polymarket/positions", "user"),
    ("/api/polymarket/closed-positions", "user"),
    ("/api/polymarket/activity", "user"),
    ("/api/polymarket/value", "user"),
    ("/api/polymarket/holders", "market"),
]

PASSTHROUGH_PATHS = [
    ("/api/polymarket/book?token_id=1", "CLOB"),
    ("/api/polymarket/price?token_id=1&side=buy", "CLOB"),
    ("/api/polymarket/prices-history?token_id=1", "CLOB"),
    ("/api/polymarket/midpoint?token_id=1", "CLOB"),
    ("/api/polymarket/spread?token_id=1", "CLOB"),
    ("/api/polymarket/markets", "Gamma"),
    ("/api/polymarket/markets/123", "Gamma"),
    ("/api/polymarket/events", "Gamma"),
    ("/api/polymarket/events/9", "Gamma"),
    ("/api/polymarket/search?query=btc", "Gamma"),
    ("/api/polymarket/tags", "Gamma"),
    ("/api/polymarket/profiles/0xabc", "Gamma"),
    ("/api/polymarket/leaderboard", "Data"),
    ("/api/polymarket/positions?user=0xabc", "Data"),
    ("/api/polymarket/trades", "Data"),
    ("/api/polymarket/activity?user=0xabc", "Data"),
    ("/api/polymarket/holders?market=0xcond", "Data"),
    ("/api/polymarket/closed-positions?user=0xabc", "Data"),
    ("/api/polymarket/value?user=0xabc", "Data"),
]


def _json(payload, status_code=200):
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)

    return _handler


@pytest.mark.parametrize("path,param", REQUIRED_PARAMS)
def test_missing_required_param_returns_400(client, upstream, path, param):
    seen = upstream(_json({}))
    response = client.get(path)
    assert response.status_code == 400
    assert param in response.json()["error"]
    assert seen == []


@pytest.mark.parametrize("path,service", PASSTHROUGH_PATHS)
def test_upstream_503_passes_through(client, upstream, path, service):
    upstream(_json({"detail": "down"}, status_code=503))
    response = client.get(path)
    assert response.status_code == 503
    assert response.json() == {"error": f"{service} API error: 503"}
    assert "cache-control" not in {key.lower() for key in response.headers}


def test_transport_failure_returns_500(client, upstream):
    def _boom(request):
        raise httpx.ConnectError("connection refused", request=request)

    upstream(_boom)
    response = client.get("/api/polymarket/trades?user=0xabc")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch trades"}


def test_invalid_json_returns_500(client, upstream):
    upstream(lambda request: httpx.Response(200, content=b"<html>oops</html>"))
    response = client.get("/api/polymarket/book?token_id=1")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch order book"}


def test_markets_forwards_default_filters(client, upstream):
    seen = upstream(_json([{"id": "1"}]))
    response = client.get("/api/polymarket/markets?limit=5")
    assert response.status_code == 200
    assert response.json() == [{"id": "1"}]

    request = seen[0]
    assert request.url.host == "gamma-api.polymarket.com"
    assert request.url.path == "/markets"
    params = dict(request.url.params)
    assert params == {
        "limit": "5",
        "order": "volume",
        "ascending": "false",
        "active": "true",
        "closed": "false",
    }


def test_markets_events_endpoint_and_rejects_others(client, upstream):
    seen = upstream(_json([]))
    assert client.get("/api/polymarket/markets?endpoint=events&order=liquidity").status_code == 200
    assert seen[0].url.path == "/events"
    assert seen[0].url.params["order"] == "liquidity"
    assert "endpoint" not in seen[0].url.params

    response = client.get("/api/polymarket/markets?endpoint=admin")
    assert response.status_code == 400
    assert len(seen) == 1


@pytest.mark.parametrize(
    "path,ttl",
    [
        ("/api/polymarket/book?token_id=1", 10),
        ("/api/polymarket/midpoint?token_id=1", 10),
        ("/api/polymarket/leaderboard", 60),
        ("/api/polymarket/tags", 3600),
        ("/api/polymarket/profiles/0xabc", 300),
    ],
)
def test_success_sets_cache_control(client, upstream, path, ttl):
    upstream(_json({"ok": True}))
    response = client.get(path)
    assert response.status_code == 200
    assert response.headers["cache-control"] == f"public, s-maxage={ttl}, stale-while-revalidate={ttl * 2}"


def test_leaderboard_defaults_reach_upstream(client, upstream):
    seen = upstream(_json([]))
    client.get("/api/polymarket/leaderboard?user=0xabc&limit=1")
    request = seen[0]
    assert request.url.path == "/v1/leaderboard"
    assert dict(request.url.params) == {
        "category": "OVERALL",
        "timePeriod": "WEEK",
        "orderBy": "PNL",
        "limit": "1",
        "user": "0xabc",
    }


@pytest.mark.parametrize(
    "query,category,period",
    [
        ("category=Pop%20Culture&timePeriod=24H", "CULTURE", "DAY"),
        ("category=All&timePeriod=30D", "OVERALL", "MONTH"),
        ("category=crypto&timePeriod=all", "CRYPTO", "ALL"),
        ("category=bogus&timePeriod=bogus", "OVERALL", "WEEK"),
    ],
)
def test_leaderboard_accepts_ui_and_api_vocabulary(client, upstream, query, category, period):
    seen = upstream(_json([]))
    assert client.get(f"/api/polymarket/leaderboard?{query}").status_code == 200
    assert seen[0].url.params["category"] == category
    assert seen[0].url.params["timePeriod"] == period


def test_positions_defaults_reach_upstream(client, upstream):
    seen = upstream(_json([]))
    client.get("/api/polymarket/positions?user=0xabc")
    assert dict(seen[0].url.params) == {
        "user": "0xabc",
        "limit": "100",
        "sortBy": "CASHPNL",
        "sortDirection": "DESC",
    }


def test_price_uppercases_side(client, upstream):
    seen = upstream(_json({"price": "0.5"}))
    response = client.get("/api/polymarket/price?token_id=42&side=sell")
    assert response.json() == {"price": "0.5"}
    assert seen[0].url.host == httpx.URL(settings.CLOB_API_BASE).host
    assert dict(seen[0].url.params) == {"token_id": "42", "side": "SELL"}


def test_upstream_errors_are_logged(client, upstream, caplog):
    upstream(_json({}, status_code=502))
    with caplog.at_level(logging.WARNING, logger="vantake.upstream"):
        client.get("/api/polymarket/tags")
    messages = [record.getMessage() for record in caplog.records if record.name == "vantake.upstream"]
    assert any(m.startswith("upstream_request_error service=Gamma") for m in messages)
