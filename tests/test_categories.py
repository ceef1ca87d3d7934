from vantake.core.categories import (
    category_strengths,
    classify_title,
    map_category,
    map_category_to_api,
    map_timeframe_to_api,
)
from vantake.polymarket.schemas import UserPosition


def test_classify_title_first_match_wins():
    assert classify_title("Will BTC hit 100k?") == "Crypto"
    # Crypto outranks Politics when both match.
    assert classify_title("Will Trump buy Bitcoin?") == "Crypto"
    assert classify_title("Who wins the presidential election?") == "Politics"
    assert classify_title("NBA Finals winner") == "Sports"
    assert classify_title("Will the Fed cut rates?") == "Finance"
    assert classify_title("Best picture at the Oscars") == "Other"
    assert classify_title(None) == "Other"


def test_category_strengths_clamped_and_sorted():
    positions = [
        UserPosition.model_validate({"title": "BTC above 90k", "cashPnl": 2_000}),
        UserPosition.model_validate({"title": "ETH flips BTC", "cashPnl": 8_000}),
        UserPosition.model_validate({"title": "Election turnout", "cashPnl": -1_000}),
        UserPosition.model_validate({"title": "NFL MVP", "cashPnl": -9_000}),
    ]
    rows = category_strengths(positions)

    assert [row["category"] for row in rows] == ["Crypto", "Politics", "Sports"]
    assert rows[0]["strength"] == 100.0
    assert rows[0]["positions"] == 2
    assert rows[1]["strength"] == 40.0
    assert rows[2]["strength"] == 0.0


def test_category_strengths_limit():
    positions = [
        UserPosition.model_validate({"title": title, "cashPnl": 0})
        for title in ("btc", "trump", "nba", "stock", "weather")
    ]
    assert len(category_strengths(positions, limit=3)) == 3


def test_vocabulary_mapping():
    assert map_timeframe_to_api("24H") == "DAY"
    assert map_timeframe_to_api("7D") == "WEEK"
    assert map_timeframe_to_api("30D") == "MONTH"
    assert map_timeframe_to_api("All") == "ALL"
    assert map_timeframe_to_api("bogus") == "WEEK"
    assert map_category_to_api("Pop Culture") == "CULTURE"
    assert map_category_to_api("Unknown") == "OVERALL"
    assert map_category("culture") == "Pop Culture"
    assert map_category(None) == "Other"
    assert map_category("Esports") == "Esports"
    assert map_category("economics") == "Finance"


def test_api_vocabulary_passes_through():
    assert map_category_to_api("crypto") == "CRYPTO"
    assert map_category_to_api("MENTIONS") == "MENTIONS"
    assert map_category_to_api(None) == "OVERALL"
    assert map_timeframe_to_api("month") == "MONTH"
    assert map_timeframe_to_api("DAY") == "DAY"
    assert map_timeframe_to_api(None) == "WEEK"
