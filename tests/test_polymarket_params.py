from vantake.polymarket.client import (
    build_leaderboard_params,
    build_markets_params,
    build_positions_params,
    build_price_history_params,
    build_trades_params,
    build_user_page_params,
)


def test_markets_params_add_defaults_and_drop_endpoint():
    params = build_markets_params([("endpoint", "events"), ("limit", "5"), ("tag_id", "2")])
    assert params == {
        "limit": "5",
        "tag_id": "2",
        "order": "volume",
        "ascending": "false",
        "active": "true",
        "closed": "false",
    }


def test_markets_params_keep_caller_overrides():
    params = build_markets_params([("order", "liquidity"), ("closed", "true")])
    assert params["order"] == "liquidity"
    assert params["closed"] == "true"
    assert params["ascending"] == "false"


def test_leaderboard_params_defaults():
    assert build_leaderboard_params() == {
        "category": "OVERALL",
        "timePeriod": "WEEK",
        "orderBy": "PNL",
        "limit": "24",
    }


def test_leaderboard_params_user_and_paging():
    params = build_leaderboard_params(
        category="crypto", time_period="month", limit="10", offset="20", user="0xabc", user_name=""
    )
    assert params["category"] == "CRYPTO"
    assert params["timePeriod"] == "MONTH"
    assert params["limit"] == "10"
    assert params["offset"] == "20"
    assert params["user"] == "0xabc"
    assert "userName" not in params


def test_bad_integers_fall_back_to_defaults():
    assert build_leaderboard_params(limit="lots")["limit"] == "24"
    assert "offset" not in build_leaderboard_params(offset="-5")


def test_positions_params_defaults():
    assert build_positions_params(user="0xabc") == {
        "user": "0xabc",
        "limit": "100",
        "sortBy": "CASHPNL",
        "sortDirection": "DESC",
    }


def test_positions_params_optional_filters():
    params = build_positions_params(
        user="0xabc", market="0xcond", size_threshold="1.5", redeemable="true", sort_by="current"
    )
    assert params["market"] == "0xcond"
    assert params["sizeThreshold"] == "1.5"
    assert params["redeemable"] == "true"
    assert params["sortBy"] == "CURRENT"


def test_trades_params_market_list_and_side():
    params = build_trades_params(market=" 0xa, ,0xb ", side="buy", filter_type="cash", filter_amount="100")
    assert params == {
        "market": "0xa,0xb",
        "limit": "100",
        "filterType": "CASH",
        "filterAmount": "100.0",
        "side": "BUY",
    }


def test_user_page_params_omit_defaults():
    assert build_user_page_params(user="0xabc") == {"user": "0xabc"}
    assert build_user_page_params(user="0xabc", limit="50", offset="10") == {
        "user": "0xabc",
        "limit": "50",
        "offset": "10",
    }


def test_price_history_params():
    assert build_price_history_params(token_id="123") == {
        "token_id": "123",
        "interval": "1w",
        "fidelity": "60",
    }
    params = build_price_history_params(token_id="123", interval="1d", fidelity="5", start_ts="100")
    assert params == {"token_id": "123", "interval": "1d", "fidelity": "5", "startTs": "100"}
