"""
Pytest configuration and shared fixtures for dashboard tests.

HTTP is faked at the ``requests.Session`` seam: ``FakeSession`` maps URL
paths to canned responses so no test touches the network.
"""

import os
from typing import Any, Dict, Iterator, List

import pytest

os.environ.setdefault("FOCUS_API_URL", "http://api.test")

from focus.data import ApiClient, MarketCapCache  # noqa: E402
from focus.data_manager import DataManager  # noqa: E402

BASE_URL = "http://api.test"


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, payload: Any = None, reason: str = "OK", json_error: bool = False):
        self.status_code = status_code
        self.payload = payload
        self.reason = reason
        self.json_error = json_error

    def json(self) -> Any:
        if self.json_error:
            raise ValueError("Expecting value")
        return self.payload


class FakeSession:
    """
    Routes GET requests by path (the part after the base URL).

    A route value may be a FakeResponse, an exception instance to raise, or
    a list of either consumed one per call (the last one repeats).
    """

    def __init__(self, routes: Dict[str, Any]):
        self.routes = routes
        self.calls: List[Dict[str, Any]] = []

    def get(self, url, params=None, timeout=None):
        path = url[len(BASE_URL):]
        self.calls.append({"path": path, "params": params, "timeout": timeout})
        if path not in self.routes:
            return FakeResponse(404, {"error": "not found"}, reason="Not Found")
        route = self.routes[path]
        if isinstance(route, list):
            item = route.pop(0) if len(route) > 1 else route[0]
        else:
            item = route
        if isinstance(item, Exception):
            raise item
        return item

    def paths(self) -> List[str]:
        return [c["path"] for c in self.calls]


def walk(node) -> Iterator[Any]:
    """Yield a Dash component tree depth first, strings included."""
    yield node
    if node is None or isinstance(node, (str, int, float)):
        return
    children = getattr(node, "children", None)
    if children is None:
        return
    if isinstance(children, (list, tuple)):
        for child in children:
            yield from walk(child)
    else:
        yield from walk(children)


def text_of(node) -> str:
    return " ".join(str(n) for n in walk(node) if isinstance(n, (str, int, float)))


def find_by_id(node, component_id):
    for n in walk(node):
        if getattr(n, "id", None) == component_id:
            return n
    return None


def make_token_payload(token_id: str = "tok1", **overrides) -> Dict[str, Any]:
    payload = {
        "token_id": token_id,
        "created_at": "2024-01-05T15:07:00Z",
        "name": "Focus Coin",
        "symbol": "FOCUS",
        "uri": "https://example.test/meta.json",
        "status": "accepted",
        "creator": "Creator111",
        "description": "A token for testing",
        "analytics": {
            "minutes_pre_acceptance_criteria": 42,
            "criteria_accepted_date": "2024-01-05T16:00:00Z",
            "initial_market_cap": "31.5",
            "total_transacting_wallets": 120,
            "wallets_holding": 87,
            "suspected_bot_wallets": 12,
            "quality_wallets": 30,
            "total_volume": "1234.5678",
            "bot_volume": "234.5",
            "non_bot_volume": "1000.0678",
            "non_bot_volume_percentage": "81.01",
            "total_transactions": "400",
            "bot_transactions": "90",
            "non_bot_transactions": "310",
            "bot_wallet_ratio": "0.1",
            "quality_to_bot_ratio": "2.5",
            "creator_sol_balance_usd": "10.0",
            "creator_spl_balance_usd": "0",
            "helius_total_value": "55.5",
        },
    }
    payload.update(overrides)
    return payload


def make_transaction_payload(n: int, **overrides) -> Dict[str, Any]:
    payload = {
        "transaction_id": n,
        "token_id": "tok1",
        "signature": f"sig{n}",
        "traderpublickey": f"wallet{n % 3}",
        "txtype": "buy",
        "tokenamount": "1000",
        "newtokenbalance": "1000",
        "bondingcurvekey": "curve",
        "vtokensinbondingcurve": "900000",
        "vsolinbondingcurve": "30",
        "marketcapsol": "32.1",
        "wallet_type": "quality",
        "created_at": f"2024-01-05T15:{n:02d}:00Z",
        "sol_volume": 0.5,
        "traders_token_balance_at_acceptance": "1000",
        "still_holding_at_acceptance": True,
        "helius_total_value": "12.5",
    }
    payload.update(overrides)
    return payload


def make_snapshots_payload(token_id: str = "tok1") -> List[Dict[str, Any]]:
    return [
        {"token_id": token_id, "snapshot_type": "5m", "market_cap": "40.25", "snapshot_date": "2024-01-05T16:05:00Z", "created_at": "2024-01-05T16:05:01Z"},
        {"token_id": token_id, "snapshot_type": "1h", "market_cap": 55, "snapshot_date": "2024-01-05T17:00:00Z", "created_at": "2024-01-05T17:00:01Z"},
    ]


def make_wallet_payload() -> Dict[str, Any]:
    return {
        "total_trades": 15,
        "tokens_traded": 3,
        "net_sol_volume": -2.3456,
        "classification_counts": {"bot": 2, "quality": 10, "unknown": 3},
        "dominant_classification": "quality",
        "first_transaction_date": "2024-01-01T00:00:00Z",
        "last_transaction_date": "2024-01-10T12:30:00Z",
        "current_token_balances": [
            {"token_id": "tok1", "balance": "1500.5", "last_updated": "2024-01-10T12:30:00Z"},
            {"token_id": "tok2", "balance": 20, "last_updated": "2024-01-09T08:00:00Z"},
        ],
    }


@pytest.fixture
def token_payload() -> Dict[str, Any]:
    return make_token_payload()


@pytest.fixture
def wallet_payload() -> Dict[str, Any]:
    return make_wallet_payload()


@pytest.fixture
def make_client():
    """Factory building an ApiClient over a FakeSession with no retry sleeps."""

    def _make(routes: Dict[str, Any], max_retries: int = 3) -> ApiClient:
        return ApiClient(base_url=BASE_URL, session=FakeSession(routes), max_retries=max_retries, retry_wait=0)

    return _make


@pytest.fixture
def api_routes() -> Dict[str, Any]:
    """A backend with 25 tokens, transactions for tok1, snapshots and one wallet."""
    tokens = [make_token_payload(f"tok{i}", name=f"Token {i}") for i in range(1, 26)]
    return {
        "/api/tokens": FakeResponse(200, tokens),
        "/api/tokens/tok1": FakeResponse(200, make_token_payload("tok1")),
        "/api/tokens/tok1/transactions": FakeResponse(200, {
            "transactions": [make_transaction_payload(n) for n in (3, 1, 2)],
            "total": 3,
            "page": 1,
            "limit": 50,
            "net_sol_volume": 1.25,
            "latest_token_balance": "5000",
        }),
        "/api/tokens/tok1/marketcaps": FakeResponse(200, make_snapshots_payload("tok1")),
        "/api/wallets/wallet1/stats": FakeResponse(200, make_wallet_payload()),
    }


@pytest.fixture
def data_manager(make_client, api_routes) -> DataManager:
    client = make_client(api_routes)
    return DataManager(client, MarketCapCache(client, use_async=False))
