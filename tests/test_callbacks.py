"""
Tests for the callback bodies in focus.app.callbacks.

The ``_internal`` helpers hold all the logic, so they are called directly
with a DataManager backed by the fake session.
"""

import base64
import io

import pandas as pd
import pytest
from dash.exceptions import PreventUpdate

from conftest import FakeResponse, find_by_id, make_transaction_payload, text_of

from focus.app.callbacks import (
    _export_transactions_internal,
    _load_more_transactions_internal,
    _load_token_detail_internal,
    _load_tokens_internal,
    _load_wallet_internal,
    _render_transactions_internal,
)
from focus.app.layout import BUTTON_STYLE, HIDDEN_STYLE, SECONDARY_BUTTON_STYLE
from focus.data.models import Transaction
from focus.data_manager import DataManager

INITIAL_STORE = {"tokens": [], "page": 0, "has_more": True, "error": None, "loaded": False}


def _tx_dict(n):
    return Transaction.from_api(make_transaction_payload(n)).to_dict()


class TestLoadTokens:
    def test_first_then_second_page(self, data_manager) -> None:
        first = _load_tokens_internal(data_manager, INITIAL_STORE)
        assert first["page"] == 1
        assert len(first["tokens"]) == 20
        assert first["has_more"] is True
        assert first["loaded"] is True

        second = _load_tokens_internal(data_manager, first)
        assert second["page"] == 2
        assert [t["token_id"] for t in second["tokens"]][-1] == "tok25"
        assert len(second["tokens"]) == 25
        assert second["has_more"] is False

    def test_stops_when_everything_loaded(self, data_manager) -> None:
        store = {"tokens": [], "page": 2, "has_more": False, "error": None, "loaded": True}
        with pytest.raises(PreventUpdate):
            _load_tokens_internal(data_manager, store)

    def test_error_keeps_page_for_retry(self, make_client) -> None:
        client = make_client({"/api/tokens": FakeResponse(500, None)}, max_retries=1)
        store = {"tokens": [{"token_id": "a"}], "page": 1, "has_more": True, "error": None, "loaded": True}

        result = _load_tokens_internal(DataManager(client), store)

        assert result["page"] == 1
        assert result["tokens"] == [{"token_id": "a"}]
        assert result["error"] == "Failed to load tokens"

    def test_retry_after_error_clears_it(self, data_manager) -> None:
        store = {"tokens": [], "page": 0, "has_more": False, "error": "Failed to load tokens", "loaded": True}
        result = _load_tokens_internal(data_manager, store)
        assert result["error"] is None
        assert result["page"] == 1


class TestTokenDetail:
    def test_success(self, data_manager) -> None:
        content, store = _load_token_detail_internal(data_manager, "tok1")

        assert "Focus Coin (FOCUS)" in text_of(content)
        assert find_by_id(content, "marketcap-chart") is not None
        assert store["token_id"] == "tok1"
        assert [tx["transaction_id"] for tx in store["transactions"]] == [1, 2, 3]
        assert store["has_more"] is False

    def test_not_found(self, data_manager) -> None:
        content, store = _load_token_detail_internal(data_manager, "ghost")
        assert "Token not found" in text_of(content)
        assert store is None


class TestLoadMoreTransactions:
    def _store(self):
        return {
            "token_id": "tok1",
            "transactions": [_tx_dict(n) for n in (1, 2)],
            "page": 1,
            "total": 4,
            "has_more": True,
            "error": None,
        }

    def test_appends_and_dedupes(self, make_client) -> None:
        client = make_client({
            "/api/tokens/tok1/transactions": FakeResponse(200, {
                "transactions": [make_transaction_payload(n) for n in (4, 2, 3)],
                "total": 4,
                "page": 2,
                "limit": 50,
            }),
        })
        result = _load_more_transactions_internal(DataManager(client), self._store())

        assert [tx["transaction_id"] for tx in result["transactions"]] == [1, 2, 3, 4]
        assert result["page"] == 2
        assert result["has_more"] is False
        assert client.session.calls[0]["params"]["page"] == 2

    def test_error_kept_in_store(self, make_client) -> None:
        client = make_client({"/api/tokens/tok1/transactions": FakeResponse(500, None)}, max_retries=1)
        result = _load_more_transactions_internal(DataManager(client), self._store())

        assert result["error"] == "Failed to load transactions"
        assert len(result["transactions"]) == 2
        assert result["page"] == 1

    def test_nothing_more(self, data_manager) -> None:
        with pytest.raises(PreventUpdate):
            _load_more_transactions_internal(data_manager, {"token_id": "tok1", "has_more": False})


class TestRenderTransactions:
    def test_no_store(self) -> None:
        assert _render_transactions_internal(None) == (None, HIDDEN_STYLE, HIDDEN_STYLE)

    def test_buttons(self) -> None:
        store = {"token_id": "tok1", "transactions": [_tx_dict(1)], "total": 5, "has_more": True}
        children, more, download = _render_transactions_internal(store)

        assert "Showing 1 of 5 transactions" in text_of(children)
        assert more == BUTTON_STYLE
        assert download == SECONDARY_BUTTON_STYLE

    def test_empty(self) -> None:
        store = {"token_id": "tok1", "transactions": [], "total": 0, "has_more": False}
        children, more, download = _render_transactions_internal(store)

        assert "No transactions found for this token." in text_of(children)
        assert more == HIDDEN_STYLE
        assert download == HIDDEN_STYLE

    def test_error_appended(self) -> None:
        store = {"token_id": "tok1", "transactions": [_tx_dict(1)], "has_more": True, "error": "Failed to load transactions"}
        children, _, _ = _render_transactions_internal(store)
        assert "Failed to load transactions" in text_of(children)


class TestExport:
    def test_excel_download(self) -> None:
        store = {"token_id": "tok1", "transactions": [_tx_dict(n) for n in (1, 2)]}
        result = _export_transactions_internal(store)

        assert result["filename"] == "tok1_transactions.xlsx"
        assert result["base64"] is True
        df = pd.read_excel(io.BytesIO(base64.b64decode(result["content"])), sheet_name="transactions")
        assert list(df["signature"]) == ["sig1", "sig2"]

    def test_nothing_to_export(self) -> None:
        with pytest.raises(PreventUpdate):
            _export_transactions_internal({"token_id": "tok1", "transactions": []})


class TestWallet:
    def test_stats(self, data_manager) -> None:
        assert "Trading Activity" in text_of(_load_wallet_internal(data_manager, "wallet1"))

    def test_unavailable(self, data_manager) -> None:
        assert "Wallet Statistics Unavailable" in text_of(_load_wallet_internal(data_manager, "ghost"))
