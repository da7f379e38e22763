"""
Tests for focus.app.pages.

Routing, the token list states, card and table contents and the wallet page
are checked on the component trees directly, without a browser.
"""

import pytest
from dash import dcc

from conftest import find_by_id, make_token_payload, make_transaction_payload, make_wallet_payload, text_of, walk

from focus.app.layout import BUTTON_STYLE, HIDDEN_STYLE
from focus.app.pages import (
    ROUTE_NOT_FOUND,
    ROUTE_TOKEN_DETAIL,
    ROUTE_TOKENS,
    ROUTE_WALLET,
    market_cap_table,
    parse_route,
    render_page,
    render_token_list,
    token_card,
    token_href,
    transactions_section,
    transactions_table,
    wallet_href,
    wallet_page,
    wallet_stats_content,
    wallet_unavailable,
)
from focus.data.models import MarketCapSnapshot, Token, Transaction, WalletStats


class TestParseRoute:
    @pytest.mark.parametrize("pathname", [None, "", "/"])
    def test_root_is_token_list(self, pathname) -> None:
        assert parse_route(pathname) == (ROUTE_TOKENS, {})

    def test_token_detail(self) -> None:
        assert parse_route("/tokens/abc123") == (ROUTE_TOKEN_DETAIL, {"token_id": "abc123"})

    def test_wallet_with_origin(self) -> None:
        route, params = parse_route("/wallets/W1", "?from_token=abc")
        assert route == ROUTE_WALLET
        assert params == {"address": "W1", "from_token": "abc"}

    def test_wallet_without_origin(self) -> None:
        assert parse_route("/wallets/W1", "") == (ROUTE_WALLET, {"address": "W1"})

    @pytest.mark.parametrize("pathname", ["/tokens", "/tokens/a/b", "/elsewhere"])
    def test_unknown(self, pathname) -> None:
        assert parse_route(pathname)[0] == ROUTE_NOT_FOUND

    def test_hrefs_round_trip(self) -> None:
        assert parse_route(token_href("a/b"))[1] == {"token_id": "a/b"}
        route, params = parse_route(*wallet_href("W 1", "t1").split("?"))
        assert params == {"address": "W 1", "from_token": "t1"}


class TestRenderTokenList:
    def test_not_loaded_shows_loader(self) -> None:
        children, count, footer, style = render_token_list({"tokens": [], "loaded": False})
        assert "Loading tokens..." in text_of(children)
        assert style == HIDDEN_STYLE

    def test_empty(self) -> None:
        children, count, footer, style = render_token_list({"tokens": [], "loaded": True, "has_more": False})
        assert text_of(children) == "No tokens found"
        assert count == "Showing 0 tokens"

    def test_error_without_tokens(self) -> None:
        children, _, _, style = render_token_list({"tokens": [], "loaded": True, "error": "Failed to load tokens"})
        assert text_of(children) == "Failed to load tokens"
        assert style == HIDDEN_STYLE

    def test_more_available(self) -> None:
        store = {"tokens": [make_token_payload("a"), make_token_payload("b")], "loaded": True, "has_more": True}
        cards, count, footer, style = render_token_list(store)
        assert len(cards) == 2
        assert count == "Showing 2 tokens"
        assert footer is None
        assert style == BUTTON_STYLE

    def test_all_loaded(self) -> None:
        store = {"tokens": [make_token_payload("a")], "loaded": True, "has_more": False}
        _, _, footer, style = render_token_list(store)
        assert text_of(footer) == "All tokens loaded"
        assert style == HIDDEN_STYLE

    def test_error_after_some_pages_keeps_button(self) -> None:
        store = {"tokens": [make_token_payload("a")], "loaded": True, "has_more": True, "error": "Failed to load tokens"}
        cards, _, footer, style = render_token_list(store)
        assert len(cards) == 1
        assert text_of(footer) == "Failed to load tokens"
        assert style == BUTTON_STYLE


class TestTokenCard:
    def test_contents(self, token_payload) -> None:
        card = token_card(Token.from_api(token_payload))
        text = text_of(card)

        assert "Focus Coin (FOCUS)" in text
        assert "Token ID: tok1" in text
        assert "◎ 1,234.57" in text
        assert "81.01%" in text
        assert "400" in text

        link = next(n for n in walk(card) if isinstance(n, dcc.Link))
        assert link.href == "/tokens/tok1"

        table = find_by_id(card, {"type": "marketcap-table", "token_id": "tok1"})
        assert table is not None
        store = find_by_id(card, {"type": "marketcap-initial", "token_id": "tok1"})
        assert store.data == 31.5

    def test_placeholders(self) -> None:
        token = Token.from_api(make_token_payload(name=None, symbol="", description=None, analytics=None))
        text = text_of(token_card(token))

        assert "[name is null] ([symbol is null])" in text
        assert "[null]" in text
        assert "N/A" in text


class TestMarketCapTable:
    def test_values_and_gaps(self) -> None:
        snaps = [
            MarketCapSnapshot(token_id="t", snapshot_type="5m", market_cap=40.25),
            MarketCapSnapshot(token_id="t", snapshot_type="1d", market_cap=None),
        ]
        text = text_of(market_cap_table(31.5, snaps))

        assert text.startswith("Initial 5m 15m 30m 1h 3h 1d 3d 7d 30d")
        cells = text.split(" 30d ")[1]
        assert cells.split(" N/A")[0] == "◎ 31.50 ◎ 40.25"
        assert cells.count("N/A") == 8

    def test_no_initial(self) -> None:
        text = text_of(market_cap_table(None, []))
        assert text.count("N/A") == 10


class TestTransactions:
    def _txs(self):
        return [
            Transaction.from_api(make_transaction_payload(1)),
            Transaction.from_api(make_transaction_payload(2, traderpublickey=None, txtype=None, wallet_type=None, created_at=None)),
        ]

    def test_table_rows(self) -> None:
        table = transactions_table(self._txs(), "tok1")
        first, second = table.data

        assert first["trader"] == "[wallet1](/wallets/wallet1?from_token=tok1)"
        assert first["txtype"] == "Buy"
        assert first["wallet_type"] == "Quality"
        assert first["created_at"] == "Jan 5, 2024, 03:01 PM"
        assert second["trader"] == "null"
        assert second["txtype"] == "null"
        assert second["wallet_type"] == "null"
        assert second["created_at"] == "null"

    def test_section_counts(self) -> None:
        section = transactions_section(self._txs(), "tok1", 10, {})
        assert "Showing 2 of 10 transactions" in text_of(section)
        assert find_by_id(section, "wallet-summary-table") is not None

    def test_section_empty(self) -> None:
        assert "No transactions found for this token." in text_of(transactions_section([], "tok1", 0, {}))


class TestWalletPage:
    def _back(self, page):
        return next(n for n in walk(page) if isinstance(n, dcc.Link))

    def test_back_to_token(self) -> None:
        page = wallet_page("W1", "tok1")
        assert self._back(page).href == "/tokens/tok1"
        assert find_by_id(page, "wallet-store").data == {"address": "W1"}

    def test_back_to_list(self) -> None:
        assert self._back(wallet_page("W1")).href == "/"

    def test_unavailable_messages(self) -> None:
        assert "hasn't made any transactions yet" in text_of(wallet_unavailable(True))
        assert "error loading the wallet statistics" in text_of(wallet_unavailable(False))

    def test_stats_content(self) -> None:
        text = text_of(wallet_stats_content(WalletStats.from_api(make_wallet_payload())))

        assert "◎ -2.35" in text
        assert "Quality" in text
        assert "1,500.50" in text
        assert "Jan 10, 2024, 12:30 PM" in text

    def test_no_balances(self) -> None:
        payload = make_wallet_payload()
        payload["current_token_balances"] = []
        text = text_of(wallet_stats_content(WalletStats.from_api(payload)))
        assert "No current token balances" in text

    def test_missing_dominant_type(self) -> None:
        payload = make_wallet_payload()
        payload["dominant_classification"] = None
        text = text_of(wallet_stats_content(WalletStats.from_api(payload)))

        assert "N/A" in text
        assert "N/a" not in text


def test_render_page_not_found() -> None:
    text = text_of(render_page("/nowhere"))
    assert "Page not found" in text
    assert "/nowhere" in text
