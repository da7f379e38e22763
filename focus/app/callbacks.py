"""Dash application callbacks."""
from typing import Any, Dict, Optional, Tuple

from dash import MATCH, Input, Output, State, dcc, html
from dash.exceptions import PreventUpdate

from focus.app.layout import BUTTON_STYLE, ERROR_STYLE, HIDDEN_STYLE, SECONDARY_BUTTON_STYLE
from focus.app.pages import (
    market_cap_table,
    render_page,
    render_token_list,
    token_detail_content,
    token_detail_error,
    transactions_section,
    wallet_stats_content,
    wallet_unavailable,
)
from focus.data import Transaction, merge_token_pages, sort_transactions, transactions_frame
from focus.data_manager import DataManager
from focus.utils import setup_logger
from focus.visualization import create_market_cap_figure, create_transactions_figure

logger = setup_logger(__name__)


def register_callbacks(app, data_manager: DataManager) -> None:
    """
    Register all Dash callbacks with the app.

    Args:
        app: Dash application instance
        data_manager: DataManager used to reach the API and the shared cache
    """

    @app.callback(
        Output("page-content", "children"),
        Input("url", "pathname"),
        Input("url", "search"),
    )
    def display_page(pathname, search):
        """Route the URL to its page skeleton."""
        logger.debug(f"Routing {pathname}{search or ''}")
        return render_page(pathname, search)

    @app.callback(
        Output("tokens-store", "data"),
        Input("btn-load-more", "n_clicks"),
        State("tokens-store", "data"),
    )
    def load_tokens(n_clicks, store):
        """Load the first page on render, then the next page on every click."""
        return _load_tokens_internal(data_manager, store)

    @app.callback(
        Output("token-list", "children"),
        Output("token-count", "children"),
        Output("token-list-footer", "children"),
        Output("btn-load-more", "style"),
        Input("tokens-store", "data"),
    )
    def show_tokens(store):
        return render_token_list(store or {})

    @app.callback(
        Output({"type": "marketcap-table", "token_id": MATCH}, "children"),
        Input({"type": "marketcap-initial", "token_id": MATCH}, "data"),
        State({"type": "marketcap-initial", "token_id": MATCH}, "id"),
    )
    def fill_market_cap_table(initial_market_cap, component_id):
        """Fill one card's market cap table from the shared cache."""
        token_id = component_id["token_id"]
        return market_cap_table(initial_market_cap, data_manager.market_caps(token_id))

    @app.callback(
        Output("token-detail-content", "children"),
        Output("transactions-store", "data"),
        Input("token-detail-store", "data"),
    )
    def load_token_detail(data):
        if not data or not data.get("token_id"):
            raise PreventUpdate
        return _load_token_detail_internal(data_manager, data["token_id"])

    @app.callback(
        Output("transactions-store", "data", allow_duplicate=True),
        Input("btn-load-more-tx", "n_clicks"),
        State("transactions-store", "data"),
        prevent_initial_call=True,
    )
    def load_more_transactions(n_clicks, store):
        return _load_more_transactions_internal(data_manager, store)

    @app.callback(
        Output("transactions-section", "children"),
        Output("btn-load-more-tx", "style"),
        Output("btn-download-tx", "style"),
        Input("transactions-store", "data"),
    )
    def show_transactions(store):
        return _render_transactions_internal(store)

    @app.callback(
        Output("download-transactions", "data"),
        Input("btn-download-tx", "n_clicks"),
        State("transactions-store", "data"),
        prevent_initial_call=True,
    )
    def download_transactions(n_clicks, store):
        return _export_transactions_internal(store)

    @app.callback(
        Output("wallet-content", "children"),
        Input("wallet-store", "data"),
    )
    def load_wallet(data):
        if not data or not data.get("address"):
            raise PreventUpdate
        return _load_wallet_internal(data_manager, data["address"])


def _load_tokens_internal(data_manager: DataManager, store: Optional[Dict]) -> Dict[str, Any]:
    """Fetch the page after the last loaded one and merge it into the store."""
    store = dict(store or {})
    if store.get("loaded") and not store.get("has_more") and not store.get("error"):
        raise PreventUpdate

    next_page = (store.get("page") or 0) + 1
    result = data_manager.load_token_page(next_page)

    if result["error"]:
        # Keep the page counter so the next click retries the same page
        store.update(error=result["error"], loaded=True)
        store.setdefault("tokens", [])
        return store

    new_tokens = [t.to_dict() for t in result["tokens"]]
    return {
        "tokens": merge_token_pages(store.get("tokens") or [], new_tokens, next_page),
        "page": next_page,
        "has_more": result["has_more"],
        "error": None,
        "loaded": True,
    }


def _load_token_detail_internal(data_manager: DataManager, token_id: str) -> Tuple[Any, Optional[Dict]]:
    state = data_manager.load_token_details(token_id)
    token = state["token"]
    if state["error"] or token is None:
        return token_detail_error(state["error"] or "Token not found"), None

    snapshots = data_manager.market_caps(token_id)
    initial = token.analytics.initial_market_cap if token.analytics else None
    content = token_detail_content(
        token,
        snapshots,
        create_market_cap_figure(initial, snapshots, token_id),
        state["net_sol_volume"],
        state["latest_token_balance"],
    )
    store = {
        "token_id": token_id,
        "transactions": [tx.to_dict() for tx in state["transactions"]],
        "page": state["page"],
        "total": state["total"],
        "has_more": state["has_more"],
        "error": None,
    }
    return content, store


def _load_more_transactions_internal(data_manager: DataManager, store: Optional[Dict]) -> Dict[str, Any]:
    """Append the next transaction page, skipping signatures already shown."""
    if not store or not store.get("has_more"):
        raise PreventUpdate

    next_page = (store.get("page") or 1) + 1
    result = data_manager.load_more_transactions(store["token_id"], next_page)
    new_store = dict(store)
    if result["error"]:
        new_store["error"] = result["error"]
        return new_store

    existing = [Transaction.from_api(tx) for tx in store.get("transactions") or []]
    seen = {tx.signature for tx in existing if tx.signature}
    fresh = [tx for tx in result["transactions"] if not tx.signature or tx.signature not in seen]
    merged = sort_transactions(existing + fresh)
    logger.info(f"{store['token_id']}: loaded transactions page {next_page} ({len(fresh)} new)")

    new_store.update(
        transactions=[tx.to_dict() for tx in merged],
        page=result["page"],
        has_more=result["has_more"],
        error=None,
    )
    return new_store


def _render_transactions_internal(store: Optional[Dict]) -> Tuple[Any, Dict, Dict]:
    """Render the transactions card plus the visibility of its two buttons."""
    if not store:
        return None, HIDDEN_STYLE, HIDDEN_STYLE

    token_id = store["token_id"]
    transactions = [Transaction.from_api(tx) for tx in store.get("transactions") or []]
    figure = create_transactions_figure(transactions_frame(transactions))
    children = transactions_section(transactions, token_id, store.get("total") or 0, figure)
    if store.get("error"):
        children = html.Div([children, html.Div(store["error"], style=ERROR_STYLE)])

    more_style = BUTTON_STYLE if store.get("has_more") else HIDDEN_STYLE
    download_style = SECONDARY_BUTTON_STYLE if transactions else HIDDEN_STYLE
    return children, more_style, download_style


def _export_transactions_internal(store: Optional[Dict]) -> Dict[str, Any]:
    """Build the Excel download for the transactions currently loaded."""
    if not store or not store.get("transactions"):
        raise PreventUpdate

    transactions = [Transaction.from_api(tx) for tx in store["transactions"]]
    df = transactions_frame(transactions)
    # Excel cannot store timezone-aware datetimes
    df["created_at"] = df["created_at"].dt.tz_localize(None)
    filename = f"{store['token_id']}_transactions.xlsx"
    logger.info(f"Exporting {len(df)} transactions to {filename}")
    return dcc.send_data_frame(df.to_excel, filename, sheet_name="transactions", index=False)


def _load_wallet_internal(data_manager: DataManager, address: str):
    result = data_manager.load_wallet(address)
    if result["stats"] is None:
        return wallet_unavailable(result["not_found"])
    return wallet_stats_content(result["stats"])
