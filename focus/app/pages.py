"""Page skeletons, route parsing and the components each page renders."""
from typing import Any, Dict, Optional, Sequence, Tuple
from urllib.parse import parse_qs, quote, unquote

import pandas as pd
from dash import dash_table, dcc, html

from focus.app.layout import (
    BUTTON_STYLE,
    CARD_STYLE,
    DATA_TABLE_KWARGS,
    ERROR_STYLE,
    FEATURE_BOX_STYLE,
    GRID_STYLE,
    HIDDEN_STYLE,
    MONO_STYLE,
    MUTED_STYLE,
    SECTION_TITLE_STYLE,
    TABLE_STYLE,
    TD_STYLE,
    TH_STYLE,
    WARNING_BOX_STYLE,
    back_link,
    field,
    loader,
    section,
)
from focus.constants import (
    APP_TITLE,
    INITIAL_LABEL,
    NOT_AVAILABLE,
    NULL_CELL,
    NULL_CREATOR,
    NULL_DESCRIPTION,
    NULL_NAME,
    NULL_SOURCE,
    NULL_SYMBOL,
    NULL_VALUE,
    SNAPSHOT_TYPES,
)
from focus.data.models import MarketCapSnapshot, Token, Transaction, WalletStats
from focus.data.transformer import group_by_wallet, snapshot_row
from focus.formatting import format_date, format_number, format_ratio, format_sol, format_text

# Route names
ROUTE_TOKENS = "tokens"
ROUTE_TOKEN_DETAIL = "token-detail"
ROUTE_WALLET = "wallet"
ROUTE_NOT_FOUND = "not-found"


def parse_route(pathname: Optional[str], search: Optional[str] = None) -> Tuple[str, Dict[str, str]]:
    """
    Resolve a URL into a route name and its parameters.

    Args:
        pathname: URL path, e.g. "/tokens/abc"
        search: Query string, e.g. "?from_token=abc"

    Returns:
        (route name, params) tuple
    """
    parts = [unquote(p) for p in (pathname or "/").strip("/").split("/") if p]
    query = parse_qs((search or "").lstrip("?"))

    if not parts:
        return ROUTE_TOKENS, {}
    if len(parts) == 2 and parts[0] == "tokens":
        return ROUTE_TOKEN_DETAIL, {"token_id": parts[1]}
    if len(parts) == 2 and parts[0] == "wallets":
        params = {"address": parts[1]}
        from_token = query.get("from_token", [""])[0]
        if from_token:
            params["from_token"] = from_token
        return ROUTE_WALLET, params
    return ROUTE_NOT_FOUND, {"pathname": pathname or ""}


def token_href(token_id: str) -> str:
    return f"/tokens/{quote(token_id, safe='')}"


def wallet_href(address: str, from_token: Optional[str] = None) -> str:
    href = f"/wallets/{quote(address, safe='')}"
    if from_token:
        href += f"?from_token={quote(from_token, safe='')}"
    return href


def _analytics(token: Token, name: str):
    if token.analytics is None:
        return None
    return getattr(token.analytics, name)


# ---------------------------------------------------------------------------
# Token list
# ---------------------------------------------------------------------------

def token_list_page() -> html.Div:
    """Skeleton of the token list; callbacks fill in cards as pages load."""
    return html.Div(
        children=[
            html.Div(
                style={"display": "flex", "justifyContent": "space-between", "alignItems": "center", "marginBottom": "24px"},
                children=[
                    html.H1(APP_TITLE, style={"color": "#2c3e50", "fontWeight": "700", "margin": "0"}),
                    html.Div(id="token-count", style={"fontSize": "14px", "color": "#6c757d"}),
                ],
            ),
            dcc.Store(id="tokens-store", data={"tokens": [], "page": 0, "has_more": True, "error": None, "loaded": False}),
            html.Div(id="token-list", children=loader("Loading tokens...")),
            html.Div(
                style={"textAlign": "center", "marginTop": "16px"},
                children=[
                    html.Button("Load more", id="btn-load-more", style=HIDDEN_STYLE),
                    html.Div(id="token-list-footer"),
                ],
            ),
        ]
    )


def render_token_list(store: Dict[str, Any]) -> Tuple[Any, str, Any, Dict]:
    """
    Render the token list from its store.

    Returns:
        (list children, count text, footer children, load-more button style)
    """
    tokens = [Token.from_api(t) for t in store.get("tokens") or []]
    count_text = f"Showing {len(tokens)} tokens"

    if not store.get("loaded"):
        return loader("Loading tokens..."), count_text, None, HIDDEN_STYLE
    if store.get("error") and not tokens:
        return html.Div(store["error"], style=ERROR_STYLE), count_text, None, HIDDEN_STYLE
    if not tokens:
        return html.P("No tokens found", style=MUTED_STYLE), count_text, None, HIDDEN_STYLE

    cards = [token_card(t) for t in tokens]
    if store.get("error"):
        footer = html.Div(store["error"], style=ERROR_STYLE)
        return cards, count_text, footer, BUTTON_STYLE
    if store.get("has_more"):
        return cards, count_text, None, BUTTON_STYLE
    return cards, count_text, html.P("All tokens loaded", style=MUTED_STYLE), HIDDEN_STYLE


def token_card(token: Token) -> html.Div:
    """Card summarising one token, with a placeholder for its market cap table."""
    minutes = _analytics(token, "minutes_pre_acceptance_criteria")
    return html.Div(
        className="token-card",
        style=CARD_STYLE,
        children=[
            html.Div(
                style={"borderBottom": "1px solid #dee2e6", "paddingBottom": "12px", "marginBottom": "16px"},
                children=[
                    html.H3(
                        f"{format_text(token.name, NULL_NAME)} ({format_text(token.symbol, NULL_SYMBOL)})",
                        style={"margin": "0 0 6px 0", "color": "#2c3e50"},
                    ),
                    html.P(f"Token ID: {token.token_id}", style=MONO_STYLE),
                    html.P(format_text(token.description, NULL_DESCRIPTION), style={"fontSize": "14px"}),
                ],
            ),
            html.Div(
                style=FEATURE_BOX_STYLE,
                children=[
                    html.H4("Feature Fields", style=SECTION_TITLE_STYLE),
                    html.Div(
                        style=GRID_STYLE,
                        children=[
                            field("Minutes Pre-Acceptance", format_number(minutes) if minutes is not None else NULL_VALUE),
                            field("Wallets Holding", format_number(_analytics(token, "wallets_holding"))),
                            field("Total Volume", format_sol(_analytics(token, "total_volume"))),
                            field("Bot Wallets", format_number(_analytics(token, "suspected_bot_wallets"))),
                            field("Quality Wallets", format_number(_analytics(token, "quality_wallets"))),
                            field("Non-Bot Volume", format_sol(_analytics(token, "non_bot_volume"))),
                        ],
                    ),
                ],
            ),
            html.Div(
                style=GRID_STYLE,
                children=[
                    general_info_section(token),
                    market_info_section(token),
                    section(
                        "Additional Metrics",
                        [
                            field("Bot Wallet Ratio", format_ratio(_analytics(token, "bot_wallet_ratio"))),
                            field("Quality/Bot Ratio", format_ratio(_analytics(token, "quality_to_bot_ratio"))),
                            field("Non-Bot Volume %", f"{format_ratio(_analytics(token, 'non_bot_volume_percentage'))}%"),
                            field("Total Transactions", format_number(_analytics(token, "total_transactions"))),
                            field("Bot Transactions", format_number(_analytics(token, "bot_transactions"))),
                            field("Non-Bot Transactions", format_number(_analytics(token, "non_bot_transactions"))),
                        ],
                    ),
                ],
            ),
            html.Div(
                style={"marginTop": "16px"},
                children=[
                    html.H4("Market Cap Snapshots", style=SECTION_TITLE_STYLE),
                    dcc.Store(
                        id={"type": "marketcap-initial", "token_id": token.token_id},
                        data=_analytics(token, "initial_market_cap"),
                    ),
                    html.Div(
                        id={"type": "marketcap-table", "token_id": token.token_id},
                        children=market_cap_table(_analytics(token, "initial_market_cap"), []),
                    ),
                ],
            ),
            html.Div(
                style={"display": "flex", "justifyContent": "flex-end", "marginTop": "12px"},
                children=dcc.Link("Token Details", href=token_href(token.token_id), style=BUTTON_STYLE),
            ),
        ],
    )


def general_info_section(token: Token) -> html.Div:
    return section(
        "General Information",
        [
            field("Status", token.status or NOT_AVAILABLE),
            field("Source", format_text(token.source, NULL_SOURCE)),
            field("Creator", html.Span(format_text(token.creator, NULL_CREATOR), style=MONO_STYLE)),
            field("Created", format_date(token.created_at)),
            field("Last Updated", format_date(token.last_updated)),
        ],
    )


def market_info_section(token: Token) -> html.Div:
    return section(
        "Market Information",
        [
            field("Initial Market Cap", format_sol(_analytics(token, "initial_market_cap"))),
            field("Current Market Cap", format_sol(token.market_cap_at_filter)),
            field("Filtered At", format_date(token.filtered_at)),
            field("Criteria Accepted", format_date(_analytics(token, "criteria_accepted_date"))),
        ],
    )


def market_cap_table(initial_market_cap: Optional[float], snapshots: Sequence[MarketCapSnapshot]) -> html.Table:
    """One-row table: initial market cap followed by every snapshot interval."""
    row = snapshot_row(snapshots)
    headers = [INITIAL_LABEL] + list(SNAPSHOT_TYPES)
    cells = [format_sol(initial_market_cap) if initial_market_cap is not None else NOT_AVAILABLE]
    for kind in SNAPSHOT_TYPES:
        snap = row[kind]
        cells.append(format_sol(snap.market_cap) if snap is not None else NOT_AVAILABLE)

    return html.Div(
        style={"overflowX": "auto"},
        children=html.Table(
            className="marketcap-table",
            style=TABLE_STYLE,
            children=[
                html.Thead(html.Tr([html.Th(h, style=TH_STYLE) for h in headers])),
                html.Tbody(html.Tr([html.Td(c, style=TD_STYLE) for c in cells])),
            ],
        ),
    )


# ---------------------------------------------------------------------------
# Token detail
# ---------------------------------------------------------------------------

def token_detail_page(token_id: str) -> html.Div:
    """Skeleton of the token detail page."""
    return html.Div(
        children=[
            back_link("/", "← Back to Tokens"),
            dcc.Store(id="token-detail-store", data={"token_id": token_id}),
            dcc.Store(id="transactions-store", data=None),
            dcc.Download(id="download-transactions"),
            html.Div(id="token-detail-content", children=loader("Loading token details...")),
            html.Div(id="transactions-section"),
            html.Div(
                style={"textAlign": "center", "marginTop": "12px"},
                children=[
                    html.Button("Load more transactions", id="btn-load-more-tx", style=HIDDEN_STYLE),
                    html.Button("Download Excel", id="btn-download-tx", style=HIDDEN_STYLE),
                ],
            ),
        ]
    )


def token_detail_error(message: str) -> html.Div:
    return html.Div(
        style=CARD_STYLE,
        children=[
            html.Div(message, style=ERROR_STYLE),
            dcc.Link("Back to Tokens", href="/", style=BUTTON_STYLE),
        ],
    )


def token_detail_content(
    token: Token,
    snapshots: Sequence[MarketCapSnapshot],
    market_cap_figure,
    net_sol_volume: Optional[float],
    latest_token_balance: Optional[float],
) -> html.Div:
    """Token information, market caps and the transaction totals header."""
    initial = _analytics(token, "initial_market_cap")
    return html.Div(
        children=[
            html.Div(
                style=CARD_STYLE,
                children=[
                    html.H1(
                        f"{format_text(token.name, NULL_NAME)} ({format_text(token.symbol, NULL_SYMBOL)})",
                        style={"color": "#2c3e50", "marginTop": "0"},
                    ),
                    html.P(f"Token ID: {token.token_id}", style=MONO_STYLE),
                    html.Div(
                        style=GRID_STYLE,
                        children=[
                            general_info_section(token),
                            market_info_section(token),
                            section(
                                "Volume Information",
                                [
                                    field("Total Volume", format_sol(_analytics(token, "total_volume"))),
                                    field("Bot Volume", format_sol(_analytics(token, "bot_volume"))),
                                    field("Non-Bot Volume", format_sol(_analytics(token, "non_bot_volume"))),
                                    field("Net SOL Volume", format_sol(net_sol_volume)),
                                    field("Latest Token Balance", format_number(latest_token_balance, decimals=2)),
                                ],
                            ),
                        ],
                    ),
                ],
            ),
            html.Div(
                style=CARD_STYLE,
                children=[
                    html.H2("Market Cap Snapshots", style=SECTION_TITLE_STYLE),
                    market_cap_table(initial, snapshots),
                    dcc.Graph(id="marketcap-chart", figure=market_cap_figure, style={"height": "40vh"}),
                ],
            ),
        ]
    )


def _cell(value) -> str:
    return value if value else NULL_CELL


def transactions_table(transactions: Sequence[Transaction], token_id: str) -> dash_table.DataTable:
    """Transactions in the order given; trader addresses link to the wallet page."""
    rows = []
    for tx in transactions:
        trader = tx.traderpublickey
        rows.append({
            "trader": f"[{trader}]({wallet_href(trader, token_id)})" if trader else NULL_CELL,
            "txtype": tx.txtype.capitalize() if tx.txtype else NULL_CELL,
            "amount": format_number(tx.tokenamount) if tx.tokenamount is not None else NULL_CELL,
            "sol_volume": format_sol(tx.sol_volume) if tx.sol_volume is not None else NULL_CELL,
            "wallet_type": tx.wallet_type.capitalize() if tx.wallet_type else NULL_CELL,
            "created_at": format_date(tx.created_at, placeholder=NULL_CELL),
        })
    return dash_table.DataTable(
        id="transactions-table",
        data=rows,
        columns=[
            {"name": "Trader Address", "id": "trader", "presentation": "markdown"},
            {"name": "Type", "id": "txtype"},
            {"name": "Amount", "id": "amount"},
            {"name": "SOL", "id": "sol_volume"},
            {"name": "Wallet Type", "id": "wallet_type"},
            {"name": "Created At", "id": "created_at"},
        ],
        markdown_options={"link_target": "_self"},
        style_cell_conditional=[
            {"if": {"column_id": "amount"}, "textAlign": "right"},
            {"if": {"column_id": "sol_volume"}, "textAlign": "right"},
            {"if": {"column_id": "trader"}, "fontFamily": "monospace", "fontSize": "12px"},
        ],
        **DATA_TABLE_KWARGS,
    )


def wallet_summary_table(transactions: Sequence[Transaction], token_id: str) -> Any:
    """Per-wallet summary of a token's transactions."""
    summary = group_by_wallet(transactions)
    if summary.empty:
        return html.P("No wallets found for this token.", style=MUTED_STYLE)

    rows = []
    for rec in summary.to_dict("records"):
        rows.append({
            "wallet": f"[{rec['wallet']}]({wallet_href(rec['wallet'], token_id)})",
            "wallet_type": str(rec["wallet_type"]).capitalize(),
            "trades": int(rec["trades"]),
            "buys": int(rec["buys"]),
            "sells": int(rec["sells"]),
            "token_amount": format_number(rec["token_amount"]),
            "sol_volume": format_sol(rec["sol_volume"]),
            "last_seen": format_date(_iso(rec["last_seen"]), placeholder=NULL_CELL),
        })
    return dash_table.DataTable(
        id="wallet-summary-table",
        data=rows,
        columns=[
            {"name": "Wallet", "id": "wallet", "presentation": "markdown"},
            {"name": "Wallet Type", "id": "wallet_type"},
            {"name": "Trades", "id": "trades", "type": "numeric"},
            {"name": "Buys", "id": "buys", "type": "numeric"},
            {"name": "Sells", "id": "sells", "type": "numeric"},
            {"name": "Net Tokens", "id": "token_amount"},
            {"name": "SOL Volume", "id": "sol_volume"},
            {"name": "Last Seen", "id": "last_seen"},
        ],
        markdown_options={"link_target": "_self"},
        style_cell_conditional=[
            {"if": {"column_id": "wallet"}, "fontFamily": "monospace", "fontSize": "12px"},
        ],
        **DATA_TABLE_KWARGS,
    )


def _iso(ts) -> Optional[str]:
    if ts is None or pd.isna(ts):
        return None
    return ts.isoformat()


def transactions_section(
    transactions: Sequence[Transaction], token_id: str, total: int, transactions_figure
) -> html.Div:
    if not transactions:
        return html.Div(
            style=CARD_STYLE,
            children=[
                html.H2("Transactions", style=SECTION_TITLE_STYLE),
                html.P("No transactions found for this token.", style=MUTED_STYLE),
            ],
        )
    return html.Div(
        children=[
            html.Div(
                style=CARD_STYLE,
                children=[
                    html.H2("Transactions", style=SECTION_TITLE_STYLE),
                    html.P(
                        f"Showing {len(transactions)} of {max(total, len(transactions))} transactions",
                        style={"fontSize": "13px", "color": "#6c757d"},
                    ),
                    transactions_table(transactions, token_id),
                    dcc.Graph(id="transactions-chart", figure=transactions_figure, style={"height": "40vh"}),
                ],
            ),
            html.Div(
                style=CARD_STYLE,
                children=[
                    html.H2("Wallets", style=SECTION_TITLE_STYLE),
                    wallet_summary_table(transactions, token_id),
                ],
            ),
        ]
    )


# ---------------------------------------------------------------------------
# Wallet detail
# ---------------------------------------------------------------------------

def wallet_page(address: str, from_token: Optional[str] = None) -> html.Div:
    """Skeleton of the wallet page; the back link returns to the token it came from."""
    back_href = token_href(from_token) if from_token else "/"
    return html.Div(
        children=[
            back_link(back_href),
            dcc.Store(id="wallet-store", data={"address": address}),
            html.Div(
                style=CARD_STYLE,
                children=[
                    html.H1("Wallet Details", style={"color": "#2c3e50", "marginTop": "0"}),
                    html.P(address, style=MONO_STYLE),
                    html.Div(id="wallet-content", children=loader("Loading wallet statistics...")),
                ],
            ),
        ]
    )


def wallet_unavailable(not_found: bool) -> html.Div:
    message = (
        "This wallet hasn't made any transactions yet."
        if not_found
        else "There was an error loading the wallet statistics."
    )
    return html.Div(
        style=WARNING_BOX_STYLE,
        children=[
            html.H3("Wallet Statistics Unavailable", style={"marginTop": "0"}),
            html.P(message, style={"margin": "0"}),
        ],
    )


def wallet_stats_content(stats: WalletStats) -> html.Div:
    counts = stats.classification_counts
    return html.Div(
        children=[
            section(
                "Trading Activity",
                [
                    html.Div(
                        style=GRID_STYLE,
                        children=[
                            field("Total Trades", format_number(stats.total_trades)),
                            field("Tokens Traded", format_number(stats.tokens_traded)),
                            field("Net SOL Volume", format_sol(stats.net_sol_volume)),
                        ],
                    )
                ],
                style={"borderTop": "1px solid #dee2e6", "paddingTop": "16px"},
            ),
            section(
                "Classification",
                [
                    html.Div(
                        style=GRID_STYLE,
                        children=[
                            field("Dominant Type", stats.dominant_classification.capitalize() if stats.dominant_classification else NOT_AVAILABLE),
                            field("Bot Transactions", format_number(counts.get("bot"))),
                            field("Quality Transactions", format_number(counts.get("quality"))),
                            field("Unknown Transactions", format_number(counts.get("unknown"))),
                        ],
                    )
                ],
                style={"borderTop": "1px solid #dee2e6", "paddingTop": "16px"},
            ),
            section(
                "Timeline",
                [
                    html.Div(
                        style=GRID_STYLE,
                        children=[
                            field("First Transaction", format_date(stats.first_transaction_date, placeholder=NOT_AVAILABLE)),
                            field("Last Transaction", format_date(stats.last_transaction_date, placeholder=NOT_AVAILABLE)),
                        ],
                    )
                ],
                style={"borderTop": "1px solid #dee2e6", "paddingTop": "16px"},
            ),
            section(
                "Current Token Balances",
                [token_balances_table(stats)],
                style={"borderTop": "1px solid #dee2e6", "paddingTop": "16px"},
            ),
        ]
    )


def token_balances_table(stats: WalletStats) -> Any:
    if not stats.current_token_balances:
        return html.P("No current token balances", style={"color": "#6c757d"})
    rows = [
        html.Tr([
            html.Td(dcc.Link(b.token_id, href=token_href(b.token_id), style=MONO_STYLE), style=TD_STYLE),
            html.Td(format_number(b.balance, decimals=2), style={**TD_STYLE, "textAlign": "right"}),
            html.Td(format_date(b.last_updated, placeholder=NOT_AVAILABLE), style=TD_STYLE),
        ])
        for b in stats.current_token_balances
    ]
    return html.Div(
        style={"overflowX": "auto"},
        children=html.Table(
            className="balances-table",
            style=TABLE_STYLE,
            children=[
                html.Thead(html.Tr([
                    html.Th("Token ID", style=TH_STYLE),
                    html.Th("Balance", style={**TH_STYLE, "textAlign": "right"}),
                    html.Th("Last Updated", style=TH_STYLE),
                ])),
                html.Tbody(rows),
            ],
        ),
    )


def not_found_page(pathname: str) -> html.Div:
    return html.Div(
        style=CARD_STYLE,
        children=[
            html.H2("Page not found", style={"color": "#2c3e50", "marginTop": "0"}),
            html.P(f"Nothing lives at {pathname}.", style={"color": "#6c757d"}),
            dcc.Link("Back to Tokens", href="/", style=BUTTON_STYLE),
        ],
    )


def render_page(pathname: Optional[str], search: Optional[str] = None) -> html.Div:
    route, params = parse_route(pathname, search)
    if route == ROUTE_TOKENS:
        return token_list_page()
    if route == ROUTE_TOKEN_DETAIL:
        return token_detail_page(params["token_id"])
    if route == ROUTE_WALLET:
        return wallet_page(params["address"], params.get("from_token"))
    return not_found_page(params.get("pathname", ""))
