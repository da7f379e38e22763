"""Dash application layout: root shell, shared styles and small building blocks."""
from dash import dcc, html

FONT_FAMILY = "-apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif"

PAGE_STYLE = {
    "fontFamily": FONT_FAMILY,
    "padding": "20px",
    "maxWidth": "1280px",
    "margin": "0 auto",
    "backgroundColor": "#f8f9fa",
    "minHeight": "100vh",
}

CARD_STYLE = {
    "backgroundColor": "#ffffff",
    "padding": "20px",
    "borderRadius": "8px",
    "border": "1px solid #dee2e6",
    "boxShadow": "0 2px 4px rgba(0,0,0,0.08)",
    "marginBottom": "20px",
}

FEATURE_BOX_STYLE = {
    "backgroundColor": "#e8f4f8",
    "border": "1px solid #bee5eb",
    "borderRadius": "8px",
    "padding": "14px 16px",
    "marginBottom": "16px",
}

GRID_STYLE = {
    "display": "grid",
    "gridTemplateColumns": "repeat(auto-fit, minmax(220px, 1fr))",
    "gap": "16px",
}

SECTION_TITLE_STYLE = {
    "fontWeight": "600",
    "fontSize": "16px",
    "color": "#2c3e50",
    "marginBottom": "10px",
}

LABEL_STYLE = {
    "fontSize": "13px",
    "color": "#6c757d",
    "margin": "0",
}

VALUE_STYLE = {
    "fontSize": "15px",
    "fontWeight": "500",
    "color": "#2c3e50",
    "margin": "0 0 8px 0",
}

MONO_STYLE = {
    "fontFamily": "SFMono-Regular, Menlo, Consolas, monospace",
    "fontSize": "13px",
    "color": "#495057",
    "wordBreak": "break-all",
}

MUTED_STYLE = {
    "textAlign": "center",
    "color": "#6c757d",
    "marginTop": "16px",
}

ERROR_STYLE = {
    "color": "#dc3545",
    "fontWeight": "500",
    "padding": "12px 0",
}

WARNING_BOX_STYLE = {
    "backgroundColor": "#fff8e1",
    "border": "1px solid #ffe8a1",
    "borderRadius": "8px",
    "padding": "16px",
    "color": "#856404",
}

BUTTON_STYLE = {
    "padding": "10px 20px",
    "margin": "4px",
    "border": "1px solid #007bff",
    "borderRadius": "6px",
    "backgroundColor": "#007bff",
    "color": "#ffffff",
    "fontSize": "14px",
    "fontWeight": "500",
    "cursor": "pointer",
    "textDecoration": "none",
    "display": "inline-block",
    "boxShadow": "0 2px 6px rgba(0,123,255,0.3)",
}

SECONDARY_BUTTON_STYLE = {
    **BUTTON_STYLE,
    "backgroundColor": "#6c757d",
    "borderColor": "#6c757d",
    "boxShadow": "0 1px 3px rgba(0,0,0,0.1)",
}

HIDDEN_STYLE = {"display": "none"}

TABLE_STYLE = {"width": "100%", "borderCollapse": "collapse", "fontSize": "14px"}

TH_STYLE = {
    "backgroundColor": "#f1f3f5",
    "padding": "8px 12px",
    "textAlign": "left",
    "border": "1px solid #dee2e6",
    "fontWeight": "600",
}

TD_STYLE = {
    "padding": "8px 12px",
    "border": "1px solid #dee2e6",
}

# Shared DataTable styling
DATA_TABLE_KWARGS = dict(
    style_table={"overflowX": "auto", "width": "100%"},
    style_cell={
        "textAlign": "left",
        "padding": "10px",
        "fontFamily": FONT_FAMILY,
        "fontSize": "14px",
        "border": "1px solid #dee2e6",
    },
    style_data_conditional=[
        {"if": {"row_index": "odd"}, "backgroundColor": "#f8f9fa"},
    ],
    style_header={
        "backgroundColor": "#007bff",
        "color": "#ffffff",
        "fontWeight": "600",
        "textAlign": "center",
    },
    style_data={"backgroundColor": "#ffffff", "color": "#495057"},
    sort_action="native",
    page_action="native",
    page_size=25,
)


def create_layout() -> html.Div:
    """
    Create the application shell.

    Page content is swapped in by the router callback whenever the URL
    changes.

    Returns:
        HTML Div containing the full layout
    """
    return html.Div(
        style=PAGE_STYLE,
        children=[
            dcc.Location(id="url", refresh=False),
            html.Div(id="page-content"),
        ],
    )


def loader(text: str = "Loading...") -> html.Div:
    return html.Div(
        className="loader",
        style={"textAlign": "center", "padding": "24px", "color": "#6c757d"},
        children=dcc.Loading(type="dot", children=html.Span(text)),
    )


def field(label: str, value) -> html.Div:
    """A label/value pair used throughout the info grids."""
    return html.Div(
        children=[
            html.P(label, style=LABEL_STYLE),
            html.P(value, style=VALUE_STYLE),
        ]
    )


def section(title: str, children, style=None) -> html.Div:
    return html.Div(
        style=style or {},
        children=[html.H4(title, style=SECTION_TITLE_STYLE)] + list(children),
    )


def back_link(href: str, text: str = "← Back") -> dcc.Link:
    return dcc.Link(text, href=href, style={**SECONDARY_BUTTON_STYLE, "marginBottom": "20px"})
