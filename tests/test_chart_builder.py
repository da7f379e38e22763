"""Tests for focus.visualization."""

from conftest import make_transaction_payload

from focus.data.models import MarketCapSnapshot, Transaction
from focus.data.transformer import transactions_frame
from focus.visualization import color_for, create_market_cap_figure, create_transactions_figure, wallet_type_color


def _annotation_text(fig) -> str:
    return fig.layout.annotations[0].text


class TestMarketCapFigure:
    def test_initial_then_intervals(self) -> None:
        snaps = [
            MarketCapSnapshot(token_id="t", snapshot_type="1h", market_cap=55.0),
            MarketCapSnapshot(token_id="t", snapshot_type="5m", market_cap=40.25),
        ]
        fig = create_market_cap_figure(31.5, snaps, "t")
        trace = fig.data[0]

        assert list(trace.x) == ["Initial", "5m", "15m", "30m", "1h", "3h", "1d", "3d", "7d", "30d"]
        assert list(trace.y)[:5] == [31.5, 40.25, None, None, 55.0]
        assert trace.connectgaps is False

    def test_no_data(self) -> None:
        fig = create_market_cap_figure(None, [])
        assert len(fig.data) == 0
        assert _annotation_text(fig) == "No market cap data"


class TestTransactionsFigure:
    def test_one_trace_per_wallet_type(self) -> None:
        txs = [
            Transaction.from_api(make_transaction_payload(1, wallet_type="bot")),
            Transaction.from_api(make_transaction_payload(2, wallet_type="quality")),
            Transaction.from_api(make_transaction_payload(3, wallet_type=None)),
            Transaction.from_api(make_transaction_payload(4, wallet_type="quality")),
        ]
        fig = create_transactions_figure(transactions_frame(txs))

        assert [t.name for t in fig.data] == ["Bot", "Quality", "Unknown"]
        assert len(fig.data[1].x) == 2

    def test_empty(self) -> None:
        assert _annotation_text(create_transactions_figure(transactions_frame([]))) == "No transactions"

    def test_undated(self) -> None:
        txs = [Transaction.from_api(make_transaction_payload(1, created_at=None))]
        assert _annotation_text(create_transactions_figure(transactions_frame(txs))) == "No dated transactions"


class TestColors:
    def test_color_is_stable(self) -> None:
        assert color_for("tok1") == color_for("tok1")
        assert color_for("tok1").startswith(("#", "rgb"))

    def test_wallet_type_colors_distinct(self) -> None:
        colors = {wallet_type_color(kind) for kind in ("bot", "quality", "unknown")}
        assert len(colors) == 3
        assert wallet_type_color(None) == wallet_type_color("unknown")
