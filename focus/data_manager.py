"""Data manager: loads what each page needs and turns failures into view state."""
from typing import Any, Dict, List

from focus.config import TOKENS_PAGE_SIZE, TRANSACTIONS_PAGE_SIZE
from focus.data import ApiClient, MarketCapCache, has_more, null_field_counts, sort_transactions, wallet_type_counts
from focus.data.models import MarketCapSnapshot
from focus.exceptions import FocusError, NotFoundError
from focus.utils import setup_logger

logger = setup_logger(__name__)


class DataManager:
    """Single entry point the Dash callbacks use to reach the API and the shared cache."""

    def __init__(self, client: ApiClient, cache: MarketCapCache = None):
        self.client = client
        self.cache = cache if cache is not None else MarketCapCache(client)

    def load_token_page(self, page: int = 1, limit: int = TOKENS_PAGE_SIZE) -> Dict[str, Any]:
        """Load one page of accepted tokens and warm the market cap cache for it."""
        try:
            tokens = self.client.fetch_accepted_tokens(page, limit)
        except FocusError as e:
            logger.error(f"Error loading tokens: {e}")
            return {"tokens": [], "page": page, "has_more": False, "error": "Failed to load tokens"}

        self.cache.prefetch(t.token_id for t in tokens)
        return {
            "tokens": tokens,
            "page": page,
            "has_more": has_more(tokens, limit),
            "error": None,
        }

    def load_token_details(self, token_id: str, limit: int = TRANSACTIONS_PAGE_SIZE) -> Dict[str, Any]:
        """Load a token and the first page of its transactions, oldest first."""
        state: Dict[str, Any] = {
            "token": None,
            "transactions": [],
            "total": 0,
            "page": 1,
            "has_more": False,
            "net_sol_volume": None,
            "latest_token_balance": None,
            "error": None,
        }
        try:
            logger.info(f"Fetching token details for ID: {token_id}")
            state["token"] = self.client.fetch_token(token_id)

            logger.info(f"Fetching transactions for token: {token_id}")
            tx_page = self.client.fetch_token_transactions(token_id, 1, limit)
        except NotFoundError as e:
            logger.error(f"Error loading token details: {e}")
            state["token"] = None
            state["error"] = "Token not found"
            return state
        except FocusError as e:
            logger.error(f"Error loading token details: {e}")
            state["token"] = None
            state["error"] = str(e) or "Failed to load token details"
            return state

        if tx_page.transactions:
            logger.debug(f"Null value counts in transactions: {null_field_counts(tx_page.transactions)}")
            logger.debug(f"Wallet types in transactions: {wallet_type_counts(tx_page.transactions)}")

        state.update(
            transactions=sort_transactions(tx_page.transactions),
            total=tx_page.total,
            page=tx_page.page,
            has_more=tx_page.has_more,
            net_sol_volume=tx_page.net_sol_volume,
            latest_token_balance=tx_page.latest_token_balance,
        )
        return state

    def load_more_transactions(
        self, token_id: str, page: int, limit: int = TRANSACTIONS_PAGE_SIZE
    ) -> Dict[str, Any]:
        """Load a later page of transactions to append to the detail view."""
        try:
            tx_page = self.client.fetch_token_transactions(token_id, page, limit)
        except FocusError as e:
            logger.error(f"Error loading transactions page {page} for {token_id}: {e}")
            return {"transactions": [], "page": page - 1, "has_more": True, "error": "Failed to load transactions"}
        return {
            "transactions": tx_page.transactions,
            "page": tx_page.page,
            "has_more": tx_page.has_more,
            "error": None,
        }

    def load_wallet(self, address: str) -> Dict[str, Any]:
        try:
            stats = self.client.fetch_wallet_stats(address)
        except NotFoundError as e:
            logger.error(f"Error loading wallet stats: {e}")
            return {"stats": None, "error": str(e), "not_found": True}
        except FocusError as e:
            logger.error(f"Error loading wallet stats: {e}")
            return {"stats": None, "error": str(e) or "Failed to load wallet stats", "not_found": False}
        return {"stats": stats, "error": None, "not_found": False}

    def market_caps(self, token_id: str) -> List[MarketCapSnapshot]:
        return self.cache.load(token_id)
