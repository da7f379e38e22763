"""API client, shared cache, records and transformation modules."""
from focus.data.cache import MarketCapCache
from focus.data.fetcher import ApiClient
from focus.data.models import (
    MarketCapSnapshot,
    Token,
    TokenAnalytics,
    TokenBalance,
    Transaction,
    TransactionPage,
    WalletStats,
)
from focus.data.transformer import (
    group_by_wallet,
    has_more,
    merge_token_pages,
    null_field_counts,
    paginate,
    snapshot_row,
    sort_transactions,
    transactions_frame,
    wallet_type_counts,
)

__all__ = [
    "ApiClient",
    "MarketCapCache",
    "MarketCapSnapshot",
    "Token",
    "TokenAnalytics",
    "TokenBalance",
    "Transaction",
    "TransactionPage",
    "WalletStats",
    "group_by_wallet",
    "has_more",
    "merge_token_pages",
    "null_field_counts",
    "paginate",
    "snapshot_row",
    "sort_transactions",
    "transactions_frame",
    "wallet_type_counts",
]
