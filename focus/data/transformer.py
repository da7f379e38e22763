"""Data transformation: pagination, ordering and per-wallet grouping."""
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from focus.constants import SNAPSHOT_TYPES, TRANSACTION_DIAGNOSTIC_FIELDS, WALLET_TYPES
from focus.data.models import MarketCapSnapshot, Transaction

TRANSACTION_COLUMNS = [
    "signature",
    "traderpublickey",
    "txtype",
    "tokenamount",
    "sol_volume",
    "wallet_type",
    "created_at",
    "marketcapsol",
    "newtokenbalance",
]

WALLET_COLUMNS = [
    "wallet",
    "wallet_type",
    "trades",
    "buys",
    "sells",
    "token_amount",
    "sol_volume",
    "first_seen",
    "last_seen",
]


def paginate(items: Sequence[Any], page: int, limit: int) -> List[Any]:
    """Return the 1-based ``page`` of ``items`` holding at most ``limit`` entries."""
    start = (page - 1) * limit
    return list(items[start:start + limit])


def has_more(batch: Sequence[Any], limit: int) -> bool:
    """A full page means there may be another one; the first short page ends scrolling."""
    return len(batch) == limit


def merge_token_pages(existing: List[Dict], new: List[Dict], page: int) -> List[Dict]:
    """
    Merge a freshly loaded page of token dicts into what is already shown.

    Page 1 replaces the list. Later pages append, skipping tokens that are
    already present.
    """
    if page <= 1:
        return list(new)
    seen = {t["token_id"] for t in existing}
    merged = list(existing)
    for token in new:
        if token["token_id"] not in seen:
            merged.append(token)
            seen.add(token["token_id"])
    return merged


def _timestamp(value: Optional[str]) -> Optional[pd.Timestamp]:
    if not value:
        return None
    ts = pd.to_datetime(value, utc=True, errors="coerce")
    if pd.isna(ts):
        return None
    return ts


def sort_transactions(transactions: Sequence[Transaction]) -> List[Transaction]:
    """Sort oldest first; undated transactions go last, ties keep input order."""

    def key(tx: Transaction):
        ts = _timestamp(tx.created_at)
        return (1, 0) if ts is None else (0, ts.value)

    return sorted(transactions, key=key)


def transactions_frame(transactions: Sequence[Transaction]) -> pd.DataFrame:
    """Build a DataFrame with one row per transaction and numeric columns coerced."""
    df = pd.DataFrame([tx.to_dict() for tx in transactions], columns=TRANSACTION_COLUMNS)
    for col in ("tokenamount", "sol_volume", "marketcapsol", "newtokenbalance"):
        df[col] = pd.to_numeric(df[col], errors="coerce")
    df["created_at"] = pd.to_datetime(df["created_at"], utc=True, errors="coerce")
    return df


def _dominant_type(types: pd.Series) -> str:
    counts = types.dropna().value_counts()
    if counts.empty:
        return "unknown"
    best = counts.max()
    for kind in WALLET_TYPES:
        if counts.get(kind, 0) == best:
            return kind
    return str(counts.index[0])


def group_by_wallet(transactions: Sequence[Transaction]) -> pd.DataFrame:
    """
    Summarise transactions per trader wallet.

    The token amount is net of sells. Wallet type is the most frequent
    classification seen for the wallet. Rows are ordered by SOL volume,
    largest first.

    Args:
        transactions: Transactions of a single token

    Returns:
        DataFrame with ``WALLET_COLUMNS``
    """
    df = transactions_frame(transactions)
    df = df[df["traderpublickey"].notna() & (df["traderpublickey"] != "")]
    if df.empty:
        return pd.DataFrame(columns=WALLET_COLUMNS)

    txtype = df["txtype"].fillna("").str.lower()
    df = df.assign(
        is_buy=(txtype == "buy").astype(int),
        is_sell=(txtype == "sell").astype(int),
        signed_amount=df["tokenamount"].fillna(0).where(txtype != "sell", -df["tokenamount"].fillna(0)),
    )

    grouped = df.groupby("traderpublickey", sort=False)
    summary = pd.DataFrame({
        "wallet_type": grouped["wallet_type"].agg(_dominant_type),
        "trades": grouped.size(),
        "buys": grouped["is_buy"].sum(),
        "sells": grouped["is_sell"].sum(),
        "token_amount": grouped["signed_amount"].sum(),
        "sol_volume": grouped["sol_volume"].sum(),
        "first_seen": grouped["created_at"].min(),
        "last_seen": grouped["created_at"].max(),
    })
    summary = summary.rename_axis("wallet").reset_index()
    summary = summary.sort_values(["sol_volume", "wallet"], ascending=[False, True])
    return summary[WALLET_COLUMNS].reset_index(drop=True)


def null_field_counts(transactions: Sequence[Transaction]) -> Dict[str, int]:
    """Count transactions missing each diagnostic field."""
    counts = {name: 0 for name in TRANSACTION_DIAGNOSTIC_FIELDS}
    for tx in transactions:
        for name in TRANSACTION_DIAGNOSTIC_FIELDS:
            if getattr(tx, name) in (None, ""):
                counts[name] += 1
    return counts


def wallet_type_counts(transactions: Sequence[Transaction]) -> Dict[str, int]:
    """Transactions per wallet classification; unclassified ones count as unknown."""
    counts = {kind: 0 for kind in WALLET_TYPES}
    for tx in transactions:
        counts[tx.wallet_type or "unknown"] += 1
    return counts


def snapshot_row(snapshots: Sequence[MarketCapSnapshot]) -> Dict[str, Optional[MarketCapSnapshot]]:
    """Pick the first snapshot of each interval, None where the interval is missing."""
    row: Dict[str, Optional[MarketCapSnapshot]] = {kind: None for kind in SNAPSHOT_TYPES}
    for snap in snapshots:
        if snap.snapshot_type in row and row[snap.snapshot_type] is None:
            row[snap.snapshot_type] = snap
    return row
