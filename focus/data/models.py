"""Typed records built from backend API responses.

The backend sends most numeric analytics as strings, so every numeric field
is coerced on the way in. Values that cannot be parsed become ``None`` and
render as "N/A" downstream.
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from focus.constants import WALLET_TYPES
from focus.utils import to_float, to_int


def _optional_str(value) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class MarketCapSnapshot:
    token_id: str
    snapshot_type: str
    market_cap: Optional[float]
    snapshot_date: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "MarketCapSnapshot":
        return cls(
            token_id=str(data.get("token_id", "")),
            snapshot_type=str(data.get("snapshot_type", "")),
            market_cap=to_float(data.get("market_cap")),
            snapshot_date=_optional_str(data.get("snapshot_date")),
            created_at=_optional_str(data.get("created_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TokenAnalytics:
    minutes_pre_acceptance_criteria: Optional[float] = None
    criteria_accepted_date: Optional[str] = None
    initial_market_cap: Optional[float] = None
    total_transacting_wallets: Optional[int] = None
    wallets_holding: Optional[int] = None
    suspected_bot_wallets: Optional[int] = None
    quality_wallets: Optional[int] = None
    total_volume: Optional[float] = None
    bot_volume: Optional[float] = None
    non_bot_volume: Optional[float] = None
    non_bot_volume_percentage: Optional[float] = None
    total_transactions: Optional[int] = None
    bot_transactions: Optional[int] = None
    non_bot_transactions: Optional[int] = None
    bot_wallet_ratio: Optional[float] = None
    quality_to_bot_ratio: Optional[float] = None
    creator_sol_balance_usd: Optional[float] = None
    creator_spl_balance_usd: Optional[float] = None
    helius_total_value: Optional[float] = None

    _INT_FIELDS = (
        "total_transacting_wallets",
        "wallets_holding",
        "suspected_bot_wallets",
        "quality_wallets",
        "total_transactions",
        "bot_transactions",
        "non_bot_transactions",
    )

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> Optional["TokenAnalytics"]:
        if not data or not isinstance(data, dict):
            return None
        values = {}
        for name in cls.__dataclass_fields__:
            raw = data.get(name)
            if name == "criteria_accepted_date":
                values[name] = _optional_str(raw)
            elif name in cls._INT_FIELDS:
                values[name] = to_int(raw)
            else:
                values[name] = to_float(raw)
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Token:
    token_id: str
    name: Optional[str] = None
    symbol: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[str] = None
    uri: Optional[str] = None
    creator: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    twitter: Optional[str] = None
    website: Optional[str] = None
    telegram: Optional[str] = None
    source: Optional[str] = None
    last_updated: Optional[str] = None
    market_cap_at_filter: Optional[float] = None
    filtered_at: Optional[str] = None
    analytics: Optional[TokenAnalytics] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Token":
        values = {}
        for name in cls.__dataclass_fields__:
            if name in ("token_id", "analytics", "market_cap_at_filter"):
                continue
            values[name] = _optional_str(data.get(name))
        # Older payloads name the creator "creator_address"
        if values["creator"] is None:
            values["creator"] = _optional_str(data.get("creator_address"))
        return cls(
            token_id=str(data["token_id"]),
            market_cap_at_filter=to_float(data.get("market_cap_at_filter")),
            analytics=TokenAnalytics.from_api(data.get("analytics")),
            **values,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Transaction:
    transaction_id: Optional[int]
    token_id: str
    signature: Optional[str] = None
    traderpublickey: Optional[str] = None
    txtype: Optional[str] = None
    tokenamount: Optional[float] = None
    newtokenbalance: Optional[float] = None
    bondingcurvekey: Optional[str] = None
    vtokensinbondingcurve: Optional[float] = None
    vsolinbondingcurve: Optional[float] = None
    marketcapsol: Optional[float] = None
    wallet_type: Optional[str] = None
    created_at: Optional[str] = None
    sol_volume: Optional[float] = None
    traders_token_balance_at_acceptance: Optional[float] = None
    still_holding_at_acceptance: Optional[bool] = None
    helius_total_value: Optional[float] = None

    _STR_FIELDS = ("signature", "traderpublickey", "txtype", "bondingcurvekey", "created_at")

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Transaction":
        values = {}
        for name in cls.__dataclass_fields__:
            if name in ("transaction_id", "token_id", "wallet_type", "still_holding_at_acceptance"):
                continue
            raw = data.get(name)
            values[name] = _optional_str(raw) if name in cls._STR_FIELDS else to_float(raw)
        wallet_type = data.get("wallet_type")
        holding = data.get("still_holding_at_acceptance")
        return cls(
            transaction_id=to_int(data.get("transaction_id")),
            token_id=str(data.get("token_id", "")),
            wallet_type=wallet_type if wallet_type in WALLET_TYPES else None,
            still_holding_at_acceptance=None if holding is None else bool(holding),
            **values,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TransactionPage:
    transactions: List[Transaction]
    total: int = 0
    page: int = 1
    limit: int = 50
    net_sol_volume: Optional[float] = None
    latest_token_balance: Optional[float] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TransactionPage":
        raw = data.get("transactions")
        if not isinstance(raw, list):
            raw = []
        return cls(
            transactions=[Transaction.from_api(tx) for tx in raw if isinstance(tx, dict)],
            total=to_int(data.get("total")) or 0,
            page=to_int(data.get("page")) or 1,
            limit=to_int(data.get("limit")) or len(raw),
            net_sol_volume=to_float(data.get("net_sol_volume")),
            latest_token_balance=to_float(data.get("latest_token_balance")),
        )

    @property
    def has_more(self) -> bool:
        return self.page * self.limit < self.total

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TokenBalance:
    token_id: str
    balance: Optional[float] = None
    last_updated: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TokenBalance":
        return cls(
            token_id=str(data.get("token_id", "")),
            balance=to_float(data.get("balance")),
            last_updated=_optional_str(data.get("last_updated")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class WalletStats:
    total_trades: Optional[int] = None
    tokens_traded: Optional[int] = None
    net_sol_volume: Optional[float] = None
    classification_counts: Dict[str, int] = field(default_factory=dict)
    dominant_classification: Optional[str] = None
    first_transaction_date: Optional[str] = None
    last_transaction_date: Optional[str] = None
    current_token_balances: List[TokenBalance] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "WalletStats":
        counts = data.get("classification_counts")
        if not isinstance(counts, dict):
            counts = {}
        balances = data.get("current_token_balances")
        if not isinstance(balances, list):
            balances = []
        return cls(
            total_trades=to_int(data.get("total_trades")),
            tokens_traded=to_int(data.get("tokens_traded")),
            net_sol_volume=to_float(data.get("net_sol_volume")),
            classification_counts={kind: to_int(counts.get(kind)) or 0 for kind in WALLET_TYPES},
            dominant_classification=_optional_str(data.get("dominant_classification")),
            first_transaction_date=_optional_str(data.get("first_transaction_date")),
            last_transaction_date=_optional_str(data.get("last_transaction_date")),
            current_token_balances=[TokenBalance.from_api(b) for b in balances if isinstance(b, dict)],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
