"""Constants and default values for the dashboard."""
from typing import Tuple

# Market cap snapshot intervals, in display order
SNAPSHOT_TYPES: Tuple[str, ...] = ("5m", "15m", "30m", "1h", "3h", "1d", "3d", "7d", "30d")
INITIAL_LABEL = "Initial"

# Backend wallet classifications
WALLET_TYPES: Tuple[str, ...] = ("bot", "quality", "unknown")
TOKEN_STATUSES: Tuple[str, ...] = ("new", "accepted")

# Market cap ordering accepted by the API
ORDER_ASC = "ASC"
ORDER_DESC = "DESC"

# Display
APP_TITLE = "focus"
SOL_PREFIX = "◎ "
NOT_AVAILABLE = "N/A"
NULL_DATE = "[date is null]"
NULL_NAME = "[name is null]"
NULL_SYMBOL = "[symbol is null]"
NULL_DESCRIPTION = "[description is null]"
NULL_SOURCE = "[source is null]"
NULL_CREATOR = "[creator is null]"
NULL_VALUE = "[null]"
NULL_CELL = "null"

# Fields checked for missing values when a token's transactions load
TRANSACTION_DIAGNOSTIC_FIELDS: Tuple[str, ...] = (
    "txtype",
    "traderpublickey",
    "wallet_type",
    "tokenamount",
    "created_at",
)
