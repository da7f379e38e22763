"""Color utilities for chart visualization."""
import zlib

from plotly.colors import qualitative


# Stable color palette for consistent token colors
PALETTE = (
    qualitative.Dark24
    + qualitative.Light24
    + qualitative.Safe
)

WALLET_TYPE_COLORS = {
    "bot": "#dc3545",
    "quality": "#28a745",
    "unknown": "#6c757d",
}


def color_for(key: str) -> str:
    """
    Get a stable color for a token id or wallet address.

    Uses a CRC of the key so the same key gets the same color across
    server restarts.

    Args:
        key: Token id, symbol or wallet address

    Returns:
        Hex color string
    """
    return PALETTE[zlib.crc32(key.encode("utf-8")) % len(PALETTE)]


def wallet_type_color(wallet_type: str) -> str:
    return WALLET_TYPE_COLORS.get(wallet_type or "unknown", WALLET_TYPE_COLORS["unknown"])
