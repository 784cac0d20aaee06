"""Amount formatting helpers."""

from __future__ import annotations

from decimal import Decimal

SATOSHI = Decimal(100_000_000)


def format_satoshi(amount: int | str, symbol: str = "Ѧ") -> str:
    """Render a satoshi amount as a whole-coin string with up to 8 decimals.

    >>> format_satoshi(1_234_567_890_000)
    '12,345.6789 Ѧ'
    """
    value = Decimal(amount) / SATOSHI
    text = f"{value:,.8f}".rstrip("0").rstrip(".")
    return f"{text} {symbol}".strip()
