"""
Sample users, FX instruments and trades used by the demo, the in-memory
backend and the seeding script.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from hftools.model.entities import FXInstrument, FXInstrument2, Trade, User


def _utc(text: str) -> datetime:
    return datetime.strptime(text, "%Y-%m-%d %H:%M:%S").replace(tzinfo=timezone.utc)


def sample_users() -> List[User]:
    rows = [
        ("trader1", "TRADER"),
        ("admin1", "ADMIN"),
        ("trader2", "TRADER"),
        ("analyst1", "ANALYST"),
        ("manager1", "MANAGER"),
    ]
    return [
        User(id=i, username=name, email=f"{name}@example.com", role=role)
        for i, (name, role) in enumerate(rows, start=1)
    ]


def sample_instruments() -> List[FXInstrument]:
    pairs = [
        ("EUR", "USD", 0.0001),
        ("GBP", "USD", 0.0001),
        ("USD", "JPY", 0.01),
        ("USD", "CHF", 0.0001),
        ("AUD", "USD", 0.0001),
        ("USD", "CAD", 0.0001),
        ("NZD", "USD", 0.0001),
        ("EUR", "GBP", 0.0001),
        ("EUR", "JPY", 0.01),
        ("GBP", "JPY", 0.01),
    ]
    return [
        FXInstrument(
            id=i,
            symbol=f"{base}/{quote}",
            base_currency=base,
            quote_currency=quote,
            tick_size=tick,
        )
        for i, (base, quote, tick) in enumerate(pairs, start=1)
    ]


def sample_trades() -> List[Trade]:
    rows = [
        (1, 1, "BUY", 100000.0, 1.0850, "2024-01-28 10:30:00"),
        (1, 2, "SELL", 50000.0, 1.2675, "2024-01-28 11:15:00"),
        (3, 3, "BUY", 200000.0, 149.85, "2024-01-28 12:00:00"),
        (3, 1, "BUY", 75000.0, 1.0855, "2024-01-28 14:20:00"),
        (1, 4, "SELL", 100000.0, 0.8765, "2024-01-28 15:45:00"),
        (3, 5, "BUY", 150000.0, 0.6543, "2024-01-28 16:10:00"),
        (1, 2, "BUY", 80000.0, 1.2680, "2024-01-28 16:45:00"),
        (3, 3, "SELL", 100000.0, 149.90, "2024-01-28 17:20:00"),
    ]
    return [
        Trade(
            id=i,
            user_id=user_id,
            instrument_id=instrument_id,
            side=side,
            quantity=quantity,
            price=price,
            timestamp=_utc(ts),
        )
        for i, (user_id, instrument_id, side, quantity, price, ts) in enumerate(rows, start=1)
    ]


def sample_fills() -> List[FXInstrument2]:
    """The sample trades expressed as FXInstrument2 rows."""
    return [
        FXInstrument2(
            id=t.id,
            user_id=t.user_id,
            instrument_id=t.instrument_id,
            side=t.side,
            quantity=t.quantity,
            price=t.price,
            timestamp=t.timestamp,
        )
        for t in sample_trades()
    ]


__all__ = ["sample_fills", "sample_instruments", "sample_trades", "sample_users"]
