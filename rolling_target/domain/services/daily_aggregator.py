"""
DAILY AGGREGATOR (ENGINE-1)
Turns a flat trade list into a per-day capital ledger

RESPONSIBILITIES:
- Drop trades that are not closed
- Bucket trades by local calendar date of the close
- Sum P&L per day and chain start/end capital

RULES:
❌ No plan or requirement logic
❌ Never mutate trades
✅ Full recompute on every call
✅ Empty ledger for no data / non-positive capital
"""

from datetime import timezone, tzinfo
from typing import Iterable, List

import pandas as pd

from rolling_target.domain.models import DailyRecord, Trade
from rolling_target.utils.time import to_local_date


def aggregate_daily(
    trades: Iterable[Trade],
    initial_capital: float,
    tz: tzinfo = timezone.utc,
) -> List[DailyRecord]:
    """
    Build the daily capital ledger.

    Args:
        trades: Trades in any order
        initial_capital: Capital at the start of day 1
        tz: Zone in which calendar days are cut

    Returns:
        Chronological DailyRecords with day_index set to the 1-based
        position. Planned/required fields are filled by the requirement engine.
    """
    closed = [t for t in trades if t.closed_at is not None]
    if not closed or initial_capital <= 0:
        return []

    frame = pd.DataFrame(
        {
            "day": [to_local_date(t.closed_at, tz) for t in closed],
            "profit_loss": [float(t.profit_loss or 0.0) for t in closed],
        }
    )
    daily_pnl = frame.groupby("day", sort=True)["profit_loss"].sum()

    records: List[DailyRecord] = []
    current_capital = float(initial_capital)

    for position, (day, pnl) in enumerate(daily_pnl.items(), start=1):
        pnl = float(pnl)
        start_capital = current_capital
        end_capital = start_capital + pnl
        records.append(
            DailyRecord(
                date=day,
                day_index=position,
                start_capital=start_capital,
                pnl=pnl,
                end_capital=end_capital,
                return_percent=(pnl / start_capital) * 100 if start_capital > 0 else 0.0,
            )
        )
        current_capital = end_capital

    return records
