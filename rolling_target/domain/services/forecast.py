"""
FORECAST PROJECTOR (ENGINE-5)
Compounding extrapolation from current capital

Illustrative only: assumes the configured rate repeats every day.
No confidence bounds, no conditioning on history.
"""

from rolling_target.domain.models import Forecast

FORECAST_HORIZONS = (30, 180, 365)

ASSUMPTION = "Assumes the daily target rate is hit every day from current capital; not a prediction."


def project(capital: float, target_percent: float) -> Forecast:
    """Project capital forward 30, 180 and 365 days."""
    growth = 1 + target_percent / 100
    days_30, days_180, days_365 = (capital * growth ** h for h in FORECAST_HORIZONS)
    return Forecast(
        capital=capital,
        target_percent=target_percent,
        days_30=days_30,
        days_180=days_180,
        days_365=days_365,
        assumption=ASSUMPTION,
    )
