"""Partner earnings summary models."""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field


class MonthlyEarnings(BaseModel):
    """Earnings for one calendar month, keyed by booking end date."""

    month: str = Field(..., examples=["Oct 2026"])
    earnings: Decimal
    bookings: int = Field(..., ge=0)


class RecentTransaction(BaseModel):
    """A completed booking as shown in the partner's payout history."""

    booking_id: str
    listing_id: str
    amount: Decimal
    start_date: dt.date
    end_date: dt.date


class EarningsSummary(BaseModel):
    """Revenue from completed bookings for one partner."""

    total_earnings: Decimal
    this_month_earnings: Decimal
    last_month_earnings: Decimal
    year_earnings: Decimal
    this_month_bookings: int = Field(..., ge=0)
    total_bookings: int = Field(..., ge=0)
    monthly: list[MonthlyEarnings] = Field(
        default_factory=list,
        description="Last 12 months, oldest first",
    )
    growth: int = Field(
        ...,
        description="Month-over-month change in percent",
    )
    recent: list[RecentTransaction] = Field(
        default_factory=list,
        description="Latest completed bookings by end date, newest first",
    )
