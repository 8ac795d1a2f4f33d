"""Sales report models."""

from datetime import date, datetime
from typing import List

from pydantic import BaseModel, Field


class PeriodSummary(BaseModel):
    """Revenue, COGS and profit for one month or year."""

    period: str = Field(..., description="'Jan 2025' or '2025'")
    period_start: date
    revenue: float = 0.0
    cost_of_goods_sold: float = 0.0
    profit: float = 0.0
    orders: int = 0


class TopItem(BaseModel):
    dish_name: str
    quantity: int


class SalesOverview(BaseModel):
    """At-a-glance figures plus the summary tables."""

    generated_at: datetime = Field(default_factory=datetime.now)
    today_profit: float = 0.0
    last_month_profit: float = 0.0
    monthly: List[PeriodSummary] = Field(default_factory=list)
    yearly: List[PeriodSummary] = Field(default_factory=list)
    top_items: List[TopItem] = Field(default_factory=list)
