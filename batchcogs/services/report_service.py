"""
Report Service - Sales summaries

Profit at a glance, monthly and yearly revenue/COGS/profit tables and the
best-selling dishes, computed from the sales journal with pandas.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

import pandas as pd

from batchcogs.models.reports import PeriodSummary, SalesOverview, TopItem
from batchcogs.models.sales import SaleRecord

SALE_COLUMNS = ["sale_id", "sale_time", "grand_total", "cost_of_goods_sold", "profit", "payment_mode"]


class ReportService:
    """Pure functions over a list of sale records."""

    def to_dataframe(self, records: Sequence[SaleRecord]) -> pd.DataFrame:
        if not records:
            return pd.DataFrame(columns=SALE_COLUMNS)
        df = pd.DataFrame([
            {
                "sale_id": r.sale_id,
                "sale_time": r.sale_time,
                "grand_total": r.grand_total,
                "cost_of_goods_sold": r.cost_of_goods_sold,
                "profit": r.profit,
                "payment_mode": r.payment_mode.value,
            }
            for r in records
        ])
        df["sale_time"] = pd.to_datetime(df["sale_time"])
        return df

    # =========================================================================
    # At a glance
    # =========================================================================

    def profit_on(self, records: Sequence[SaleRecord], day: date) -> float:
        df = self.to_dataframe(records)
        if df.empty:
            return 0.0
        return float(df.loc[df["sale_time"].dt.date == day, "profit"].sum())

    def last_month_profit(self, records: Sequence[SaleRecord], today: date) -> float:
        last_month = today.replace(day=1) - timedelta(days=1)
        df = self.to_dataframe(records)
        if df.empty:
            return 0.0
        mask = (df["sale_time"].dt.year == last_month.year) & (df["sale_time"].dt.month == last_month.month)
        return float(df.loc[mask, "profit"].sum())

    # =========================================================================
    # Period tables
    # =========================================================================

    def monthly_summary(self, records: Sequence[SaleRecord]) -> List[PeriodSummary]:
        return self._summarize(records, "M", "%b %Y")

    def yearly_summary(self, records: Sequence[SaleRecord]) -> List[PeriodSummary]:
        return self._summarize(records, "Y", "%Y")

    def _summarize(self, records: Sequence[SaleRecord], freq: str, label_format: str) -> List[PeriodSummary]:
        df = self.to_dataframe(records)
        if df.empty:
            return []

        grouped = df.groupby(df["sale_time"].dt.to_period(freq)).agg(
            revenue=("grand_total", "sum"),
            cost_of_goods_sold=("cost_of_goods_sold", "sum"),
            profit=("profit", "sum"),
            orders=("sale_id", "count"),
        ).sort_index()

        return [
            PeriodSummary(
                period=period.strftime(label_format),
                period_start=period.start_time.date(),
                revenue=round(float(row["revenue"]), 2),
                cost_of_goods_sold=round(float(row["cost_of_goods_sold"]), 2),
                profit=round(float(row["profit"]), 2),
                orders=int(row["orders"]),
            )
            for period, row in grouped.iterrows()
        ]

    # =========================================================================
    # Top sellers
    # =========================================================================

    def top_selling(self, records: Sequence[SaleRecord], limit: int = 5) -> List[TopItem]:
        rows = [
            {"dish_name": item.dish_name, "quantity": item.quantity}
            for r in records
            for item in r.items_sold
        ]
        if not rows:
            return []

        totals = (
            pd.DataFrame(rows)
            .groupby("dish_name", as_index=False)["quantity"].sum()
            .sort_values(["quantity", "dish_name"], ascending=[False, True])
            .head(limit)
        )
        return [
            TopItem(dish_name=row.dish_name, quantity=int(row.quantity))
            for row in totals.itertuples(index=False)
        ]

    def overview(self, records: Sequence[SaleRecord], now: Optional[datetime] = None) -> SalesOverview:
        now = now or datetime.now()
        return SalesOverview(
            generated_at=now,
            today_profit=round(self.profit_on(records, now.date()), 2),
            last_month_profit=round(self.last_month_profit(records, now.date()), 2),
            monthly=self.monthly_summary(records),
            yearly=self.yearly_summary(records),
            top_items=self.top_selling(records),
        )
