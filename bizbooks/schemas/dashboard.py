"""Query parameters for dashboard reports."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

AnalyticsPeriod = Literal["week", "month", "quarter", "year"]


class AnalyticsQuery(BaseModel):
    period: AnalyticsPeriod = "month"
    year: int | None = Field(None, ge=2000, le=2100)


__all__ = ["AnalyticsPeriod", "AnalyticsQuery"]
