from pydantic import BaseModel
from typing import List

from sipdepot.schemas.event import Event


class DashboardSummary(BaseModel):
    total_events: int
    published_events: int
    tickets_sold: int
    revenue_cents: int
    upcoming_events: List[Event]
