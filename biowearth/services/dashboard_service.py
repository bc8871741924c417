from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from biowearth.config import settings
from biowearth.records import Task
from biowearth.services.snapshot_hub import ConsoleInputs
from biowearth.services.sort_utils import ZERO
from biowearth.services.task_service import open_tasks_by_due_date


@dataclass(frozen=True)
class QuoteValuePoint:
    name: str
    value: Decimal


@dataclass(frozen=True)
class DashboardSummary:
    product_count: int
    active_client_count: int
    pending_task_count: int
    pipeline_value: Decimal
    urgent_tasks: list[Task]
    recent_quote_values: list[QuoteValuePoint]


def build_dashboard(
    inputs: ConsoleInputs,
    *,
    urgent_limit: int | None = None,
    recent_limit: int | None = None,
) -> DashboardSummary:
    urgent_limit = settings.urgent_task_limit if urgent_limit is None else urgent_limit
    recent_limit = settings.recent_quote_limit if recent_limit is None else recent_limit

    pipeline = sum((quote.selling_price * quote.moq for quote in inputs.quotes_sent), ZERO)
    return DashboardSummary(
        product_count=len(inputs.products),
        active_client_count=sum(1 for client in inputs.clients if client.status == 'Active'),
        pending_task_count=sum(1 for task in inputs.tasks if task.is_open),
        pipeline_value=pipeline,
        urgent_tasks=open_tasks_by_due_date(inputs.tasks, limit=urgent_limit),
        recent_quote_values=[
            QuoteValuePoint(name=quote.quote_id or 'Unknown', value=quote.selling_price * quote.moq)
            for quote in inputs.quotes_sent[:recent_limit]
        ],
    )
