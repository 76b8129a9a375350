"""Aggregate statistics for a session record."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from rich.markup import escape
from rich.table import Table

from .models import SessionRecord
from .renderer import format_ms


def percent(ratio: float) -> float:
    """Ratio to a percentage with one decimal place, halves rounded up."""
    return float((Decimal(repr(ratio)) * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class SessionSummary:
    session_id: str
    created_at: str
    duration: float
    total_messages: int
    total_cost: float
    total_tokens: int
    average_latency: float
    policy_interventions: int = 0
    cache_hit_rate_percent: Optional[float] = None
    cache_savings: Optional[float] = None


def summarize(record: SessionRecord) -> SessionSummary:
    cache_hit_rate = None
    cache_savings = None
    if record.cache_stats is not None:
        cache_hit_rate = percent(record.cache_stats.hit_rate)
        cache_savings = record.cache_stats.savings

    return SessionSummary(
        session_id=record.session_id,
        created_at=record.created_at,
        duration=record.duration,
        total_messages=record.total_messages,
        total_cost=record.total_cost,
        total_tokens=record.total_tokens,
        average_latency=record.average_latency,
        policy_interventions=sum(
            1 for step in record.messages if step.policy_intervention is not None
        ),
        cache_hit_rate_percent=cache_hit_rate,
        cache_savings=cache_savings,
    )


def summary_table(
    summary: SessionSummary,
    include_cache: bool = False,
    include_policy_intervention: bool = False,
) -> Table:
    """Render a summary as a two-column table."""
    table = Table(title="📊 Session Summary", show_header=False)
    table.add_column("Field", style="white")
    table.add_column("Value", style="cyan")

    table.add_row("Session ID", escape(summary.session_id))
    if summary.created_at:
        table.add_row("Created", escape(summary.created_at))
    table.add_row("Duration", format_ms(summary.duration))
    table.add_row("Total Messages", str(summary.total_messages))
    table.add_row("Total Cost", f"[green]${summary.total_cost:.4f}[/green]")
    table.add_row("Total Tokens", f"{summary.total_tokens:,}")
    table.add_row("Average Latency", format_ms(summary.average_latency))

    if include_cache and summary.cache_hit_rate_percent is not None:
        table.add_row("Cache Hit Rate", f"{summary.cache_hit_rate_percent:.1f}%")
        table.add_row("Cache Savings", f"[green]${summary.cache_savings:.4f}[/green]")

    if include_policy_intervention:
        table.add_row("Policy Interventions", str(summary.policy_interventions))

    return table
