"""
Formatting of a single replay step.

``render_step`` is pure: it returns the ordered sections of a step as rich
``Text`` objects and leaves printing to the caller. Auto-play output is
truncated; interactive output shows the full message content.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from rich.text import Text

from .models import Feedback, Step

AUTO_PLAY_CONTENT_LIMIT = 200
ELLIPSIS = "..."

FEEDBACK_STYLES = {
    Feedback.POSITIVE: "green",
    Feedback.NEGATIVE: "red",
    Feedback.NEUTRAL: "yellow",
}


class RenderMode(Enum):
    """Which playback path a step is rendered for."""
    AUTO_PLAY = "auto_play"
    INTERACTIVE = "interactive"


@dataclass(frozen=True)
class DisplayFlags:
    include_cache: bool = False
    include_feedback: bool = False
    include_policy_intervention: bool = False


@dataclass
class Section:
    name: str
    text: Text

    @property
    def plain(self) -> str:
        return self.text.plain


def _labelled(label: str, value: str, style: str = "cyan") -> Text:
    return Text.assemble((f"{label}: ", "white"), (value, style))


def format_ms(value: float) -> str:
    """Milliseconds with thousands separators, never in exponent form."""
    if float(value).is_integer():
        return f"{value:,.0f}ms"
    return f"{value:,.3f}".rstrip("0").rstrip(".") + "ms"


def truncate_content(content: str, mode: RenderMode) -> str:
    if mode is RenderMode.AUTO_PLAY and len(content) > AUTO_PLAY_CONTENT_LIMIT:
        return content[:AUTO_PLAY_CONTENT_LIMIT] + ELLIPSIS
    return content


def render_step(
    step: Step,
    total: int,
    flags: Optional[DisplayFlags] = None,
    mode: RenderMode = RenderMode.INTERACTIVE,
) -> List[Section]:
    """Build the display sections for ``step`` out of ``total`` steps."""
    flags = flags or DisplayFlags()
    sections = []

    header = Text(f"[{step.index + 1}/{total}] {step.role}", style="bold cyan")
    if step.timestamp:
        header.append(f" ({step.timestamp})")
    sections.append(Section("header", header))

    if step.agent:
        sections.append(Section("agent", _labelled("🤖 Agent", step.agent)))
    if step.model:
        sections.append(Section("model", _labelled("🧠 Model", step.model)))

    if flags.include_cache and step.cache_info is not None:
        if step.cache_info.hit:
            cache = _labelled("💾 Cache", "HIT", "green")
            if step.cache_info.key:
                cache.append(f" (key: {step.cache_info.key})", style="dim")
        else:
            cache = _labelled("💾 Cache", "MISS", "red")
        sections.append(Section("cache", cache))

    if flags.include_policy_intervention and step.policy_intervention is not None:
        intervention = _labelled("🎯 Intervention", step.policy_intervention.type, "yellow")
        if step.policy_intervention.reason:
            intervention.append(f" - {step.policy_intervention.reason}", style="dim")
        sections.append(Section("policy_intervention", intervention))

    content = Text("📝 Content:\n", style="white")
    content.append(truncate_content(step.content, mode), style="bright_black")
    sections.append(Section("content", content))

    if flags.include_feedback and step.feedback is not None:
        sections.append(
            Section(
                "feedback",
                _labelled("🏷️  Feedback", step.feedback.value, FEEDBACK_STYLES[step.feedback]),
            )
        )

    if step.metrics is not None:
        metrics = Text.assemble(
            ("⏱️  Latency: ", "white"),
            (format_ms(step.metrics.latency), "cyan"),
            ("  🔢 Tokens: ", "white"),
            (f"{step.metrics.tokens:,}", "cyan"),
            ("  💰 Cost: ", "white"),
            (f"${step.metrics.cost:.4f}", "green"),
        )
        sections.append(Section("metrics", metrics))

    return sections
