"""
Playback of a fetched session record.

The controller drives a Navigator over the record and prints each step with
the renderer. Three modes are supported:

- ``cli``: auto-play every step in order with a fixed delay, then print the summary.
- ``step``: interactive walkthrough driven by the command grammar.
- ``webview``: not implemented; warns and falls back to ``cli``.
"""

import logging
import sys
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, TextIO

from rich.console import Console
from rich.markup import escape

from .commands import (
    PROMPT,
    HelpRequest,
    JumpTo,
    Next,
    Previous,
    Quit,
    SummaryRequest,
    help_text,
    parse_command,
)
from .errors import ValidationError
from .models import SessionRecord
from .navigator import Navigator
from .renderer import DisplayFlags, RenderMode, format_ms, render_step
from .summary import summarize, summary_table

logger = logging.getLogger(__name__)

RULE = "━" * 51


class PlaybackMode(str, Enum):
    CLI = "cli"
    STEP = "step"
    WEBVIEW = "webview"


class PlaybackSpeed(str, Enum):
    SLOW = "slow"
    NORMAL = "normal"
    FAST = "fast"


SPEED_DELAYS_MS = {
    PlaybackSpeed.SLOW: 2000,
    PlaybackSpeed.NORMAL: 1000,
    PlaybackSpeed.FAST: 500,
}


def delay_ms(speed) -> int:
    """Pause between auto-played steps, in milliseconds."""
    return SPEED_DELAYS_MS[PlaybackSpeed(speed)]


class PlaybackState(Enum):
    IDLE = "idle"
    AUTO_PLAYING = "auto_playing"
    INTERACTIVE_WAITING = "interactive_waiting"
    RENDERING = "rendering"
    SUMMARY_EXCURSION = "summary_excursion"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class ReplayOptions:
    """Playback configuration for one replay."""
    mode: PlaybackMode = PlaybackMode.CLI
    speed: PlaybackSpeed = PlaybackSpeed.NORMAL
    include_cache: bool = False
    include_feedback: bool = False
    include_policy_intervention: bool = False
    # Render auto-played steps back to back without the speed delay
    auto_play: bool = False
    # Current project selection, display only
    project: Optional[str] = None

    @property
    def flags(self) -> DisplayFlags:
        return DisplayFlags(
            include_cache=self.include_cache,
            include_feedback=self.include_feedback,
            include_policy_intervention=self.include_policy_intervention,
        )


class LineSource:
    """Blocking line input for interactive replay. ``read`` returns None once input ends."""

    def __init__(self, console: Console, stream: Optional[TextIO] = None):
        self.console = console
        self.stream = stream
        self.closed = False

    def read(self, prompt: str) -> Optional[str]:
        if self.closed:
            return None
        try:
            if self.stream is None:
                return self.console.input(f"\n[yellow]{escape(prompt)}[/yellow]")
            self.console.print(f"\n[yellow]{escape(prompt)}[/yellow]", end="")
            line = self.stream.readline()
        except (EOFError, KeyboardInterrupt):
            return None
        if not line:
            return None
        return line.rstrip("\r\n")

    def close(self):
        if self.closed:
            return
        self.closed = True
        if self.stream is not None and self.stream is not sys.stdin:
            self.stream.close()


class PlaybackController:
    """Runs one replay of ``record`` and then refuses further use."""

    def __init__(
        self,
        record: SessionRecord,
        options: Optional[ReplayOptions] = None,
        console: Optional[Console] = None,
        line_source: Optional[LineSource] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.record = record
        self.options = options or ReplayOptions()
        self.console = console or Console()
        self.line_source = line_source or LineSource(self.console)
        self.sleep = sleep or time.sleep

        self.state = PlaybackState.IDLE
        self.navigator: Optional[Navigator] = None
        self.rendered: List[int] = []

    def run(self) -> None:
        if self.state is not PlaybackState.IDLE:
            raise RuntimeError(f"replay already {self.state.value}")

        mode = PlaybackMode(self.options.mode)
        logger.debug("Replaying %s in %s mode", self.record.session_id, mode.value)
        try:
            if mode is PlaybackMode.WEBVIEW:
                self._play_auto("Webview Session Replay", webview=True)
            elif mode is PlaybackMode.STEP:
                self._play_interactive()
            else:
                self._play_auto()
        finally:
            self.line_source.close()
            self._transition(PlaybackState.TERMINATED)

    def _transition(self, state: PlaybackState) -> None:
        logger.debug("Playback state %s -> %s", self.state.value, state.value)
        self.state = state

    def _webview_notice(self) -> None:
        logger.warning("Webview playback requested but not implemented, using cli")
        self.console.print("[yellow]🌐 Webview mode is not yet implemented.[/yellow]")
        self.console.print("Falling back to CLI mode...")
        self.console.print(f"[dim]{RULE}[/dim]")

    def _print_banner(self, title: str) -> None:
        record = self.record
        self.console.print(f"\n[bold cyan]🔄 {title}: {escape(record.session_id)}[/bold cyan]")
        self.console.print(f"[dim]{RULE}[/dim]")
        if self.options.project:
            self.console.print(f"📁 Project: [cyan]{escape(self.options.project)}[/cyan]")
        if record.created_at:
            self.console.print(f"📅 Created: [cyan]{escape(record.created_at)}[/cyan]")
        self.console.print(f"⏱️  Duration: [cyan]{format_ms(record.duration)}[/cyan]")
        agents = ", ".join(record.agents) if record.agents else "N/A"
        self.console.print(f"🤖 Agents: [cyan]{escape(agents)}[/cyan]")
        status_color = "green" if record.status == "completed" else "yellow"
        self.console.print(f"📊 Status: [{status_color}]{escape(record.status)}[/{status_color}]")

    def _has_messages(self) -> bool:
        if self.record.messages:
            return True
        self.console.print("[yellow]No messages found in this session.[/yellow]")
        self.console.print(f"[dim]{RULE}[/dim]")
        return False

    def _render(self, mode: RenderMode) -> None:
        resume = self.state
        self._transition(PlaybackState.RENDERING)

        cursor = self.navigator.cursor
        step = self.record.messages[cursor]
        self.console.print()
        for section in render_step(step, self.navigator.total, self.options.flags, mode):
            self.console.print(section.text)
        self.rendered.append(cursor)

        self._transition(resume)

    def _print_summary(self) -> None:
        self.console.print()
        self.console.print(
            summary_table(
                summarize(self.record),
                include_cache=self.options.include_cache,
                include_policy_intervention=self.options.include_policy_intervention,
            )
        )

    def _play_auto(self, title: str = "Session Replay", webview: bool = False) -> None:
        self._print_banner(title)
        if webview:
            self._webview_notice()
        if not self._has_messages():
            return

        self._transition(PlaybackState.AUTO_PLAYING)
        self.navigator = Navigator(self.record.total_messages)
        pause = delay_ms(self.options.speed) / 1000

        try:
            while True:
                self._render(RenderMode.AUTO_PLAY)
                if self.navigator.at_end:
                    break
                if not self.options.auto_play:
                    self.sleep(pause)
                self.navigator.next()
        except KeyboardInterrupt:
            logger.info("Auto-play interrupted at step %d", self.navigator.position)
            self.console.print("\n[yellow]Playback interrupted by user[/yellow]")
            self.console.print(f"[dim]{RULE}[/dim]")
            return

        self._print_summary()
        self.console.print(f"[dim]{RULE}[/dim]")

    def _play_interactive(self) -> None:
        self._print_banner("Interactive Session Replay")
        if not self._has_messages():
            return

        self.navigator = Navigator(self.record.total_messages)
        self.console.print(
            f"\n[yellow]📋 Session has {self.navigator.total} messages. "
            "Use the following commands:[/yellow]"
        )
        self.console.print(escape(help_text()))

        needs_render = True
        while True:
            if needs_render:
                self._render(RenderMode.INTERACTIVE)
            self._transition(PlaybackState.INTERACTIVE_WAITING)

            line = self.line_source.read(PROMPT)
            if line is None:
                logger.debug("Input closed, ending replay")
                break

            try:
                operation = parse_command(line)
                if isinstance(operation, Quit):
                    break
                if isinstance(operation, Next):
                    self.navigator.next()
                elif isinstance(operation, Previous):
                    self.navigator.previous()
                elif isinstance(operation, JumpTo):
                    self.navigator.jump_to(operation.number)
                elif isinstance(operation, SummaryRequest):
                    self._transition(PlaybackState.SUMMARY_EXCURSION)
                    self._print_summary()
                elif isinstance(operation, HelpRequest):
                    self.console.print("\n[yellow]Commands:[/yellow]")
                    self.console.print(escape(help_text()))
                    needs_render = False
                    continue
            except ValidationError as e:
                self.console.print(f"[red]{escape(str(e))}[/red]")
                needs_render = False
                continue

            needs_render = True

        self.console.print(f"\n[dim]{RULE}[/dim]")
