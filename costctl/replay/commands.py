"""
Interactive replay command grammar.

Maps one line of user input to a replay operation. Parsing is pure: the
navigator is only touched later by the playback controller.
"""

from dataclasses import dataclass
from typing import Union

from .errors import UnrecognizedCommandError, ValidationError

HELP_LINES = [
    ("n/next", "Next message"),
    ("p/prev", "Previous message"),
    ("j/jump <number>", "Jump to specific message"),
    ("s/summary", "Show session summary"),
    ("q/quit", "Exit replay"),
    ("h/help", "Show this help"),
]

PROMPT = "Command (n/p/j/s/q/h): "


@dataclass(frozen=True)
class Next:
    pass


@dataclass(frozen=True)
class Previous:
    pass


@dataclass(frozen=True)
class JumpTo:
    number: int


@dataclass(frozen=True)
class SummaryRequest:
    pass


@dataclass(frozen=True)
class HelpRequest:
    pass


@dataclass(frozen=True)
class Quit:
    pass


Operation = Union[Next, Previous, JumpTo, SummaryRequest, HelpRequest, Quit]

_SIMPLE_COMMANDS = {
    "n": Next,
    "next": Next,
    "p": Previous,
    "prev": Previous,
    "s": SummaryRequest,
    "summary": SummaryRequest,
    "q": Quit,
    "quit": Quit,
    "h": HelpRequest,
    "help": HelpRequest,
}

_JUMP_COMMANDS = ("j", "jump")


def parse_command(line: str) -> Operation:
    """
    Resolve an input line to an operation.

    Raises:
        ValidationError: ``jump`` without a valid integer argument.
        UnrecognizedCommandError: anything outside the grammar.
    """
    words = (line or "").strip().lower().split()
    if not words:
        raise UnrecognizedCommandError("")

    verb, args = words[0], words[1:]

    if verb in _SIMPLE_COMMANDS and not args:
        return _SIMPLE_COMMANDS[verb]()

    if verb in _JUMP_COMMANDS:
        if len(args) != 1:
            raise ValidationError("Invalid message number. Usage: j <number>")
        try:
            return JumpTo(int(args[0]))
        except ValueError:
            raise ValidationError(f"Invalid message number: {args[0]!r}")

    raise UnrecognizedCommandError(verb)


def help_text() -> str:
    return "\n".join(f"  {usage} - {description}" for usage, description in HELP_LINES)
