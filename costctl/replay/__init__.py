"""Replay module - session records, navigation, rendering and playback"""

from .client import SessionClient
from .controller import (
    LineSource,
    PlaybackController,
    PlaybackMode,
    PlaybackSpeed,
    PlaybackState,
    ReplayOptions,
    delay_ms,
)
from .errors import FetchError, ReplayError, UnrecognizedCommandError, ValidationError
from .models import SessionListing, SessionRecord, Step
from .navigator import Navigator

__all__ = [
    "SessionClient",
    "LineSource",
    "PlaybackController",
    "PlaybackMode",
    "PlaybackSpeed",
    "PlaybackState",
    "ReplayOptions",
    "delay_ms",
    "FetchError",
    "ReplayError",
    "UnrecognizedCommandError",
    "ValidationError",
    "SessionListing",
    "SessionRecord",
    "Step",
    "Navigator",
]
