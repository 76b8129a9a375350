"""
Shared fixtures for costctl tests
"""

import io

import pytest
from rich.console import Console

from costctl.replay.models import SessionRecord


def make_session(count=3, **overrides):
    messages = []
    for i in range(count):
        messages.append({
            "role": "user" if i % 2 == 0 else "assistant",
            "timestamp": f"2024-05-01T10:00:0{i}Z",
            "content": f"message {i + 1}",
        })
    data = {
        "sessionId": "session-1234",
        "createdAt": "2024-05-01T10:00:00Z",
        "duration": 4200,
        "agents": ["planner", "writer"],
        "status": "completed",
        "messages": messages,
        "totalCost": 0.0123,
        "totalTokens": 4521,
        "averageLatency": 850,
    }
    data.update(overrides)
    return SessionRecord.model_validate(data)


@pytest.fixture
def session_factory():
    return make_session


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=400, force_terminal=False, color_system=None)


@pytest.fixture
def output(console):
    """Text printed to the test console so far."""
    return lambda: console.file.getvalue()
