"""
Session record models as returned by the replay API.

Records are validated from the API's camelCase JSON and are read-only once
loaded. Step indices are assigned at load time when the API omits them.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ReplayModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Feedback(str, Enum):
    """Feedback tag attached to a message."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class CacheInfo(ReplayModel):
    hit: bool
    key: Optional[str] = None


class PolicyIntervention(ReplayModel):
    """Routing, blocking or caching decision taken on a message."""
    type: str
    reason: str = ""


class StepMetrics(ReplayModel):
    latency: float = 0.0
    tokens: int = 0
    cost: float = 0.0


class CacheStats(ReplayModel):
    hit_rate: float = 0.0
    savings: float = 0.0


class Step(ReplayModel):
    """One message of a recorded session."""
    index: int = Field(ge=0)
    role: str
    timestamp: str = ""
    agent: Optional[str] = None
    model: Optional[str] = None
    content: str = ""
    cache_info: Optional[CacheInfo] = None
    policy_intervention: Optional[PolicyIntervention] = Field(
        default=None,
        validation_alias=AliasChoices(
            "policyIntervention", "policy_intervention", "gallmIntervention"
        ),
    )
    feedback: Optional[Feedback] = None
    metrics: Optional[StepMetrics] = None


class SessionRecord(ReplayModel):
    """Complete, immutable record of one recorded session."""
    session_id: str
    created_at: str = ""
    duration: float = 0.0
    agents: List[str] = Field(default_factory=list)
    status: str = "completed"
    workflow_id: Optional[str] = None
    messages: List[Step] = Field(default_factory=list)
    total_cost: float = 0.0
    total_tokens: int = 0
    average_latency: float = 0.0
    cache_stats: Optional[CacheStats] = None

    @model_validator(mode="before")
    @classmethod
    def _assign_indices(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        messages = data.get("messages")
        if not messages:
            return data

        indexed = []
        for position, message in enumerate(messages):
            if isinstance(message, dict) and message.get("index") is None:
                message = {**message, "index": position}
            indexed.append(message)

        keys = [m.get("index") if isinstance(m, dict) else getattr(m, "index", None) for m in indexed]
        if all(isinstance(k, int) for k in keys):
            indexed = [m for _, m in sorted(zip(keys, indexed), key=lambda pair: pair[0])]
        return {**data, "messages": indexed}

    @model_validator(mode="after")
    def _check_contiguous(self) -> "SessionRecord":
        indices = [message.index for message in self.messages]
        if indices != list(range(len(indices))):
            raise ValueError(
                f"message indices must be contiguous from 0, got {indices}"
            )
        return self

    @property
    def total_messages(self) -> int:
        return len(self.messages)

    def to_export(self) -> Dict[str, Any]:
        """Serialize back to the API's JSON shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SessionListing(ReplayModel):
    """Row of a session list (recent sessions, workflow sessions)."""
    session_id: str
    workflow_id: Optional[str] = None
    created_at: str = ""
    duration: float = 0.0
    total_cost: float = 0.0
    status: str = "unknown"
    message_count: int = 0
