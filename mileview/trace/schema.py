"""Refresh trace records."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    """Steps of a refresh cycle that leave a trace line."""

    REFRESH_START = "refresh_start"
    API_CALL = "api_call"
    OBSERVATION = "observation"
    RENDER = "render"
    REFRESH_DONE = "refresh_done"
    ERROR = "error"


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


class Event(BaseModel):
    """One trace line: what happened during a refresh, and when (UTC)."""

    model_config = ConfigDict(use_enum_values=True)

    type: EventType
    ts: str = Field(default_factory=_utc_timestamp)
    payload: Dict[str, Any] = Field(default_factory=dict)
