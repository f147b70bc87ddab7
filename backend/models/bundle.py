from typing import Any, Literal, Optional

from pydantic import Field

from models.base import WireModel
from models.event import Event
from models.state import AmbientState

Phase = Literal["exploring", "iterating", "building", "debugging", "archaeology", "unknown"]

BUNDLE_VERSION = 1


class PhaseAssessment(WireModel):
    phase: Phase
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str
    recent_files: list[str] = Field(default_factory=list)   # at most 5, first-seen order


class Selection(WireModel):
    uri: str
    start_line: int     # 1-indexed
    end_line: int
    snippet: str
    language_id: str


class ContextBundle(WireModel):
    """
    One assembly cycle's output: the event window, the polled ambient state,
    the inferred phase and the selection (if any).

    Any structural change to this shape must bump ``BUNDLE_VERSION``.
    """

    version: Literal[1] = BUNDLE_VERSION
    timestamp: str      # ISO-8601, UTC
    event_log: list[Event] = Field(default_factory=list)
    state: AmbientState
    phase: PhaseAssessment
    selection: Optional[Selection] = None

    def to_wire(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", by_alias=True)
        if self.selection is None:
            data.pop("selection", None)
        return data
