"""
Activity events recorded from the editor host.

One model per signal kind, discriminated by ``kind``. Events carry metadata
and command text only, never document content. ``timestamp`` is the capture
time in Unix milliseconds.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import Field, TypeAdapter

from models.base import WireModel


class FileSwitchEvent(WireModel):
    kind: Literal["file_switch"] = "file_switch"
    timestamp: int
    from_uri: Optional[str] = None
    to_uri: Optional[str] = None
    to_language_id: Optional[str] = None


class FileSaveEvent(WireModel):
    kind: Literal["file_save"] = "file_save"
    timestamp: int
    uri: str
    language_id: str


class DebugStartEvent(WireModel):
    kind: Literal["debug_start"] = "debug_start"
    timestamp: int
    session_name: str
    session_type: str


class DebugStopEvent(WireModel):
    kind: Literal["debug_stop"] = "debug_stop"
    timestamp: int
    session_name: str
    session_type: str


class DiagnosticChangeEvent(WireModel):
    kind: Literal["diagnostic_change"] = "diagnostic_change"
    timestamp: int
    uris: list[str] = Field(default_factory=list)
    total_errors: int       # global, across every resource
    total_warnings: int


class TerminalCommandStartEvent(WireModel):
    kind: Literal["terminal_command_start"] = "terminal_command_start"
    timestamp: int
    command_line: str
    terminal_name: str


class TerminalCommandEndEvent(WireModel):
    kind: Literal["terminal_command_end"] = "terminal_command_end"
    timestamp: int
    command_line: str
    terminal_name: str
    exit_code: Optional[int] = None


class TextChangeEvent(WireModel):
    kind: Literal["text_change"] = "text_change"
    timestamp: int
    uri: str
    change_count: int       # edit batches coalesced into this record


class BreakpointChangeEvent(WireModel):
    kind: Literal["breakpoint_change"] = "breakpoint_change"
    timestamp: int
    added: int = 0
    removed: int = 0
    changed: int = 0


Event = Annotated[
    Union[
        FileSwitchEvent,
        FileSaveEvent,
        DebugStartEvent,
        DebugStopEvent,
        DiagnosticChangeEvent,
        TerminalCommandStartEvent,
        TerminalCommandEndEvent,
        TextChangeEvent,
        BreakpointChangeEvent,
    ],
    Field(discriminator="kind"),
]

event_adapter: TypeAdapter[Event] = TypeAdapter(Event)
