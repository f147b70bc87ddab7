"""
Raw notifications as the editor host reports them.

Host coordinates are 0-indexed (line, character) and diagnostic severity is
the host's integer scale: 0 error, 1 warning, 2 information, 3 hint.
Nothing here is stored in the event log directly; the recorder normalizes
these into ``models.event`` records and the pollers into ``models.state``.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import Field

from models.base import WireModel

SEVERITY_ERROR = 0
SEVERITY_WARNING = 1


class HostPosition(WireModel):
    line: int = Field(ge=0)
    character: int = Field(default=0, ge=0)


class HostRange(WireModel):
    start: HostPosition
    end: HostPosition

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


class HostEditor(WireModel):
    uri: str
    language_id: str
    selection: HostRange
    active: HostPosition            # cursor
    selection_text: str = ""
    cursor_line_text: str = ""
    visible_ranges: list[HostRange] = Field(default_factory=list)
    line_count: int
    is_dirty: bool = False


class HostTab(WireModel):
    uri: str
    label: str
    is_dirty: bool = False
    is_active: bool = False
    is_pinned: bool = False


class HostDiagnostic(WireModel):
    severity: int = Field(ge=0, le=3)
    message: str
    range: HostRange
    source: Optional[str] = None


class HostBreakpoint(WireModel):
    id: str                 # stable across moves and edits
    uri: str
    line: int = Field(ge=0)
    enabled: bool = True
    condition: Optional[str] = None


# ---------- Signals ----------

class ActiveEditorChanged(WireModel):
    signal: Literal["active_editor_changed"] = "active_editor_changed"
    editor: Optional[HostEditor] = None


class DocumentSaved(WireModel):
    signal: Literal["document_saved"] = "document_saved"
    uri: str
    language_id: str


class DebugSessionStarted(WireModel):
    signal: Literal["debug_session_started"] = "debug_session_started"
    name: str
    type: str


class DebugSessionTerminated(WireModel):
    signal: Literal["debug_session_terminated"] = "debug_session_terminated"
    name: str
    type: str


class DiagnosticsChanged(WireModel):
    signal: Literal["diagnostics_changed"] = "diagnostics_changed"
    diagnostics: dict[str, list[HostDiagnostic]] = Field(default_factory=dict)

    @property
    def uris(self) -> list[str]:
        return list(self.diagnostics)


class TerminalExecutionStarted(WireModel):
    signal: Literal["terminal_execution_started"] = "terminal_execution_started"
    command_line: str
    terminal_name: str


class TerminalExecutionEnded(WireModel):
    signal: Literal["terminal_execution_ended"] = "terminal_execution_ended"
    command_line: str
    terminal_name: str
    exit_code: Optional[int] = None


class TextDocumentChanged(WireModel):
    signal: Literal["text_document_changed"] = "text_document_changed"
    uri: str
    content_changes: int = Field(ge=0)


class BreakpointsChanged(WireModel):
    signal: Literal["breakpoints_changed"] = "breakpoints_changed"
    added: list[HostBreakpoint] = Field(default_factory=list)
    removed: list[HostBreakpoint] = Field(default_factory=list)
    changed: list[HostBreakpoint] = Field(default_factory=list)


class TabsChanged(WireModel):
    signal: Literal["tabs_changed"] = "tabs_changed"
    tabs: list[HostTab] = Field(default_factory=list)


class WorkspaceFoldersChanged(WireModel):
    signal: Literal["workspace_folders_changed"] = "workspace_folders_changed"
    folders: list[str] = Field(default_factory=list)


HostSignal = Annotated[
    Union[
        ActiveEditorChanged,
        DocumentSaved,
        DebugSessionStarted,
        DebugSessionTerminated,
        DiagnosticsChanged,
        TerminalExecutionStarted,
        TerminalExecutionEnded,
        TextDocumentChanged,
        BreakpointsChanged,
        TabsChanged,
        WorkspaceFoldersChanged,
    ],
    Field(discriminator="signal"),
]
