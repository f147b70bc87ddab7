"""
Ambient editor state, polled fresh on every assembly cycle.

All line and column numbers here are 1-indexed. The conversion from host
coordinates happens once, in ``context.pollers``.
"""

from typing import Literal, Optional

from pydantic import Field

from models.base import WireModel

Severity = Literal["error", "warning", "info", "hint"]


class EditorState(WireModel):
    uri: str
    language_id: str
    cursor_line: int
    cursor_column: int
    selection_text: str = ""
    selection_start_line: int
    selection_end_line: int
    visible_range_start: int = 1
    visible_range_end: int = 1
    line_count: int
    is_dirty: bool = False


class TabInfo(WireModel):
    uri: str
    label: str
    is_dirty: bool = False
    is_active: bool = False
    is_pinned: bool = False


class DiagnosticInfo(WireModel):
    uri: str
    severity: Severity
    message: str
    line: int
    source: str = "unknown"


class BreakpointInfo(WireModel):
    uri: str
    line: int
    enabled: bool = True
    condition: Optional[str] = None


class GitStatus(WireModel):
    branch: str
    ahead: int = 0
    behind: int = 0
    staged: list[str] = Field(default_factory=list)
    modified: list[str] = Field(default_factory=list)
    untracked: list[str] = Field(default_factory=list)


class AmbientState(WireModel):
    active_editor: Optional[EditorState] = None
    open_tabs: list[TabInfo] = Field(default_factory=list)
    dirty_files: list[str] = Field(default_factory=list)
    diagnostics: list[DiagnosticInfo] = Field(default_factory=list)
    breakpoints: list[BreakpointInfo] = Field(default_factory=list)
    git_status: Optional[GitStatus] = None
    workspace_folders: list[str] = Field(default_factory=list)
