"""
Ambient-state polling.

HostStatePoller reads the EditorHost tables and is the one place where host
coordinates (0-indexed) become bundle coordinates (1-indexed). Nothing
downstream adjusts line numbers again.
"""

from typing import Optional, Protocol

from capture.host import EditorHost
from context.git_status import GitStatusProvider
from models.bundle import Selection
from models.host import SEVERITY_ERROR, SEVERITY_WARNING, HostEditor
from models.state import BreakpointInfo, DiagnosticInfo, EditorState, GitStatus, TabInfo

_SEVERITY_NAMES = {0: "error", 1: "warning", 2: "info", 3: "hint"}


class AmbientPoller(Protocol):
    async def active_editor(self) -> Optional[EditorState]: ...
    async def open_tabs(self) -> list[TabInfo]: ...
    async def diagnostics(self) -> list[DiagnosticInfo]: ...
    async def breakpoints(self) -> list[BreakpointInfo]: ...
    async def git_status(self) -> Optional[GitStatus]: ...
    def workspace_folders(self) -> list[str]: ...


class SelectionProvider(Protocol):
    async def current_selection(self) -> Optional[Selection]: ...


def editor_state_from_host(editor: HostEditor) -> EditorState:
    sel = editor.selection
    visible = editor.visible_ranges
    return EditorState(
        uri=editor.uri,
        language_id=editor.language_id,
        cursor_line=editor.active.line + 1,
        cursor_column=editor.active.character + 1,
        selection_text="" if sel.is_empty else editor.selection_text,
        selection_start_line=sel.start.line + 1,
        selection_end_line=sel.end.line + 1,
        visible_range_start=visible[0].start.line + 1 if visible else 1,
        visible_range_end=visible[-1].end.line + 1 if visible else 1,
        line_count=editor.line_count,
        is_dirty=editor.is_dirty,
    )


def selection_from_host(editor: HostEditor) -> Optional[Selection]:
    sel = editor.selection
    if sel.is_empty:
        return None
    return Selection(
        uri=editor.uri,
        start_line=sel.start.line + 1,
        end_line=sel.end.line + 1,
        snippet=editor.selection_text,
        language_id=editor.language_id,
    )


class HostStatePoller:
    """AmbientPoller and SelectionProvider over an EditorHost."""

    def __init__(self, host: EditorHost, git: Optional[GitStatusProvider] = None):
        self._host = host
        self._git = git

    async def active_editor(self) -> Optional[EditorState]:
        editor = self._host.active_editor
        return editor_state_from_host(editor) if editor else None

    async def open_tabs(self) -> list[TabInfo]:
        return [
            TabInfo(
                uri=t.uri,
                label=t.label,
                is_dirty=t.is_dirty,
                is_active=t.is_active,
                is_pinned=t.is_pinned,
            )
            for t in self._host.tabs
        ]

    async def diagnostics(self) -> list[DiagnosticInfo]:
        """Errors and warnings across all resources; info and hints are dropped."""
        result: list[DiagnosticInfo] = []
        for uri, diags in self._host.diagnostics.items():
            for d in diags:
                if d.severity not in (SEVERITY_ERROR, SEVERITY_WARNING):
                    continue
                result.append(DiagnosticInfo(
                    uri=uri,
                    severity=_SEVERITY_NAMES[d.severity],
                    message=d.message,
                    line=d.range.start.line + 1,
                    source=d.source or "unknown",
                ))
        return result

    async def breakpoints(self) -> list[BreakpointInfo]:
        return [
            BreakpointInfo(
                uri=bp.uri,
                line=bp.line + 1,
                enabled=bp.enabled,
                condition=bp.condition,
            )
            for bp in self._host.breakpoints.values()
        ]

    async def git_status(self) -> Optional[GitStatus]:
        if self._git is None:
            return None
        return await self._git.status()

    def workspace_folders(self) -> list[str]:
        return list(self._host.workspace_folders)

    async def current_selection(self) -> Optional[Selection]:
        editor = self._host.active_editor
        return selection_from_host(editor) if editor else None
