"""
In-process editor host.

The editor extension pushes raw signals over HTTP (see ``routes.signals``);
EditorHost keeps the latest ambient tables and fans each signal out to the
handlers subscribed to that kind. It is the SignalSource the recorder
listens to and the state the pollers read from.
"""

import logging
from typing import Callable, Optional, Protocol

from models.host import (
    SEVERITY_ERROR,
    SEVERITY_WARNING,
    ActiveEditorChanged,
    BreakpointsChanged,
    DebugSessionStarted,
    DebugSessionTerminated,
    DiagnosticsChanged,
    DocumentSaved,
    HostBreakpoint,
    HostDiagnostic,
    HostEditor,
    HostSignal,
    HostTab,
    TabsChanged,
    TerminalExecutionEnded,
    TerminalExecutionStarted,
    TextDocumentChanged,
    WorkspaceFoldersChanged,
)

logger = logging.getLogger(__name__)

Handler = Callable[..., None]


class Disposable(Protocol):
    def dispose(self) -> None: ...


class SignalSource(Protocol):
    """Push-based notifications from the editor, one subscription per kind."""

    def on_active_editor_changed(self, handler: Callable[[ActiveEditorChanged], None]) -> Disposable: ...
    def on_document_saved(self, handler: Callable[[DocumentSaved], None]) -> Disposable: ...
    def on_debug_session_started(self, handler: Callable[[DebugSessionStarted], None]) -> Disposable: ...
    def on_debug_session_terminated(self, handler: Callable[[DebugSessionTerminated], None]) -> Disposable: ...
    def on_diagnostics_changed(self, handler: Callable[[DiagnosticsChanged], None]) -> Disposable: ...
    def on_terminal_execution_started(self, handler: Callable[[TerminalExecutionStarted], None]) -> Disposable: ...
    def on_terminal_execution_ended(self, handler: Callable[[TerminalExecutionEnded], None]) -> Disposable: ...
    def on_text_document_changed(self, handler: Callable[[TextDocumentChanged], None]) -> Disposable: ...
    def on_breakpoints_changed(self, handler: Callable[[BreakpointsChanged], None]) -> Disposable: ...

    def active_resource(self) -> Optional[str]: ...
    def diagnostic_totals(self) -> tuple[int, int]: ...


class Subscription:
    def __init__(self, handlers: list[Handler], handler: Handler):
        self._handlers = handlers
        self._handler = handler

    def dispose(self) -> None:
        if self._handler in self._handlers:
            self._handlers.remove(self._handler)


class EditorHost:
    def __init__(self):
        self.active_editor: Optional[HostEditor] = None
        self.tabs: list[HostTab] = []
        self.diagnostics: dict[str, list[HostDiagnostic]] = {}
        self.breakpoints: dict[str, HostBreakpoint] = {}     # by breakpoint id
        self.workspace_folders: list[str] = []
        self._handlers: dict[str, list[Handler]] = {}

    # ---------- SignalSource ----------

    def _subscribe(self, signal: str, handler: Handler) -> Subscription:
        handlers = self._handlers.setdefault(signal, [])
        handlers.append(handler)
        return Subscription(handlers, handler)

    def on_active_editor_changed(self, handler):
        return self._subscribe("active_editor_changed", handler)

    def on_document_saved(self, handler):
        return self._subscribe("document_saved", handler)

    def on_debug_session_started(self, handler):
        return self._subscribe("debug_session_started", handler)

    def on_debug_session_terminated(self, handler):
        return self._subscribe("debug_session_terminated", handler)

    def on_diagnostics_changed(self, handler):
        return self._subscribe("diagnostics_changed", handler)

    def on_terminal_execution_started(self, handler):
        return self._subscribe("terminal_execution_started", handler)

    def on_terminal_execution_ended(self, handler):
        return self._subscribe("terminal_execution_ended", handler)

    def on_text_document_changed(self, handler):
        return self._subscribe("text_document_changed", handler)

    def on_breakpoints_changed(self, handler):
        return self._subscribe("breakpoints_changed", handler)

    def active_resource(self) -> Optional[str]:
        return self.active_editor.uri if self.active_editor else None

    def diagnostic_totals(self) -> tuple[int, int]:
        """(errors, warnings) across every resource currently known."""
        errors = 0
        warnings = 0
        for diags in self.diagnostics.values():
            for d in diags:
                if d.severity == SEVERITY_ERROR:
                    errors += 1
                elif d.severity == SEVERITY_WARNING:
                    warnings += 1
        return errors, warnings

    # ---------- Ingestion ----------

    def dispatch(self, signal: HostSignal) -> None:
        """Apply the signal to the ambient tables, then notify subscribers."""
        self._apply(signal)
        for handler in list(self._handlers.get(signal.signal, [])):
            handler(signal)

    def _apply(self, signal: HostSignal) -> None:
        if isinstance(signal, ActiveEditorChanged):
            self.active_editor = signal.editor
        elif isinstance(signal, DiagnosticsChanged):
            for uri, diags in signal.diagnostics.items():
                if diags:
                    self.diagnostics[uri] = list(diags)
                else:
                    self.diagnostics.pop(uri, None)
        elif isinstance(signal, BreakpointsChanged):
            for bp in signal.removed:
                self.breakpoints.pop(bp.id, None)
            for bp in [*signal.added, *signal.changed]:
                self.breakpoints[bp.id] = bp
        elif isinstance(signal, TabsChanged):
            self.tabs = list(signal.tabs)
        elif isinstance(signal, WorkspaceFoldersChanged):
            self.workspace_folders = list(signal.folders)
        elif isinstance(signal, DocumentSaved):
            if self.active_editor and self.active_editor.uri == signal.uri:
                self.active_editor = self.active_editor.model_copy(update={"is_dirty": False})
            self.tabs = [
                t.model_copy(update={"is_dirty": False}) if t.uri == signal.uri else t
                for t in self.tabs
            ]
