"""
Activity recorder.

Subscribes to a SignalSource, turns each raw notification into one event
and appends it to the log. Two filters apply before appending:

  - file switches are deduplicated against the last recorded resource
  - text changes are debounced per resource (trailing edge, 2s quiet period)

Everything else is appended as soon as it arrives.
"""

import asyncio
import logging
from typing import Callable, Optional

from capture.clock import now_ms
from capture.host import Disposable, SignalSource
from capture.ring_buffer import BoundedEventLog
from models.event import (
    BreakpointChangeEvent,
    DebugStartEvent,
    DebugStopEvent,
    DiagnosticChangeEvent,
    Event,
    FileSaveEvent,
    FileSwitchEvent,
    TerminalCommandEndEvent,
    TerminalCommandStartEvent,
    TextChangeEvent,
)
from models.host import (
    ActiveEditorChanged,
    BreakpointsChanged,
    DebugSessionStarted,
    DebugSessionTerminated,
    DiagnosticsChanged,
    DocumentSaved,
    TerminalExecutionEnded,
    TerminalExecutionStarted,
    TextDocumentChanged,
)

logger = logging.getLogger(__name__)

TEXT_CHANGE_DEBOUNCE_MS = 2000


class _PendingEdit:
    __slots__ = ("handle", "batches")

    def __init__(self, handle: asyncio.TimerHandle, batches: int):
        self.handle = handle
        self.batches = batches


class ActivityRecorder:
    def __init__(
        self,
        log: BoundedEventLog[Event],
        source: SignalSource,
        debounce_ms: int = TEXT_CHANGE_DEBOUNCE_MS,
        clock: Callable[[], int] = now_ms,
    ):
        self.log = log
        self._source = source
        self._debounce_s = debounce_ms / 1000
        self._clock = clock
        self._subscriptions: list[Disposable] = []
        self._pending: dict[str, _PendingEdit] = {}
        self._last_active_uri: Optional[str] = None
        self._started = False

    @property
    def pending_resources(self) -> list[str]:
        return list(self._pending)

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        self._last_active_uri = self._source.active_resource()

        src = self._source
        self._subscriptions = [
            src.on_active_editor_changed(self._on_active_editor_changed),
            src.on_document_saved(self._on_document_saved),
            src.on_debug_session_started(self._on_debug_started),
            src.on_debug_session_terminated(self._on_debug_terminated),
            src.on_diagnostics_changed(self._on_diagnostics_changed),
            src.on_terminal_execution_started(self._on_terminal_started),
            src.on_terminal_execution_ended(self._on_terminal_ended),
            src.on_text_document_changed(self._on_text_changed),
            src.on_breakpoints_changed(self._on_breakpoints_changed),
        ]
        logger.debug("ActivityRecorder started (seed resource: %s)", self._last_active_uri)

    def dispose(self) -> None:
        """Release every subscription and cancel pending debounce timers."""
        for sub in self._subscriptions:
            sub.dispose()
        self._subscriptions = []
        for pending in self._pending.values():
            pending.handle.cancel()
        self._pending.clear()
        self._started = False
        logger.debug("ActivityRecorder disposed")

    # ---------- Handlers ----------

    def _on_active_editor_changed(self, signal: ActiveEditorChanged) -> None:
        editor = signal.editor
        to_uri = editor.uri if editor else None
        if to_uri == self._last_active_uri:
            return
        self.log.push(FileSwitchEvent(
            timestamp=self._clock(),
            from_uri=self._last_active_uri,
            to_uri=to_uri,
            to_language_id=editor.language_id if editor else None,
        ))
        self._last_active_uri = to_uri

    def _on_document_saved(self, signal: DocumentSaved) -> None:
        self.log.push(FileSaveEvent(
            timestamp=self._clock(),
            uri=signal.uri,
            language_id=signal.language_id,
        ))

    def _on_debug_started(self, signal: DebugSessionStarted) -> None:
        self.log.push(DebugStartEvent(
            timestamp=self._clock(),
            session_name=signal.name,
            session_type=signal.type,
        ))

    def _on_debug_terminated(self, signal: DebugSessionTerminated) -> None:
        self.log.push(DebugStopEvent(
            timestamp=self._clock(),
            session_name=signal.name,
            session_type=signal.type,
        ))

    def _on_diagnostics_changed(self, signal: DiagnosticsChanged) -> None:
        errors, warnings = self._source.diagnostic_totals()
        self.log.push(DiagnosticChangeEvent(
            timestamp=self._clock(),
            uris=signal.uris,
            total_errors=errors,
            total_warnings=warnings,
        ))

    def _on_terminal_started(self, signal: TerminalExecutionStarted) -> None:
        self.log.push(TerminalCommandStartEvent(
            timestamp=self._clock(),
            command_line=signal.command_line,
            terminal_name=signal.terminal_name,
        ))

    def _on_terminal_ended(self, signal: TerminalExecutionEnded) -> None:
        self.log.push(TerminalCommandEndEvent(
            timestamp=self._clock(),
            command_line=signal.command_line,
            terminal_name=signal.terminal_name,
            exit_code=signal.exit_code,
        ))

    def _on_text_changed(self, signal: TextDocumentChanged) -> None:
        if signal.content_changes == 0:
            return
        uri = signal.uri
        batches = 1
        existing = self._pending.pop(uri, None)
        if existing is not None:
            existing.handle.cancel()
            batches += existing.batches
        loop = asyncio.get_running_loop()
        handle = loop.call_later(self._debounce_s, self._flush_text_change, uri)
        self._pending[uri] = _PendingEdit(handle, batches)

    def _flush_text_change(self, uri: str) -> None:
        pending = self._pending.pop(uri, None)
        if pending is None:
            return
        self.log.push(TextChangeEvent(
            timestamp=self._clock(),
            uri=uri,
            change_count=pending.batches,
        ))

    def _on_breakpoints_changed(self, signal: BreakpointsChanged) -> None:
        self.log.push(BreakpointChangeEvent(
            timestamp=self._clock(),
            added=len(signal.added),
            removed=len(signal.removed),
            changed=len(signal.changed),
        ))
