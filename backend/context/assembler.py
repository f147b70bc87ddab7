"""
Context assembly: one inference cycle.

  1. read the event window from the log
  2. poll ambient state concurrently, each poll isolated from the others
  3. classify the window
  4. capture the current selection, if any
  5. compose a versioned ContextBundle

No step retries. A failed poll degrades to its empty value.
"""

import asyncio
import logging
from typing import Any, Awaitable, Optional

from capture.clock import iso_from_ms, now_ms
from capture.ring_buffer import BoundedEventLog
from context.pollers import AmbientPoller, SelectionProvider
from models.bundle import BUNDLE_VERSION, ContextBundle, Selection
from models.event import Event
from models.state import AmbientState, DiagnosticInfo
from phase.classifier import classify

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SECONDS = 60
DEFAULT_MAX_DIAGNOSTICS = 50


def cap_diagnostics(diagnostics: list[DiagnosticInfo], limit: int) -> list[DiagnosticInfo]:
    """Keep at most ``limit`` entries, filling with errors before warnings."""
    errors = [d for d in diagnostics if d.severity == "error"]
    warnings = [d for d in diagnostics if d.severity == "warning"]
    return (errors + warnings)[:limit]


def _settled(name: str, result: Any, empty: Any) -> Any:
    if isinstance(result, BaseException):
        logger.warning("assemble: %s poll failed: %r", name, result)
        return empty
    return result


async def poll_ambient_state(poller: AmbientPoller, max_diagnostics: int) -> AmbientState:
    polls: list[tuple[str, Awaitable[Any], Any]] = [
        ("active_editor", poller.active_editor(), None),
        ("open_tabs", poller.open_tabs(), []),
        ("diagnostics", poller.diagnostics(), []),
        ("breakpoints", poller.breakpoints(), []),
        ("git_status", poller.git_status(), None),
    ]
    results = await asyncio.gather(*(p for _, p, _ in polls), return_exceptions=True)
    active_editor, open_tabs, diagnostics, breakpoints, git_status = (
        _settled(name, result, empty)
        for (name, _, empty), result in zip(polls, results)
    )

    try:
        workspace_folders = poller.workspace_folders()
    except Exception as e:
        logger.warning("assemble: workspace_folders poll failed: %r", e)
        workspace_folders = []

    return AmbientState(
        active_editor=active_editor,
        open_tabs=open_tabs,
        dirty_files=[t.uri for t in open_tabs if t.is_dirty],
        diagnostics=cap_diagnostics(diagnostics, max_diagnostics),
        breakpoints=breakpoints,
        git_status=git_status,
        workspace_folders=workspace_folders,
    )


async def _capture_selection(provider: SelectionProvider) -> Optional[Selection]:
    try:
        selection = await provider.current_selection()
    except Exception as e:
        logger.warning("assemble: selection capture failed: %r", e)
        return None
    if selection is None or not selection.snippet:
        return None
    return selection


async def assemble(
    log: BoundedEventLog[Event],
    poller: AmbientPoller,
    selection_provider: SelectionProvider,
    now: Optional[int] = None,
    window_seconds: int = DEFAULT_WINDOW_SECONDS,
    max_diagnostics: int = DEFAULT_MAX_DIAGNOSTICS,
) -> ContextBundle:
    if now is None:
        now = now_ms()

    events = log.since(window_seconds * 1000, now)
    state = await poll_ambient_state(poller, max_diagnostics)
    phase = classify(events)
    selection = await _capture_selection(selection_provider)

    logger.debug(
        "assemble: %d events, phase=%s (%.2f)", len(events), phase.phase, phase.confidence
    )

    return ContextBundle(
        version=BUNDLE_VERSION,
        timestamp=iso_from_ms(now),
        event_log=events,
        state=state,
        phase=phase,
        selection=selection,
    )
