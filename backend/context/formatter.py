"""
Render a ContextBundle as compact markdown for an LLM prompt.

Section order is fixed: phase, active editor, selection, diagnostics, open
tabs, git, breakpoints, recent activity. Empty sections are left out. List
caps are hard cuts; section headers always print the full count.
"""

import math
from typing import Optional

from capture.clock import now_ms
from models.bundle import ContextBundle
from models.event import Event

MAX_ERROR_LINES = 10
MAX_WARNING_LINES = 5
MAX_TAB_LINES = 15
MAX_BREAKPOINT_LINES = 10


def _describe_event(event: Event) -> str:
    kind = event.kind
    if kind == "file_switch":
        return f"switched to {event.to_uri or 'none'}"
    if kind == "file_save":
        return f"saved {event.uri}"
    if kind == "debug_start":
        return f'started debug "{event.session_name}"'
    if kind == "debug_stop":
        return f'ended debug "{event.session_name}"'
    if kind == "diagnostic_change":
        return f"diagnostics changed ({event.total_errors} errors, {event.total_warnings} warnings)"
    if kind == "terminal_command_start":
        return f"ran `{event.command_line}`"
    if kind == "terminal_command_end":
        exit_code = "?" if event.exit_code is None else event.exit_code
        return f"command finished (exit {exit_code})"
    if kind == "text_change":
        return f"edited {event.uri}"
    if kind == "breakpoint_change":
        return f"breakpoints changed (+{event.added} -{event.removed})"
    return kind


def format_event(event: Event, now: int) -> str:
    # half-up, so 2.5s reads as 3s
    ago = math.floor((now - event.timestamp) / 1000 + 0.5)
    return f"{ago}s ago: {_describe_event(event)}"


def format_bundle(bundle: ContextBundle, now: Optional[int] = None) -> str:
    if now is None:
        now = now_ms()
    state = bundle.state
    parts: list[str] = []

    # ── Phase ──
    parts.append(f"## Developer Context ({bundle.timestamp})")
    parts.append(f"**Phase**: {bundle.phase.phase} ({round(bundle.phase.confidence * 100)}% confidence)")
    parts.append(f"**Reasoning**: {bundle.phase.reasoning}")
    parts.append("")

    # ── Active editor ──
    if state.active_editor:
        ed = state.active_editor
        dirty = ", unsaved" if ed.is_dirty else ""
        parts.append(
            f"**Active file**: {ed.uri} ({ed.language_id}, line {ed.cursor_line}, {ed.line_count} lines{dirty})"
        )

    # ── Selection ──
    if bundle.selection:
        s = bundle.selection
        parts.append(f"**Selection**: {s.uri}:{s.start_line}-{s.end_line}")
        parts.append(f"```{s.language_id}")
        parts.append(s.snippet)
        parts.append("```")

    # ── Diagnostics ──
    errors = [d for d in state.diagnostics if d.severity == "error"]
    warnings = [d for d in state.diagnostics if d.severity == "warning"]
    if errors or warnings:
        parts.append("")
        parts.append(f"**Diagnostics**: {len(errors)} errors, {len(warnings)} warnings")
        for d in errors[:MAX_ERROR_LINES]:
            parts.append(f"  - ERROR {d.uri}:{d.line}: {d.message} [{d.source}]")
        for d in warnings[:MAX_WARNING_LINES]:
            parts.append(f"  - WARN {d.uri}:{d.line}: {d.message} [{d.source}]")

    # ── Open tabs ──
    if state.open_tabs:
        parts.append("")
        parts.append(f"**Open tabs** ({len(state.open_tabs)}):")
        for tab in state.open_tabs[:MAX_TAB_LINES]:
            markers = ", ".join(m for m in ("active" if tab.is_active else "", "unsaved" if tab.is_dirty else "") if m)
            parts.append(f"  - {tab.uri}" + (f" ({markers})" if markers else ""))

    # ── Git ──
    if state.git_status:
        g = state.git_status
        parts.append("")
        parts.append(f"**Git**: branch `{g.branch}` (ahead {g.ahead}, behind {g.behind})")
        if g.modified:
            parts.append(f"  Modified: {', '.join(g.modified)}")
        if g.staged:
            parts.append(f"  Staged: {', '.join(g.staged)}")

    # ── Breakpoints ──
    if state.breakpoints:
        parts.append("")
        parts.append(f"**Breakpoints** ({len(state.breakpoints)}):")
        for bp in state.breakpoints[:MAX_BREAKPOINT_LINES]:
            condition = f" if {bp.condition}" if bp.condition else ""
            disabled = "" if bp.enabled else " (disabled)"
            parts.append(f"  - {bp.uri}:{bp.line}{condition}{disabled}")

    # ── Recent activity ──
    if bundle.event_log:
        parts.append("")
        parts.append(f"**Recent activity** ({len(bundle.event_log)} events):")
        for event in bundle.event_log:
            parts.append(f"  {format_event(event, now)}")

    return "\n".join(parts)
