"""
Tests for the ContextBundle wire format: camelCase field names, omitted
selection, and a lossless JSON round trip.
"""

import json

from models.bundle import ContextBundle, PhaseAssessment, Selection
from models.event import (
    DebugStopEvent,
    DiagnosticChangeEvent,
    FileSwitchEvent,
    TerminalCommandEndEvent,
    TextChangeEvent,
    event_adapter,
)
from models.state import AmbientState, BreakpointInfo, DiagnosticInfo, EditorState, GitStatus, TabInfo


def _full_bundle(selection=True) -> ContextBundle:
    return ContextBundle(
        timestamp="2023-11-14T22:14:20.000Z",
        event_log=[
            FileSwitchEvent(timestamp=1, from_uri=None, to_uri="file:///a.py", to_language_id="python"),
            TextChangeEvent(timestamp=2, uri="file:///a.py", change_count=3),
            DiagnosticChangeEvent(timestamp=3, uris=["file:///a.py"], total_errors=1, total_warnings=0),
            TerminalCommandEndEvent(timestamp=4, command_line="make", terminal_name="bash", exit_code=None),
            DebugStopEvent(timestamp=5, session_name="Launch", session_type="node"),
        ],
        state=AmbientState(
            active_editor=EditorState(
                uri="file:///a.py", language_id="python", cursor_line=2, cursor_column=5,
                selection_text="x", selection_start_line=2, selection_end_line=2, line_count=10,
            ),
            open_tabs=[TabInfo(uri="file:///a.py", label="a.py", is_active=True, is_dirty=True)],
            dirty_files=["file:///a.py"],
            diagnostics=[DiagnosticInfo(uri="file:///a.py", severity="error", message="bad", line=2)],
            breakpoints=[BreakpointInfo(uri="file:///a.py", line=2, condition="x")],
            git_status=GitStatus(branch="main", ahead=1, modified=["a.py"]),
            workspace_folders=["file:///work"],
        ),
        phase=PhaseAssessment(phase="building", confidence=0.6, reasoning="r", recent_files=["file:///a.py"]),
        selection=(
            Selection(uri="file:///a.py", start_line=2, end_line=2, snippet="x", language_id="python")
            if selection else None
        ),
    )


class TestWireFormat:

    def test_camel_case_keys(self):
        wire = _full_bundle().to_wire()
        assert set(wire) == {"version", "timestamp", "eventLog", "state", "phase", "selection"}
        assert wire["version"] == 1
        assert set(wire["state"]) == {
            "activeEditor", "openTabs", "dirtyFiles", "diagnostics",
            "breakpoints", "gitStatus", "workspaceFolders",
        }
        assert wire["eventLog"][0] == {
            "kind": "file_switch", "timestamp": 1, "fromUri": None,
            "toUri": "file:///a.py", "toLanguageId": "python",
        }
        assert wire["phase"]["recentFiles"] == ["file:///a.py"]
        assert wire["selection"]["startLine"] == 2

    def test_selection_omitted_when_absent(self):
        wire = _full_bundle(selection=False).to_wire()
        assert "selection" not in wire

    def test_missing_git_status_is_null(self):
        bundle = ContextBundle(
            timestamp="t",
            state=AmbientState(),
            phase=PhaseAssessment(phase="unknown", confidence=0, reasoning="insufficient activity"),
        )
        wire = bundle.to_wire()
        assert wire["state"]["gitStatus"] is None
        assert wire["state"]["activeEditor"] is None

    def test_round_trip(self):
        bundle = _full_bundle()
        text = json.dumps(bundle.to_wire())
        parsed = ContextBundle.model_validate_json(text)
        assert parsed == bundle
        assert type(parsed.event_log[1]) is TextChangeEvent

    def test_round_trip_without_selection(self):
        bundle = _full_bundle(selection=False)
        assert ContextBundle.model_validate(bundle.to_wire()) == bundle

    def test_event_adapter_dispatches_on_kind(self):
        event = event_adapter.validate_python({"kind": "text_change", "timestamp": 9, "uri": "u", "changeCount": 2})
        assert isinstance(event, TextChangeEvent)
        assert event.change_count == 2
