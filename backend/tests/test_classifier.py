"""
Tests for the phase classifier.

Covers the insufficient-activity guard, each phase's rule set, tie-breaking
by declaration order, confidence bounds and recent-file extraction.
"""

import itertools

from models.event import (
    BreakpointChangeEvent,
    DebugStartEvent,
    DebugStopEvent,
    DiagnosticChangeEvent,
    FileSaveEvent,
    FileSwitchEvent,
    TerminalCommandEndEvent,
    TerminalCommandStartEvent,
    TextChangeEvent,
)
from phase.classifier import PHASE_ORDER, classify

_ts = itertools.count(1000, 100)


def switch(to_uri, from_uri=None):
    return FileSwitchEvent(timestamp=next(_ts), from_uri=from_uri, to_uri=to_uri, to_language_id="python")


def edit(uri="file:///a.py", count=1):
    return TextChangeEvent(timestamp=next(_ts), uri=uri, change_count=count)


def save(uri="file:///a.py"):
    return FileSaveEvent(timestamp=next(_ts), uri=uri, language_id="python")


def command(line, terminal="zsh"):
    return TerminalCommandStartEvent(timestamp=next(_ts), command_line=line, terminal_name=terminal)


def debug_start(name="Launch"):
    return DebugStartEvent(timestamp=next(_ts), session_name=name, session_type="python")


def debug_stop(name="Launch"):
    return DebugStopEvent(timestamp=next(_ts), session_name=name, session_type="python")


def breakpoints(added=1):
    return BreakpointChangeEvent(timestamp=next(_ts), added=added)


def diagnostics(errors=1, warnings=0):
    return DiagnosticChangeEvent(timestamp=next(_ts), uris=["file:///a.py"], total_errors=errors, total_warnings=warnings)


# ── Insufficient activity ─────────────────────────────────────────────────


class TestInsufficientActivity:

    def test_empty(self):
        result = classify([])
        assert result.phase == "unknown"
        assert result.confidence == 0
        assert result.reasoning == "insufficient activity"
        assert result.recent_files == []

    def test_two_events(self):
        result = classify([switch("file:///a.py"), switch("file:///b.py")])
        assert result.phase == "unknown"
        assert result.confidence == 0
        assert result.recent_files == []

    def test_three_unscored_events_are_unknown(self):
        events = [save(), save(), TerminalCommandEndEvent(timestamp=1, command_line="ls", terminal_name="zsh")]
        result = classify(events)
        assert result.phase == "unknown"
        assert result.confidence == 0


# ── Individual phases ─────────────────────────────────────────────────────


class TestExploring:

    def test_many_switches_across_distinct_files(self):
        uris = [f"file:///src/m{i}.py" for i in range(5)]
        events = [switch(u) for u in uris]
        result = classify(events)
        assert result.phase == "exploring"
        assert result.confidence > 0
        assert "5 switches" in result.reasoning

    def test_full_confidence_when_both_rules_fire(self):
        events = [switch(f"file:///m{i}.py") for i in range(4)]
        result = classify(events)
        assert result.phase == "exploring"
        assert result.confidence == 1.0


class TestIterating:

    def test_edits_save_and_npm_test(self):
        events = [edit(), edit(), save(), command("npm test")]
        result = classify(events)
        assert result.phase == "iterating"
        assert result.confidence == 1.0

    def test_pytest_is_case_insensitive(self):
        events = [edit(), command("PYTEST -q tests/"), save()]
        assert classify(events).phase == "iterating"

    def test_test_command_without_edits_does_not_count(self):
        events = [command("pytest"), save(), save()]
        assert classify(events).phase == "unknown"

    def test_substring_is_not_a_test_command(self):
        # "latest" contains "test" but not as a word
        events = [edit(), command("pip install latest"), diagnostics()]
        assert classify(events).phase == "unknown"


class TestBuilding:

    def test_edits_and_saves_on_one_file(self):
        events = [edit(), edit(), edit(), save(), save()]
        result = classify(events)
        assert result.phase == "building"
        assert result.confidence == 1.0
        assert result.recent_files == ["file:///a.py"]

    def test_sustained_edits_only(self):
        events = [edit("file:///a.py"), edit("file:///b.py"), edit("file:///a.py")]
        result = classify(events)
        assert result.phase == "building"
        assert result.confidence == 0.6


class TestDebugging:

    def test_open_session_with_breakpoint(self):
        events = [debug_start(), breakpoints(), switch("file:///a.py")]
        result = classify(events)
        assert result.phase == "debugging"
        assert result.confidence == 1.0

    def test_lone_stop_never_debugging(self):
        events = [debug_stop(), switch("file:///a.py"), edit(), edit(), edit()]
        assert classify(events).phase != "debugging"

    def test_finished_session_keeps_baseline(self):
        events = [debug_start(), debug_stop(), save()]
        result = classify(events)
        assert result.phase == "debugging"
        assert result.confidence == 0.2


class TestArchaeology:

    def test_git_log_while_browsing(self):
        events = [
            command("git log --oneline"),
            switch("file:///a.py"),
            switch("file:///b.py", "file:///a.py"),
            switch("file:///c.py", "file:///b.py"),
        ]
        result = classify(events)
        assert result.phase == "archaeology"
        assert "git history" in result.reasoning

    def test_git_blame_mixed_case(self):
        events = [command("Git Blame src/x.py"), save(), save()]
        assert classify(events).phase == "archaeology"

    def test_git_commit_is_not_history(self):
        events = [command("git commit -m wip"), save(), save()]
        assert classify(events).phase == "unknown"


# ── Tie-breaking and bounds ───────────────────────────────────────────────


class TestTieBreaking:

    def test_earlier_phase_wins_tie(self):
        # iterating: edits+save (+2) and 2 diagnostic changes (+1) = 3
        # building: 3 edits with no switches (+3) = 3
        events = [edit(), edit(), edit(), save(), diagnostics(), diagnostics()]
        result = classify(events)
        assert result.phase == "iterating"

    def test_phase_order(self):
        assert PHASE_ORDER == ("exploring", "iterating", "building", "debugging", "archaeology")


class TestConfidenceBounds:

    def test_confidence_within_unit_interval_for_mixed_windows(self):
        pools = [
            [switch(f"file:///{i}.py") for i in range(6)],
            [edit() for _ in range(6)],
            [save(), save(), save()],
            [command("cargo test"), command("git diff HEAD~1")],
            [debug_start(), debug_start(), breakpoints()],
            [diagnostics(), diagnostics()],
        ]
        for r in range(1, len(pools) + 1):
            for combo in itertools.combinations(pools, r):
                events = [e for pool in combo for e in pool]
                result = classify(events)
                assert 0.0 <= result.confidence <= 1.0
                assert result.confidence == round(result.confidence, 2)


class TestRecentFiles:

    def test_first_seen_order_both_switch_endpoints(self):
        events = [
            switch("file:///b.py", "file:///a.py"),
            edit("file:///c.py"),
            switch("file:///a.py", "file:///b.py"),
        ]
        result = classify(events)
        assert result.recent_files == ["file:///a.py", "file:///b.py", "file:///c.py"]

    def test_truncated_to_five(self):
        events = [switch(f"file:///{i}.py") for i in range(8)]
        result = classify(events)
        assert len(result.recent_files) == 5
        assert result.recent_files[0] == "file:///0.py"

    def test_null_switch_endpoints_skipped(self):
        events = [switch(None, "file:///a.py"), switch("file:///b.py"), save()]
        assert classify(events).recent_files == ["file:///a.py", "file:///b.py"]
