"""
Phase classifier: a deterministic rule set over an event window.

Each phase accumulates an integer score from independent, additive rules;
one event may feed several phases. Scores are evaluated in PHASE_ORDER and
the first phase holding the strictly highest score wins, so earlier phases
win ties. If nothing scores, the phase is "unknown".

Rules:
  exploring    +3  >=4 file switches and <=1 text change
               +2  >=3 distinct resources and no text changes
  iterating    +2  >=2 text changes and >=1 save
               +3  a test/build command ran and >=1 text change
               +1  >=2 diagnostic changes
  building     +3  >=3 text changes and <=2 file switches
               +2  >=2 saves, >=2 text changes and <=1 file switch
  debugging    +4  more debug starts than stops (a session is still open)
               +2  >=1 breakpoint change
               +1  >=1 debug start
  archaeology  +3  a git history command ran (blame/log/diff/show/annotate)
               +2  >=3 file switches, no text changes and a history command

confidence = min(1, best / 5), rounded to 2 places.
"""

import re

from models.bundle import Phase, PhaseAssessment
from models.event import Event
from phase.reasoning import build_reasoning

MIN_EVENTS = 3
FULL_CONFIDENCE_SCORE = 5
MAX_RECENT_FILES = 5

PHASE_ORDER: tuple[Phase, ...] = ("exploring", "iterating", "building", "debugging", "archaeology")

TEST_COMMAND_RE = re.compile(
    r"\b(test|jest|mocha|pytest|cargo\s+test|npm\s+test|npm\s+run\s+test)\b",
    re.IGNORECASE,
)
GIT_HISTORY_RE = re.compile(r"\bgit\s+(blame|log|diff|show|annotate)\b", re.IGNORECASE)


# ---------- Window helpers ----------

def _events_of(events: list[Event], kind: str) -> list[Event]:
    return [e for e in events if e.kind == kind]


def _touched_resources(events: list[Event]) -> list[str]:
    """Distinct resources from switches (both ends) and edits, first-seen order."""
    seen: dict[str, None] = {}
    for e in events:
        if e.kind == "file_switch":
            for uri in (e.from_uri, e.to_uri):
                if uri:
                    seen.setdefault(uri, None)
        elif e.kind == "text_change":
            seen.setdefault(e.uri, None)
    return list(seen)


# ---------- Scoring ----------

def _score_phases(events: list[Event], resources: list[str]) -> dict[Phase, int]:
    switches = len(_events_of(events, "file_switch"))
    edits = len(_events_of(events, "text_change"))
    saves = len(_events_of(events, "file_save"))
    debug_starts = len(_events_of(events, "debug_start"))
    debug_stops = len(_events_of(events, "debug_stop"))
    diag_changes = len(_events_of(events, "diagnostic_change"))
    bp_changes = len(_events_of(events, "breakpoint_change"))
    commands = [e.command_line for e in _events_of(events, "terminal_command_start")]

    ran_tests = any(TEST_COMMAND_RE.search(c) for c in commands)
    ran_history = any(GIT_HISTORY_RE.search(c) for c in commands)

    scores: dict[Phase, int] = {phase: 0 for phase in PHASE_ORDER}

    # exploring: lots of navigation, little editing
    if switches >= 4 and edits <= 1:
        scores["exploring"] += 3
    if len(resources) >= 3 and edits == 0:
        scores["exploring"] += 2

    # iterating: edit / save / run tests loop
    if edits >= 2 and saves >= 1:
        scores["iterating"] += 2
    if ran_tests and edits >= 1:
        scores["iterating"] += 3
    if diag_changes >= 2:
        scores["iterating"] += 1

    # building: sustained edits on few files
    if edits >= 3 and switches <= 2:
        scores["building"] += 3
    if saves >= 2 and edits >= 2 and switches <= 1:
        scores["building"] += 2

    # debugging: open session, breakpoints
    if debug_starts > debug_stops:
        scores["debugging"] += 4
    if bp_changes >= 1:
        scores["debugging"] += 2
    if debug_starts >= 1:
        scores["debugging"] += 1

    # archaeology: reading history
    if ran_history:
        scores["archaeology"] += 3
    if switches >= 3 and edits == 0 and ran_history:
        scores["archaeology"] += 2

    return scores


def _pick_winner(scores: dict[Phase, int]) -> tuple[Phase, int]:
    best_phase: Phase = "unknown"
    best_score = 0
    for phase in PHASE_ORDER:
        if scores[phase] > best_score:
            best_phase = phase
            best_score = scores[phase]
    return best_phase, best_score


# ---------- Public entry point ----------

def classify(events: list[Event]) -> PhaseAssessment:
    """Infer the current work phase from an ordered event window."""
    if len(events) < MIN_EVENTS:
        return PhaseAssessment(
            phase="unknown",
            confidence=0.0,
            reasoning="insufficient activity",
            recent_files=[],
        )

    resources = _touched_resources(events)
    scores = _score_phases(events, resources)
    phase, best = _pick_winner(scores)

    confidence = round(min(1.0, best / FULL_CONFIDENCE_SCORE), 2)
    reasoning = build_reasoning(
        phase,
        resource_count=len(resources),
        edit_count=len(_events_of(events, "text_change")),
        switch_count=len(_events_of(events, "file_switch")),
        event_count=len(events),
    )

    return PhaseAssessment(
        phase=phase,
        confidence=confidence,
        reasoning=reasoning,
        recent_files=resources[:MAX_RECENT_FILES],
    )
