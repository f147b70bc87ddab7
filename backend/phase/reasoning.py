"""
Template reasoning for phase assessments.

One sentence per phase; every template names the resource, edit and switch
counts so the reader can see what the score was built from.
"""

from models.bundle import Phase


def build_reasoning(
    phase: Phase,
    resource_count: int,
    edit_count: int,
    switch_count: int,
    event_count: int,
) -> str:
    if phase == "exploring":
        return (
            f"Navigated across {resource_count} files with {switch_count} switches "
            f"and minimal edits ({edit_count})"
        )
    if phase == "iterating":
        return (
            f"Making edits ({edit_count}) and running tests/builds across {resource_count} files "
            f"with {switch_count} switches"
        )
    if phase == "building":
        return (
            f"Actively writing code with {edit_count} edit bursts, focused on {resource_count} files "
            f"({switch_count} switches)"
        )
    if phase == "debugging":
        return (
            f"Debug session active with breakpoint activity across {resource_count} files "
            f"({edit_count} edits, {switch_count} switches)"
        )
    if phase == "archaeology":
        return (
            f"Browsing git history and navigating {resource_count} files with {switch_count} switches "
            f"and {edit_count} edits"
        )
    return (
        f"Activity pattern unclear ({event_count} events, {resource_count} files, "
        f"{edit_count} edits, {switch_count} switches)"
    )
