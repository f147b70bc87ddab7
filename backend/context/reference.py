"""
Code references for the active editor.

``build_code_reference`` produces the structured ``code.reference`` payload
sent to an endpoint; ``build_markdown_reference`` produces a paste-ready
markdown link plus fenced snippet for a chat prompt.
"""

from typing import Any, Optional
from urllib.parse import unquote, urlparse

from capture.clock import iso_from_ms, now_ms
from models.host import HostEditor


class NoActiveEditorError(Exception):
    """Raised when an operation needs an active editor and there is none."""


def _require_editor(editor: Optional[HostEditor]) -> HostEditor:
    if editor is None:
        raise NoActiveEditorError("No active editor")
    return editor


def _fs_path(uri: str) -> str:
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return unquote(parsed.path)
    return uri


def relative_path(uri: str, workspace_folders: list[str]) -> str:
    """Path of ``uri`` relative to the first workspace folder containing it."""
    path = _fs_path(uri)
    for folder in workspace_folders:
        root = _fs_path(folder).rstrip("/")
        if root and path.startswith(root + "/"):
            return path[len(root) + 1:]
    return path


def build_code_reference(editor: Optional[HostEditor], now: Optional[int] = None) -> dict[str, Any]:
    editor = _require_editor(editor)
    sel = editor.selection
    return {
        "type": "code.reference",
        "sender": "vscode",
        "payload": {
            "fileUri": editor.uri,
            "startLine": sel.start.line + 1,
            "endLine": sel.end.line + 1,
            "snippet": "" if sel.is_empty else editor.selection_text,
            "languageId": editor.language_id,
            "selectionKind": "cursor" if sel.is_empty else "selection",
            "timestamp": iso_from_ms(now if now is not None else now_ms()),
        },
    }


def build_markdown_reference(editor: Optional[HostEditor], workspace_folders: list[str]) -> str:
    editor = _require_editor(editor)
    sel = editor.selection
    start = sel.start.line + 1
    end = sel.end.line + 1
    name = relative_path(editor.uri, workspace_folders)
    snippet = editor.cursor_line_text if sel.is_empty else editor.selection_text

    if sel.is_empty or start == end:
        link = f"[{name}:{start}]({name}#L{start})"
    else:
        link = f"[{name}:{start}-{end}]({name}#L{start}-L{end})"
    return f"Reference: {link}\n```{editor.language_id}\n{snippet}\n```"
