"""
Source-control status from the git CLI.

The capability (is there a git binary, is the path inside a work tree) is
resolved once on first use and cached for the life of the process. Any
failure along the way yields None rather than an exception.
"""

import asyncio
import logging
import os
import re
import shutil
import subprocess
from typing import Optional

from models.state import GitStatus

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 10

_BRANCH_RE = re.compile(
    r"^## (?P<head>.+?)(?:\.\.\.(?P<upstream>\S+))?(?: \[(?P<track>[^\]]+)\])?$"
)


def parse_porcelain(output: str) -> GitStatus:
    """Parse ``git status --porcelain=v1 --branch`` output."""
    branch = "detached"
    ahead = behind = 0
    staged: list[str] = []
    modified: list[str] = []
    untracked: list[str] = []

    for line in output.splitlines():
        if line.startswith("## "):
            m = _BRANCH_RE.match(line)
            if not m:
                continue
            head = m.group("head")
            if head.startswith("HEAD (no branch)"):
                branch = "detached"
            elif head.startswith("No commits yet on "):
                branch = head[len("No commits yet on "):]
            elif head.startswith("Initial commit on "):
                branch = head[len("Initial commit on "):]
            else:
                branch = head
            for part in (m.group("track") or "").split(","):
                part = part.strip()
                if part.startswith("ahead "):
                    ahead = int(part[len("ahead "):])
                elif part.startswith("behind "):
                    behind = int(part[len("behind "):])
            continue

        if len(line) < 4:
            continue
        x, y, path = line[0], line[1], line[3:]
        if " -> " in path:
            path = path.split(" -> ", 1)[1]
        if x == "?" and y == "?":
            untracked.append(path)
            modified.append(path)
            continue
        if x not in (" ", "?"):
            staged.append(path)
        if y != " ":
            modified.append(path)

    return GitStatus(
        branch=branch,
        ahead=ahead,
        behind=behind,
        staged=staged,
        modified=modified,
        untracked=untracked,
    )


class GitStatusProvider:
    def __init__(self, repo_path: Optional[str] = None):
        self.repo_path = repo_path or os.getcwd()
        self._available: Optional[bool] = None      # None until resolved

    @property
    def capability(self) -> str:
        if self._available is None:
            return "unresolved"
        return "available" if self._available else "unavailable"

    def _run_git(self, *args: str) -> subprocess.CompletedProcess:
        return subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
            cwd=self.repo_path,
        )

    def _resolve_sync(self) -> bool:
        if shutil.which("git") is None:
            logger.info("git_status: git binary not found, source-control status disabled")
            return False
        if not os.path.isdir(self.repo_path):
            logger.info("git_status: %s is not a directory, source-control status disabled", self.repo_path)
            return False
        try:
            result = self._run_git("rev-parse", "--is-inside-work-tree")
        except (OSError, subprocess.SubprocessError):
            logger.warning("git_status: capability check failed", exc_info=True)
            return False
        ok = result.returncode == 0 and result.stdout.strip() == "true"
        if not ok:
            logger.info("git_status: %s is not a git work tree", self.repo_path)
        return ok

    async def resolve(self) -> bool:
        if self._available is None:
            self._available = await asyncio.to_thread(self._resolve_sync)
        return self._available

    def _status_sync(self) -> Optional[GitStatus]:
        result = self._run_git("status", "--porcelain=v1", "--branch")
        if result.returncode != 0:
            logger.warning("git_status: git status exited %d: %s", result.returncode, result.stderr.strip())
            return None
        return parse_porcelain(result.stdout)

    async def status(self) -> Optional[GitStatus]:
        if not await self.resolve():
            return None
        try:
            return await asyncio.to_thread(self._status_sync)
        except (OSError, subprocess.SubprocessError, ValueError):
            logger.warning("git_status: failed to read status", exc_info=True)
            return None
