"""Launching the user's editor on a scratch file."""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class EditorStatus(Enum):
    """How an editor session ended."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class EditorResult:
    """Outcome of a blocking editor session."""
    status: EditorStatus
    returncode: Optional[int] = None  # Negative when killed by a signal

    @property
    def ok(self) -> bool:
        return self.status is EditorStatus.SUCCESS


# Signature of anything that can stand in for launch_editor (tests, GUIs)
EditorLauncher = Callable[[str, Path], EditorResult]


def launch_editor(command: str, path: Path) -> EditorResult:
    """Run the editor on path and block until it exits.

    The command may carry its own arguments ("code --wait"); the path is
    appended last. Output is not captured so the editor owns the terminal.
    """
    try:
        words = shlex.split(command)
    except ValueError as e:
        logger.warning("Could not parse editor command %r: %s", command, e)
        return EditorResult(EditorStatus.FAILED, None)
    if not words:
        logger.warning("Editor command is blank")
        return EditorResult(EditorStatus.FAILED, None)

    argv = words + [str(path)]
    logger.debug("Launching editor: %s", argv)
    try:
        completed = subprocess.run(argv)
    except (FileNotFoundError, PermissionError) as e:
        logger.warning("Could not start editor %r: %s", command, e)
        return EditorResult(EditorStatus.FAILED, None)

    if completed.returncode == 0:
        return EditorResult(EditorStatus.SUCCESS, 0)
    logger.debug("Editor exited with status %s", completed.returncode)
    return EditorResult(EditorStatus.FAILED, completed.returncode)
