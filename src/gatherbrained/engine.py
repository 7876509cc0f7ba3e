"""Core gatherbrained store - load, search, editor-driven add/edit, narratives."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence

from .config import GatherConfig
from .editor import EditorLauncher, EditorResult, launch_editor
from .models import DELIMITER, generate, matches, parse, read_narrative, tmpfile_for

logger = logging.getLogger(__name__)


class GatherError(Exception):
    """Base exception for gatherbrained operations."""
    pass


class GatherIOError(GatherError):
    """Raised when a gatherbrained, scratch or narrative file cannot be read or written."""

    def __init__(self, path: Path, what: Exception):
        self.path = path
        self.what = what
        reason = getattr(what, "strerror", None) or what
        super().__init__(f"{path}: {reason}")


class EditorNotConfiguredError(GatherError):
    """Raised when add/edit is attempted without an editor command."""

    def __init__(self) -> None:
        super().__init__("No editor configured. Set the EDITOR environment variable.")


class EditorFailedError(GatherError):
    """Raised when the editor exits unsuccessfully; nothing is changed."""

    def __init__(self, result: EditorResult):
        self.returncode = result.returncode
        if result.returncode is None:
            message = "Editor could not be started"
        elif result.returncode < 0:
            message = f"Editor killed by signal {-result.returncode}"
        else:
            message = f"Editor exited with status {result.returncode}"
        super().__init__(message)


class TempfileExistsError(GatherError):
    """Raised when a previous editing session left its scratch file behind."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(
            f"Temp file already exists: {path} (another edit in progress? remove it to continue)"
        )


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise GatherIOError(path, e) from e


def _write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise GatherIOError(path, e) from e


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove scratch file %s: %s", path, e)


class Gatherbrained:
    """An ordered corpus of entries bound to one backing file."""

    def __init__(self, path: Path | str):
        """Read and parse the gatherbrained file at path.

        Raises:
            GatherIOError: If the file cannot be read.
        """
        self.path = Path(path)
        self._entries: list[str] = parse(_read_text(self.path))
        logger.debug("Loaded %d entries from %s", len(self._entries), self.path)

    @classmethod
    def load(cls, path: Path | str) -> "Gatherbrained":
        """Load the gatherbrained file at path."""
        return cls(path)

    @property
    def entries(self) -> tuple[str, ...]:
        """Current entries in file order."""
        return tuple(self._entries)

    @property
    def tmpfile(self) -> Path:
        return tmpfile_for(self.path)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Gatherbrained({str(self.path)!r}, entries={len(self._entries)})"

    # ========== Search ==========

    def select(self, needles: Sequence[str]) -> list[str]:
        """Entries containing every needle (case-insensitive), in file order."""
        return [entry for entry in self._entries if matches(entry, needles)]

    def search(self, needles: Sequence[str]) -> str:
        """Search for entries matching all needles.

        Returns:
            The selected entries in valid gatherbrained format.
        """
        return generate(self.select(needles))

    # ========== Persistence ==========

    def save(self) -> None:
        """Overwrite the backing file with the current entries."""
        self._persist(self._entries)

    def _persist(self, entries: list[str]) -> None:
        # Memory is only updated after the write succeeds
        _write_text(self.path, generate(entries))
        self._entries = entries
        logger.debug("Saved %d entries to %s", len(entries), self.path)

    # ========== Editor Operations ==========

    def _require_editor(self, config: GatherConfig) -> str:
        if not config.editor:
            raise EditorNotConfiguredError()
        return config.editor

    def _check_tmpfile(self) -> Path:
        tmpfile = self.tmpfile
        if tmpfile.exists():
            raise TempfileExistsError(tmpfile)
        return tmpfile

    def add(
        self,
        config: GatherConfig,
        launcher: Optional[EditorLauncher] = None,
    ) -> int:
        """Add entries written in the editor to the end of the gatherbrained.

        Returns:
            Number of entries added.

        Raises:
            EditorNotConfiguredError: If config carries no editor.
            TempfileExistsError: If the scratch file is already present.
            EditorFailedError: If the editor exits unsuccessfully.
            GatherIOError: If the scratch or backing file cannot be read/written.
        """
        editor = self._require_editor(config)
        tmpfile = self._check_tmpfile()
        launcher = launcher or launch_editor

        result = launcher(editor, tmpfile)
        if not result.ok:
            _remove_quietly(tmpfile)
            raise EditorFailedError(result)

        if not tmpfile.exists():
            logger.debug("Editor left no scratch file, nothing to add")
            return 0

        try:
            new = parse(_read_text(tmpfile))
            if new:
                self._persist(self._entries + new)
        finally:
            _remove_quietly(tmpfile)

        logger.debug("Added %d entries", len(new))
        return len(new)

    def edit(
        self,
        needles: Sequence[str],
        config: GatherConfig,
        launcher: Optional[EditorLauncher] = None,
    ) -> tuple[int, int]:
        """Edit all entries matching all needles in the editor.

        The matched entries are replaced by whatever the editor session
        produces (possibly nothing) and placed after the untouched entries.

        Returns:
            Tuple of (entries removed, entries written back).

        Raises:
            EditorNotConfiguredError: If config carries no editor.
            TempfileExistsError: If the scratch file is already present.
            EditorFailedError: If the editor exits unsuccessfully.
            GatherIOError: If the scratch or backing file cannot be read/written.
        """
        to_edit = []
        to_keep = []
        for entry in self._entries:
            if matches(entry, needles):
                to_edit.append(entry)
            else:
                to_keep.append(entry)

        editor = self._require_editor(config)
        tmpfile = self.tmpfile
        try:
            with open(tmpfile, "x", encoding="utf-8") as f:
                f.write(generate(to_edit))
        except FileExistsError:
            raise TempfileExistsError(tmpfile) from None
        except OSError as e:
            # The file was created by this call
            _remove_quietly(tmpfile)
            raise GatherIOError(tmpfile, e) from e

        launcher = launcher or launch_editor
        result = launcher(editor, tmpfile)
        if not result.ok:
            _remove_quietly(tmpfile)
            raise EditorFailedError(result)

        try:
            new = parse(_read_text(tmpfile))
            self._persist(to_keep + new)
        finally:
            _remove_quietly(tmpfile)

        logger.debug("Edited %d entries into %d", len(to_edit), len(new))
        return len(to_edit), len(new)

    # ========== Narratives ==========

    def _queries(self, narratives: Iterable[Path | str]) -> Iterable[list[str]]:
        for narrative in narratives:
            try:
                queries = read_narrative(narrative)
            except (OSError, UnicodeDecodeError) as e:
                raise GatherIOError(Path(narrative), e) from e
            yield from queries

    def narrate(self, narratives: Iterable[Path | str]) -> str:
        """Narrate the gatherbrained.

        Every non-blank line of every narrative is a search; the non-empty
        results (arcs) are joined in order into one valid gatherbrained.

        Raises:
            GatherIOError: If any narrative cannot be read.
        """
        output = ""
        for needles in self._queries(narratives):
            arc = self.search(needles).strip()
            if not arc:
                continue
            if output:
                output += DELIMITER + "\n"
            output += arc + "\n"
        return output

    def missing(self, narratives: Iterable[Path | str]) -> str:
        """Entries not matched by any line of any narrative.

        Entries with identical text are indistinguishable here: matching one
        removes them all.

        Raises:
            GatherIOError: If any narrative cannot be read.
        """
        remaining = set(self._entries)
        for needles in self._queries(narratives):
            remaining = {entry for entry in remaining if not matches(entry, needles)}
        return generate(entry for entry in self._entries if entry in remaining)
