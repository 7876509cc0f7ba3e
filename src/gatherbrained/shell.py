"""Interactive gatherbrained shell."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, Optional, TextIO

# readline is unavailable on some platforms; the shell still works without history
try:
    import readline
except ImportError:  # pragma: no cover
    readline = None

from .config import GatherConfig
from .editor import EditorLauncher
from .engine import Gatherbrained, GatherError
from .models import history_for, split_needles

logger = logging.getLogger(__name__)


HELP = """
gatherbrained is a tool for telling stories.

Collect ideas in a gatherbrained file with add, edit and search.  Keep one
concrete thought per entry, roughly a paragraph.  Then write a narrative: a
second file in which every line is a search against the gatherbrained.  Each
line becomes one arc of the story, a set of related ideas.

Reorder the story by shuffling lines of the narrative.  Rework it by editing
the entries a search selects.  The two together let you refactor a story.

help .... display this help menu
add ..... add entries to the gatherbrained file
edit .... edit the entries matching a search in $EDITOR
search .. print the entries matching every search term
narrate . print the story laid out by one or more narrative files
missing . print the entries no narrative line selects
quit .... leave the shell (also exit, or Ctrl-D)
"""

COMMAND_HELP = {
    "add": """
Add entries to the gatherbrained.

An editor is opened on an empty scratch file.  When it exits successfully the
file is parsed and every entry in it is appended to the gatherbrained.  Put a
line of dashes between entries to add several at once.  Tags are plain words
such as #taoism; they are found by search like any other text:

    Under heaven all can see beauty as beauty only because there is ugliness.
    All can know good as good only because there is evil.

    #taoteching #taoism
""",
    "edit": """
Edit every entry matching all of the search terms.

The selected entries are written to a scratch file and opened in $EDITOR.
When the editor exits successfully they are replaced by whatever the file
then contains, placed after the entries that were not selected.  Deleting an
entry from the file deletes it from the gatherbrained.  If the editor fails,
nothing changes.
""",
    "search": """
Search the gatherbrained.

Prints every entry containing all of the search terms, ignoring case, as a
valid gatherbrained.
""",
    "narrate": """
Narrate a story from the gatherbrained.

Every non-blank line of the narrative file(s) is run as a search.  The results
are printed in order as a valid gatherbrained, one arc per line.
""",
    "missing": """
Print the entries no narrative uses.

Takes narrative file(s) like narrate, but prints the entries that no line of
any narrative selects.
""",
}


class ShellHistory:
    """Line history persisted next to the gatherbrained file."""

    def __init__(self, path: Path, config: GatherConfig):
        self.path = path
        self.config = config

    @property
    def available(self) -> bool:
        return readline is not None

    def load(self) -> None:
        if not self.available:
            return
        readline.set_history_length(self.config.history_size)
        if self.config.vi_mode:
            readline.parse_and_bind("set editing-mode vi")
        if self.path.exists():
            readline.read_history_file(str(self.path))

    def save(self) -> None:
        if not self.available:
            return
        try:
            readline.write_history_file(str(self.path))
        except OSError as e:
            logger.warning("Could not save history to %s: %s", self.path, e)

    def length(self) -> int:
        """Number of lines currently held by readline."""
        if not self.available:
            return 0
        return readline.get_current_history_length()

    def filter_last(self, line: str, before: Optional[int] = None) -> None:
        """Drop the line input() just recorded if it should not be kept.

        input() only records lines read from a terminal, so nothing is
        removed unless the history grew since ``before`` and its newest item
        is ``line``.
        """
        if not self.available or not line:
            return
        length = readline.get_current_history_length()
        if length == 0 or (before is not None and length <= before):
            return
        # get_history_item is 1-based
        if readline.get_history_item(length) != line:
            return
        drop = False
        if self.config.history_ignore_space and line.startswith(" "):
            drop = True
        elif self.config.history_ignore_dups and length > 1:
            drop = readline.get_history_item(length - 1) == line
        if drop:
            # remove_history_item is 0-based
            readline.remove_history_item(length - 1)


class GatherShell:
    """Read-eval loop over a single gatherbrained."""

    def __init__(
        self,
        store: Gatherbrained,
        config: GatherConfig,
        launcher: Optional[EditorLauncher] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        self.store = store
        self.config = config
        self.launcher = launcher
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        self.history = ShellHistory(history_for(store.path), config)
        self._commands: dict[str, Callable[[list[str]], None]] = {
            "add": self.do_add,
            "edit": self.do_edit,
            "search": self.do_search,
            "narrate": self.do_narrate,
            "missing": self.do_missing,
            "help": self.do_help,
        }

    def _out(self, text: str) -> None:
        print(text, file=self.stdout)

    def _err(self, text: str) -> None:
        print(text, file=self.stderr)

    # ========== Commands ==========

    def do_add(self, args: list[str]) -> None:
        added = self.store.add(self.config, launcher=self.launcher)
        if added:
            self._err(f"added {added} {'entry' if added == 1 else 'entries'}")

    def do_edit(self, args: list[str]) -> None:
        removed, written = self.store.edit(args, self.config, launcher=self.launcher)
        self._err(f"replaced {removed} with {written}")

    def do_search(self, args: list[str]) -> None:
        self._out(self.store.search(args))

    def do_narrate(self, args: list[str]) -> None:
        self._out(self.store.narrate(args))

    def do_missing(self, args: list[str]) -> None:
        self._out(self.store.missing(args))

    def do_help(self, args: list[str]) -> None:
        if not args:
            self._err(HELP)
            return
        for topic in args:
            if topic in COMMAND_HELP:
                self._err(COMMAND_HELP[topic])
            else:
                self._err(f"unknown command: {topic}")

    # ========== Dispatch ==========

    @property
    def commands(self) -> tuple[str, ...]:
        return tuple(self._commands)

    def run_command(self, name: str, args: list[str]) -> None:
        """Run a known command, letting GatherError propagate."""
        self._commands[name](args)

    def execute(self, line: str) -> bool:
        """Run one command line.

        Returns:
            False when the user asked to leave, True otherwise.
        """
        words = split_needles(line)
        if not words:
            return True

        name, args = words[0], words[1:]
        if name in ("quit", "exit"):
            return False

        if name not in self._commands:
            self._err(f"unknown command: {name}\nhere's the help menu instead\n")
            self.do_help([])
            return True

        try:
            self.run_command(name, args)
        except GatherError as e:
            self._err(f"error: {e}")
        return True

    def run(self) -> None:
        """Loop until EOF or quit, saving history on the way out."""
        self.history.load()
        try:
            while True:
                try:
                    before = self.history.length()
                    line = input(self.config.prompt)
                except KeyboardInterrupt:
                    # Discard the current line
                    self.stdout.write("\n")
                    continue
                except EOFError:
                    self.stdout.write("\n")
                    break
                self.history.filter_last(line, before)
                if not self.execute(line):
                    break
        finally:
            self.history.save()
