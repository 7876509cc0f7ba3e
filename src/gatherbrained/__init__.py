"""gatherbrained - a flat-file idea store for telling stories.

Entries live in one text file separated by lines of dashes:

    Alpha #tag1
    ----
    Beta Gamma #tag2

Search by AND-matched keywords, edit what a search selects in $EDITOR, and
narrate a story from a file whose every line is a search.
"""

from .config import GatherConfig, config_from_environment, load_config
from .engine import (
    EditorFailedError,
    EditorNotConfiguredError,
    Gatherbrained,
    GatherError,
    GatherIOError,
    TempfileExistsError,
)
from .models import generate, matches, parse

__version__ = "0.1.0"

__all__ = [
    "EditorFailedError",
    "EditorNotConfiguredError",
    "GatherConfig",
    "GatherError",
    "GatherIOError",
    "Gatherbrained",
    "TempfileExistsError",
    "config_from_environment",
    "generate",
    "load_config",
    "matches",
    "parse",
]
