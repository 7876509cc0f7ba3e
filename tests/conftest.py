"""Shared pytest fixtures for gatherbrained tests."""

import tempfile
from pathlib import Path

import pytest

from gatherbrained.config import GatherConfig
from gatherbrained.editor import EditorResult, EditorStatus
from gatherbrained.engine import Gatherbrained


SAMPLE = "Alpha #tag1\n----\nBeta Gamma #tag2\n"


@pytest.fixture
def temp_project():
    """Create a temporary project directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def store_path(temp_project):
    """A gatherbrained file holding two tagged entries."""
    path = temp_project / "ideas.gb"
    path.write_text(SAMPLE, encoding="utf-8")
    return path


@pytest.fixture
def store(store_path):
    """The sample gatherbrained, loaded."""
    return Gatherbrained(store_path)


@pytest.fixture
def narrative(temp_project):
    """A narrative with one line per sample tag."""
    path = temp_project / "story.txt"
    path.write_text("tag1\ntag2\n", encoding="utf-8")
    return path


@pytest.fixture
def config():
    """A config with an editor that is never actually spawned."""
    return GatherConfig(editor="fake-editor")


class FakeEditor:
    """Stands in for launch_editor, recording what it was shown."""

    def __init__(self, content=None, status=EditorStatus.SUCCESS, returncode=0):
        self.content = content
        self.status = status
        self.returncode = returncode
        self.calls = []
        self.seen = None

    def __call__(self, command, path):
        self.calls.append((command, Path(path)))
        path = Path(path)
        self.seen = path.read_text(encoding="utf-8") if path.exists() else None
        if self.content is not None:
            path.write_text(self.content, encoding="utf-8")
        return EditorResult(self.status, self.returncode)


@pytest.fixture
def fake_editor():
    """Factory for FakeEditor launchers.

    Usage:
        def test_example(store, config, fake_editor):
            editor = fake_editor("New entry\\n")
            store.add(config, launcher=editor)
    """

    def _create(content=None, status=EditorStatus.SUCCESS, returncode=0):
        return FakeEditor(content, status, returncode)

    return _create
