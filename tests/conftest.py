"""Shared test fixtures."""

import pytest

from clozemark.models import RenderResult


class RecordingRenderer:
    """Renders payloads as <mode>payload</mode> and records every call."""

    def __init__(self):
        self.calls = []

    def render(self, payload, display_mode):
        self.calls.append((payload, display_mode))
        return f"<{display_mode}>{payload}</{display_mode}>"


class FailingRenderer(RecordingRenderer):
    """Raises for payloads in `bad`, renders everything else."""

    def __init__(self, bad):
        super().__init__()
        self.bad = set(bad)

    def render(self, payload, display_mode):
        if payload in self.bad:
            self.calls.append((payload, display_mode))
            raise RuntimeError(f"cannot render {payload}")
        return super().render(payload, display_mode)


class ErrResultRenderer:
    def render(self, payload, display_mode):
        return RenderResult(error=f"rejected {payload}")


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def clozemark_dir(tmp_path, monkeypatch):
    """Temporary clozemark directory, selected through CLOZEMARK_DIR."""
    d = tmp_path / "clozemark_dir"
    d.mkdir()
    monkeypatch.setenv("CLOZEMARK_DIR", str(d))
    return d


@pytest.fixture
def notes_dir(tmp_path):
    """A directory tree with one cloze note, one plain note, and a nested note."""
    notes = tmp_path / "notes"
    (notes / "bio").mkdir(parents=True)
    (notes / "geo.md").write_text(
        "---\ncard_type: cloze\ntags: [geo]\n---\n"
        "The capital of {{c1::France}} is {{c2::Paris}}.\n")
    (notes / "readme.md").write_text("# Just a readme\nNo frontmatter.\n")
    (notes / "bio" / "cell.md").write_text(
        "---\ncard_type: cloze\n---\n"
        "The {{c1::mitochondria}} is the {{c1::powerhouse}} of the {{c2::cell}}.\n")
    return notes
