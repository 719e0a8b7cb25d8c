"""Root test configuration: isolated environment and an in-memory remote workspace"""

from pathlib import Path

import pytest

from mdnotion.config import Settings


class FakeWorkspace:
    """Records page creation and block pushes instead of calling the API."""

    def __init__(self):
        self.pages: dict[str, tuple[str, str, str | None]] = {}  # id -> (parent_id, title, emoji)
        self.pushed: dict[str, list] = {}
        self._next = 0

    def create_page(self, parent_id, title, emoji=None):
        self._next += 1
        page_id = f"page-{self._next}"
        self.pages[page_id] = (parent_id, title, emoji)
        return page_id

    def append_blocks(self, target_id, request):
        self.pushed.setdefault(target_id, []).extend(request.children)

    def page_id(self, title: str) -> str:
        matches = [pid for pid, (_, t, _) in self.pages.items() if t == title]
        assert len(matches) == 1, f"expected one page titled {title!r}, got {matches}"
        return matches[0]


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep a developer's config.yaml and MDNOTION_* variables out of every test."""
    for name in Settings.model_fields:
        monkeypatch.delenv(f"MDNOTION_{name.upper()}", raising=False)
    monkeypatch.setenv("MDNOTION_CONFIG", str(tmp_path / "missing-config.yaml"))


@pytest.fixture(name="workspace")
def workspace_fixture():
    return FakeWorkspace()


@pytest.fixture(name="write_tree")
def write_tree_fixture(tmp_path):
    """Write {relative path: markdown} into tmp_path/docs and return that directory."""
    def _write(files: dict[str, str]) -> Path:
        root = tmp_path / "docs"
        for rel, text in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return root
    return _write
