import sys
import pytest
from pathlib import Path
from typing import Iterable, List, Set

from filesearch.config import loader


def create_project_structure(base_path: Path, files_to_create: dict):
    """
    Creates a directory structure with files.
    files_to_create = {"dir/file.py": "content", "another.txt": "text"}
    """
    for rel_path, content in files_to_create.items():
        file_path = base_path / rel_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content or f"content of {rel_path}")


def relative_names(files: Iterable[Path], root: Path) -> Set[str]:
    # canonical results -> posix paths relative to the (resolved) root, for order-free comparison.
    resolved_root = root.resolve()
    return {p.relative_to(resolved_root).as_posix() for p in files}


def sorted_paths(files: Iterable[Path]) -> List[Path]:
    return sorted(files, key=str)


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path_factory, monkeypatch):
    """Keeps a developer's ~/.config/filesearch/config.toml out of the tests."""
    user_dir = tmp_path_factory.mktemp("user_config")
    monkeypatch.setattr(loader, "USER_CONFIG_DIR", user_dir)
    monkeypatch.setattr(loader, "USER_CONFIG_FILE", user_dir / "config.toml")
    return user_dir / "config.toml"


@pytest.fixture
def abc_tree(tmp_path: Path) -> Path:
    """root with a.txt, a.md and b.txt."""
    root = tmp_path / "abc"
    root.mkdir()
    create_project_structure(root, {"a.txt": "a", "a.md": "a", "b.txt": "b"})
    return root


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """A small tree with nested directories, mixed extensions and a directory to exclude."""
    root = tmp_path / "sample_project"
    root.mkdir()
    create_project_structure(root, {
        "README.md": "# readme",
        "Makefile": "all:",
        "keep/f1.txt": "one",
        "keep/deep/notes.TXT": "upper-case extension",
        "skip/f2.txt": "two",
        "skip/nested/f3.txt": "three",
        "src/main.py": "print('main')",
        "src/util.py": "def util(): pass",
        "src/archive.tar.gz": "binary-ish",
    })
    return root


def pytest_sessionfinish(session, exitstatus):
    # test_nesting_deeper_than_recursion_limit leaves a tree deeper than the default
    # recursion limit; pytest's recursive tmp-dir cleanup needs more headroom after the run.
    sys.setrecursionlimit(max(sys.getrecursionlimit(), 10000))
