# filesearch/core/discovery/pattern_matching.py
from pathlib import Path
from typing import Iterable, Sequence

from filesearch.config.settings import ScanConfig

def normalize_extension(ext: str) -> str:
    # trims, lower-cases and dot-prefixes an extension: "TXT", ".txt" and " txt " -> ".txt".
    normalized = ext.strip().lower()
    if normalized and not normalized.startswith("."):
        normalized = "." + normalized
    return normalized

def matches_filename(path: Path, included_filenames: Sequence[str]) -> bool:
    # an empty filter matches everything; otherwise compare stems case-insensitively.
    if not included_filenames:
        return True
    stem = path.stem.lower()
    return any(name.lower() == stem for name in included_filenames)

def matches_extension(path: Path, included_extensions: Sequence[str]) -> bool:
    # an empty filter matches everything; an extensionless file never matches a non-empty one.
    if not included_extensions:
        return True
    if not path.suffix:
        return False
    file_ext = normalize_extension(path.suffix)
    return any(normalize_extension(ext) == file_ext for ext in included_extensions)

def passes_filters(path: Path, config: ScanConfig) -> bool:
    return (
        matches_filename(path, config.included_filenames)
        and matches_extension(path, config.included_extensions)
    )

def is_excluded_directory(directory: Path, excluded_dirs: Iterable[Path]) -> bool:
    # true when the directory or any ancestor up to the filesystem root is an excluded dir.
    # both sides are expected to be canonical.
    excluded = set(excluded_dirs)
    if not excluded:
        return False
    if directory in excluded:
        return True
    return any(ancestor in excluded for ancestor in directory.parents)
