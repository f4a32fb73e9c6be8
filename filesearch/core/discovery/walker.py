# filesearch/core/discovery/walker.py
import dataclasses
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Set
import structlog

from filesearch.config.settings import ScanConfig
from filesearch.core.discovery.path_resolution import (
    INACCESSIBLE_ERRORS,
    resolve_excluded_dirs,
    resolve_root,
    try_canonicalize,
)
from filesearch.core.discovery.pattern_matching import is_excluded_directory, passes_filters

log = structlog.get_logger(__name__)

InaccessibleReporter = Callable[[Path, BaseException], None]

def log_inaccessible_path(path: Path, error: BaseException) -> None:
    # default diagnostic sink.
    log.warning("path_inaccessible", path=str(path), error=str(error))

@dataclass
class ScanOutcome:
    """Result of one traversal.

    ``files`` is the insertion-ordered, duplicate-free list of canonical file
    paths. ``inaccessible`` lists every path that could not be resolved or
    read, so an empty ``files`` can be told apart from an unreadable tree.
    ``pruned`` lists canonical directories skipped because they are excluded.
    """
    files: List[Path] = field(default_factory=list)
    inaccessible: List[Path] = field(default_factory=list)
    pruned: List[Path] = field(default_factory=list)

    @property
    def inaccessible_count(self) -> int:
        return len(self.inaccessible)


class DirectoryScanner:
    """Depth-first search for files under a root directory.

    Configure with the ``set_*`` methods, then call :meth:`search_files` (or
    :meth:`scan` for the structured outcome). Every call is independent: the
    visited-directory set and the result accumulator live only for the
    duration of that call.

    Directories are walked pre-order, following the platform's native
    enumeration order at each level. An explicit stack of pending listings
    replaces recursion, so nesting depth is not bounded by the interpreter's
    recursion limit.
    """

    def __init__(self, config: Optional[ScanConfig] = None, reporter: Optional[InaccessibleReporter] = None):
        self._config = config if config is not None else ScanConfig()
        self._reporter = reporter if reporter is not None else log_inaccessible_path

    @property
    def config(self) -> ScanConfig:
        return self._config

    def set_root(self, path) -> None:
        # stored verbatim; a bad root only surfaces as an inaccessible path at scan time.
        self._config = dataclasses.replace(self._config, root=Path(path))

    def set_included_filenames(self, names: Iterable[str]) -> None:
        self._config = dataclasses.replace(self._config, included_filenames=tuple(names))

    def set_included_extensions(self, extensions: Iterable[str]) -> None:
        self._config = dataclasses.replace(self._config, included_extensions=tuple(extensions))

    def set_excluded_dirs(self, paths: Iterable) -> None:
        self._config = dataclasses.replace(self._config, excluded_dirs=tuple(Path(p) for p in paths))

    def search_files(self) -> List[Path]:
        return self.scan().files

    def scan(self) -> ScanOutcome:
        config = self._config
        outcome = ScanOutcome()
        visited: Set[Path] = set()
        seen_files: Set[Path] = set()

        root = resolve_root(config)
        excluded = resolve_excluded_dirs(config.excluded_dirs)
        log.debug(
            "scan_started",
            root=str(root),
            filenames=list(config.included_filenames),
            extensions=list(config.included_extensions),
            excluded_dirs=[str(d) for d in excluded],
        )

        stack: List[Iterator[Path]] = []
        root_listing = self._enter_directory(root, excluded, visited, outcome)
        if root_listing is not None:
            stack.append(iter(root_listing))

        while stack:
            entry_path = next(stack[-1], None)
            if entry_path is None:
                stack.pop()
                continue

            canonical = self._canonical_or_report(entry_path, outcome)
            if canonical is None:
                continue

            if canonical.is_file():
                if canonical not in seen_files and passes_filters(canonical, config):
                    seen_files.add(canonical)
                    outcome.files.append(canonical)
            elif canonical.is_dir():
                listing = self._enter_directory(canonical, excluded, visited, outcome)
                if listing is not None:
                    stack.append(iter(listing))
            # sockets, fifos, devices: not results, not errors.

        log.debug(
            "scan_complete",
            root=str(root),
            files=len(outcome.files),
            inaccessible=outcome.inaccessible_count,
            pruned=len(outcome.pruned),
            directories_visited=len(visited),
        )
        return outcome

    def _report(self, path: Path, error: BaseException, outcome: ScanOutcome) -> None:
        outcome.inaccessible.append(path)
        self._reporter(path, error)

    def _canonical_or_report(self, path: Path, outcome: ScanOutcome) -> Optional[Path]:
        canonical, error = try_canonicalize(path)
        if canonical is None:
            self._report(path, error, outcome)
        return canonical

    def _enter_directory(
        self,
        directory: Path,
        excluded: List[Path],
        visited: Set[Path],
        outcome: ScanOutcome,
    ) -> Optional[List[Path]]:
        # returns the directory's entries, or None when it is inaccessible, excluded or already visited.
        canonical = self._canonical_or_report(directory, outcome)
        if canonical is None:
            return None

        if is_excluded_directory(canonical, excluded):
            log.debug("directory_pruned_excluded", path=str(canonical))
            outcome.pruned.append(canonical)
            return None

        if canonical in visited:
            log.debug("directory_already_visited", path=str(canonical))
            return None
        visited.add(canonical)

        try:
            with os.scandir(canonical) as entries:
                return [Path(entry.path) for entry in entries]
        except INACCESSIBLE_ERRORS as e:
            self._report(canonical, e, outcome)
            return None
