import os
from pathlib import Path
from typing import Iterable, List, Optional, Tuple
import structlog

from filesearch.config.settings import ScanConfig

log = structlog.get_logger(__name__)

# exceptions that mean "this path cannot be resolved/read right now".
# RuntimeError covers symlink loops on interpreters that raise it from resolve().
INACCESSIBLE_ERRORS: Tuple[type, ...] = (OSError, RuntimeError)

def canonicalize(path: Path) -> Path:
    # returns the absolute, symlink-free form of an existing path; raises if it cannot.
    return Path(path).resolve(strict=True)

def resolve_root(config: ScanConfig) -> Path:
    # the configured root as given, or the process cwd when unset.
    if config.root is not None:
        return Path(config.root)
    return Path(os.getcwd())

def resolve_excluded_dirs(excluded_dirs: Iterable[Path]) -> List[Path]:
    # canonicalizes configured exclusions. a missing exclusion can never match, so it is dropped.
    configured = list(excluded_dirs)
    resolved: List[Path] = []
    for raw_dir in configured:
        try:
            canonical = canonicalize(Path(raw_dir))
        except INACCESSIBLE_ERRORS as e:
            log.debug("excluded_dir_unresolvable_ignored", path=str(raw_dir), error=str(e))
            continue
        if canonical not in resolved:
            resolved.append(canonical)
    log.debug("excluded_dirs_resolved", configured=len(configured), resolved=len(resolved))
    return resolved

def try_canonicalize(path: Path) -> Tuple[Optional[Path], Optional[BaseException]]:
    # canonicalize without raising: (path, None) on success, (None, error) on failure.
    try:
        return canonicalize(path), None
    except INACCESSIBLE_ERRORS as e:
        return None, e
