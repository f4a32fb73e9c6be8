from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple
import structlog

log = structlog.get_logger(__name__)

class OutputFormat(Enum):
    # defines how the discovered file list is rendered.
    PLAIN = "plain"
    BRACKETED = "bracketed"
    JSON = "json"

    @classmethod
    def from_string(cls, s: Optional[str]) -> "OutputFormat":
        if not s:
            return DEFAULT_OUTPUT_FORMAT
        try:
            return cls(s.lower())
        except ValueError:
            log.warning("invalid_output_format_string", input_string=s)
            return DEFAULT_OUTPUT_FORMAT

DEFAULT_OUTPUT_FORMAT = OutputFormat.PLAIN
DEFAULT_CONSOLE_SHOW_SUMMARY = False

@dataclass(frozen=True)
class ScanConfig:
    # traversal settings for a single run. values are kept as given;
    # normalization and resolution happen at traversal time.
    root: Optional[Path] = None
    included_filenames: Tuple[str, ...] = ()
    included_extensions: Tuple[str, ...] = ()
    excluded_dirs: Tuple[Path, ...] = ()

@dataclass
class RunOptions:
    # everything the cli needs for one invocation: scan settings plus output behaviour.
    root: Optional[Path] = None
    included_filenames: Tuple[str, ...] = ()
    included_extensions: Tuple[str, ...] = ()
    excluded_dirs: Tuple[Path, ...] = ()
    output_format: OutputFormat = DEFAULT_OUTPUT_FORMAT
    output_file: Optional[Path] = None
    console_show_summary: bool = DEFAULT_CONSOLE_SHOW_SUMMARY
    save_profile_name: Optional[str] = field(default=None, compare=False)

    def to_scan_config(self) -> ScanConfig:
        return ScanConfig(
            root=self.root,
            included_filenames=tuple(self.included_filenames),
            included_extensions=tuple(self.included_extensions),
            excluded_dirs=tuple(Path(p) for p in self.excluded_dirs),
        )
