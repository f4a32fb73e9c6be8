import json
import sys
from pathlib import Path
from typing import Sequence
import structlog

from filesearch.config.settings import OutputFormat
from filesearch.core.discovery.walker import ScanOutcome
from filesearch.exceptions import OutputError

log = structlog.get_logger(__name__)

def format_results(outcome: ScanOutcome, output_format: OutputFormat) -> str:
    # renders the discovered files in the requested format; always newline-terminated unless empty.
    if output_format == OutputFormat.JSON:
        payload = {
            "files": [str(p) for p in outcome.files],
            "count": len(outcome.files),
            "inaccessible": [str(p) for p in outcome.inaccessible],
            "inaccessible_count": outcome.inaccessible_count,
        }
        return json.dumps(payload, indent=2) + "\n"

    lines: Sequence[str]
    if output_format == OutputFormat.BRACKETED:
        lines = [f"[{p}]" for p in outcome.files]
    else:
        lines = [str(p) for p in outcome.files]
    return "".join(f"{line}\n" for line in lines)

def write_to_stdout(text_content: str):
    # writes text to standard output.
    try:
        sys.stdout.write(text_content)
        sys.stdout.flush()
    except UnicodeEncodeError as e:
        log.warning("stdout_write_failed_trying_binary_fallback", error=str(e))
        sys.stdout.buffer.write(text_content.encode("utf-8", errors="replace"))
        sys.stdout.buffer.flush()

def write_to_file(output_file_path: Path, text_content: str):
    # writes text content to the specified file path.
    log.info("writing_output_to_file", path=str(output_file_path))
    try:
        output_file_path.write_text(text_content, encoding="utf-8")
    except OSError as e:
        raise OutputError(f"failed to write to file '{output_file_path}': {e}")
