"""
Prints summary information to the console (stderr) after a search.
"""
from pathlib import Path
from typing import Optional

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.table import Table
import structlog

from filesearch.core.discovery.walker import ScanOutcome

log = structlog.get_logger(__name__)

def print_cli_summary_output(outcome: ScanOutcome, root: Path, console: Optional[RichConsole] = None):
    """
    Prints matched/inaccessible/pruned counts to stderr so an empty result
    from an unreadable tree is distinguishable from one where nothing matched.
    """
    log.debug("console_summary_output_requested")
    console = console if console is not None else RichConsole(stderr=True)

    table = Table(title=f"Search summary: {escape(str(root))}", show_header=False)
    table.add_column("metric", style="cyan")
    table.add_column("value", justify="right")
    table.add_row("Files matched", str(len(outcome.files)))
    table.add_row("Inaccessible paths", str(outcome.inaccessible_count))
    table.add_row("Excluded directories pruned", str(len(outcome.pruned)))
    console.print(table)

    if outcome.inaccessible:
        console.print("[yellow]Inaccessible:[/yellow]")
        for path in outcome.inaccessible:
            console.print(f"  {path}", markup=False, highlight=False)
