"""
Directory traversal and filtering for filesearch.

Walks a root directory depth-first, prunes excluded directories, and
collects canonical paths of files matching the filename/extension filters.
"""
from .walker import DirectoryScanner, ScanOutcome

__all__ = ["DirectoryScanner", "ScanOutcome"]
