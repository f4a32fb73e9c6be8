__version__ = "0.1.0"

from filesearch.core.discovery import DirectoryScanner, ScanOutcome
from filesearch.config.settings import ScanConfig

__all__ = ["__version__", "DirectoryScanner", "ScanOutcome", "ScanConfig"]
