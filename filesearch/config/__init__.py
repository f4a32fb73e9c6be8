from .settings import ScanConfig, RunOptions, OutputFormat

__all__ = ["ScanConfig", "RunOptions", "OutputFormat"]
