class FileSearchError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(FileSearchError):
    # errors related to configuration files and profiles.
    pass

class OutputError(FileSearchError):
    # errors during output operations.
    pass
