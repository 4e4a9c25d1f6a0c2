class ConfigurationError(ValueError):
    """Raised when memoizer options are invalid."""
