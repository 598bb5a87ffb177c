"""Custom exceptions raised while resolving configuration."""

class ConfigurationError(Exception):
    """Base class for every configuration resolution failure."""
    pass

class SourceMissingError(ConfigurationError):
    """Raised when resolve() is called with no configuration source registered."""
    pass

class FileParseError(ConfigurationError):
    """Raised when a data file cannot be parsed. Recovered by the loader (logged, file skipped)."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Config {path} invalid: {reason}")
        self.path = path
        self.reason = reason

class ModuleEvaluationError(ConfigurationError):
    """Raised when a scripted config module fails to evaluate."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Config module {path} failed to load: {reason}")
        self.path = path
        self.reason = reason

class ConfigureHookError(ConfigurationError):
    """Raised when a section's configure hook fails."""

    def __init__(self, section: str, reason: str):
        super().__init__(f"configure() of section '{section}' failed: {reason}")
        self.section = section
        self.reason = reason
