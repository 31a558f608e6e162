"""Custom exceptions for critline."""


class CritlineError(Exception):
    """Base exception for all critline errors."""

    pass


class ValidationError(CritlineError):
    """Raised when a task snapshot fails validation."""

    pass


class CircularDependencyError(ValidationError):
    """Raised when a circular dependency is detected.

    The engine itself reports cycles in its result; this is raised only when a
    caller asks for exception-style handling via ``EngineResult.raise_for_cycles``.
    """

    def __init__(self, message: str, cycles: list[list[str]] | None = None):
        super().__init__(message)
        self.cycles = cycles or []


class ParseError(CritlineError):
    """Raised when a task snapshot file cannot be parsed."""

    pass


class ConfigError(CritlineError):
    """Raised when a configuration file is invalid."""

    pass
