class TabTreeError(Exception):
    """Base exception for tabtree failures."""


class ConfigurationError(TabTreeError):
    """Raised when options cannot be resolved against the input (bad mode, unknown column, ...)."""


class SourceNotFound(TabTreeError, FileNotFoundError):
    """Raised when the input source cannot be opened."""


class PipelineError(TabTreeError):
    """Raised when the pipeline fails for an unexpected reason."""
