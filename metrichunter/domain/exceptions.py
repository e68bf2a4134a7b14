"""Exceptions raised by the metrics pipeline."""
from typing import Optional


class MetricHunterError(Exception):
    """Base exception for all metric hunter errors."""
    pass


class ConfigurationError(MetricHunterError):
    """Raised when required input or configuration is missing."""
    pass


class EmptySelectionError(ConfigurationError):
    """Raised when a batch operation is started without repositories."""

    def __init__(self, message: str = "No repositories selected"):
        super().__init__(message)


class ReportLoadError(MetricHunterError):
    """Raised when an analysis report is missing or is not valid XML."""

    def __init__(self, message: str, report_path: Optional[str] = None):
        super().__init__(message)
        self.report_path = report_path


class CloneError(MetricHunterError):
    """Raised when a repository could not be cloned."""

    def __init__(self, message: str, repo_url: Optional[str] = None, exit_code: Optional[int] = None):
        super().__init__(message)
        self.repo_url = repo_url
        self.exit_code = exit_code
