class PipelineError(Exception):
    """Base class for pipeline exceptions."""

class ExtractionError(PipelineError):
    """Raised when one document cannot be turned into a valid record."""
    def __init__(self, file_name: str, message: str):
        super().__init__(f"{file_name}: {message}")
        self.file_name = file_name
        self.reason = message

class InterrogationError(PipelineError):
    """Raised when a question cannot be answered by the reasoning service."""

class ValidationError(PipelineError):
    """Raised when validation fails; include details in message."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}

class BatchInProgressError(PipelineError):
    """Raised when a batch is submitted while another one is still running."""
