from typing import Optional


class GradingError(Exception):
    """Base class for errors surfaced by a grading session."""


class ServiceError(GradingError):
    """A call to the submission or homework service failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SubmissionLoadError(GradingError):
    pass


class GradeSaveError(GradingError):
    pass


class SaveInProgressError(GradingError):
    pass


class PreviewError(GradingError):
    pass
