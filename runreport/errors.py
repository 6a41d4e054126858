"""Structured error types for pipeline runs."""

from typing import Iterable, Optional


class RunReportError(Exception):
    """Base error for all run operations."""
    pass


class JoinCardinalityError(RunReportError):
    """Raised when a task name is not unique in one side of the report join."""

    def __init__(self, side: str, duplicates: Iterable[str]):
        self.side = side
        self.duplicates = sorted(set(duplicates))
        super().__init__(
            f"Task names must be unique in {side}: duplicated {', '.join(self.duplicates)}"
        )


class TaskRunnerError(RunReportError):
    """Raised by a task runner when one of its commands fails."""

    def __init__(self, command: str, message: str):
        self.command = command
        super().__init__(message)


class TaskExecutionError(RunReportError):
    """Raised to the caller after a failed run has been reported."""
    pass


class NotifyError(RunReportError):
    """Raised when a webhook rejects a notification."""

    def __init__(self, status_code: Optional[int], response_body: str):
        self.status_code = status_code
        self.response_body = response_body
        status = status_code if status_code is not None else "no response"
        super().__init__(f"Notification failed ({status}): {response_body}")


class UploadError(RunReportError):
    """Raised when an artifact cannot be stored."""

    def __init__(self, destination: str, message: str):
        self.destination = destination
        super().__init__(f"Could not store '{destination}': {message}")
