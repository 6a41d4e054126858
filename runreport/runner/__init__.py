"""Task runners."""

from .base import MockTaskRunner, TaskRunner
from .targets import TargetsRunner

__all__ = ["MockTaskRunner", "TargetsRunner", "TaskRunner"]
