"""Run notifications."""

from .teams import ACCEPTED_STATUS_CODES, NotifyResult, TeamsNotifier

__all__ = ["ACCEPTED_STATUS_CODES", "NotifyResult", "TeamsNotifier"]
