"""Run a task graph, store its outputs and report the outcome to Teams."""

__version__ = "0.1.0"
