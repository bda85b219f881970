"""Completion-claim guard for agent-maintained todo lists."""

__version__ = "0.1.0"
