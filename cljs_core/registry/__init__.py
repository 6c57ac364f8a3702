"""Convenience exports for the task registry."""

from .entry import TaskEntry
from .registry import TaskCollisionError, TaskRegistry

__all__ = ["TaskEntry", "TaskRegistry", "TaskCollisionError"]
