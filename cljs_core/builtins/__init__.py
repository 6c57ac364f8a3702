"""Helpers for registering the built-in cljs tasks."""

from __future__ import annotations

from typing import Sequence

from cljs_core.registry import TaskEntry, TaskRegistry

from .tasks import BuildTask, FigwheelTask, InstallTask, ReplTask, WatchTask

__all__ = ["register_builtin_tasks"]

_BUILTIN_TASKS: Sequence[type] = (
    BuildTask,
    WatchTask,
    ReplTask,
    FigwheelTask,
    InstallTask,
)


def register_builtin_tasks(registry: TaskRegistry) -> None:
    """Register the built-in task classes with the supplied registry."""

    for task in _BUILTIN_TASKS:
        registry.register(TaskEntry.from_class(task, origin="builtin"))
