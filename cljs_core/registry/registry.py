"""In-memory registry for cljs tasks."""

from __future__ import annotations

from ..errors import UnrecognizedTaskError
from .entry import TaskEntry


class TaskCollisionError(ValueError):
    """Raised when a task name is registered twice."""


class TaskRegistry:
    """Tracks tasks by name."""

    def __init__(self) -> None:
        self._by_name: dict[str, TaskEntry] = {}

    def register(self, entry: TaskEntry) -> None:
        if entry.name in self._by_name:
            raise TaskCollisionError(f"{entry.name} is already registered.")
        self._by_name[entry.name] = entry

    def resolve(self, name: str) -> TaskEntry:
        entry = self._by_name.get(name)
        if entry is None:
            raise UnrecognizedTaskError(f"Unrecognized task: {name}")
        return entry

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._by_name))
