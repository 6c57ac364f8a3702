"""Registry entry descriptor for cljs tasks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Type


@dataclass(frozen=True)
class TaskEntry:
    """Immutable descriptor for a registered task."""

    name: str
    target: Type[Any]
    needs: tuple[str, ...] = ()
    origin: str = "builtin"

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("name cannot be empty.")
        if any(ch.isspace() for ch in self.name):
            raise ValueError("name may not contain whitespace.")
        if not isinstance(self.target, type):
            raise TypeError("target must be a class type.")
        object.__setattr__(self, "needs", tuple(self.needs))

    @classmethod
    def from_class(cls, target: Type[Any], *, origin: str = "builtin") -> "TaskEntry":
        metadata = getattr(target, "__cljs_task__", None)
        if metadata is None:
            raise TypeError(f"{target.__name__} is not decorated with @cljstask")
        return cls(
            name=str(metadata["name"]),
            target=target,
            needs=tuple(metadata.get("needs", ())),
            origin=origin,
        )
