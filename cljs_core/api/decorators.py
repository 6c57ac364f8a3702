"""Decorator that marks task classes with registry metadata."""

from __future__ import annotations

from typing import Any, Callable, Type

from .abc import CljsAbstractTask

_TaskCandidate = Type[Any]


def _attach_task_metadata(cls: type, *, name: str | None, needs: tuple[str, ...]) -> type:
    if not isinstance(cls, type):
        raise TypeError("Decorated object must be a class.")
    metadata = {
        "kind": "task",
        "name": name or cls.__name__.lower(),
        "needs": needs,
    }
    setattr(cls, "__cljs_task__", metadata)
    return cls


def cljstask(
    cls: _TaskCandidate | None = None,
    *,
    name: str | None = None,
    needs: tuple[str, ...] = ("cljs",),
) -> Callable[[_TaskCandidate], _TaskCandidate] | _TaskCandidate:
    """Register metadata for a task; ``needs`` lists the jars it requires."""

    def wrap(target: _TaskCandidate) -> _TaskCandidate:
        if not issubclass(target, CljsAbstractTask):
            raise TypeError(
                f"{target.__name__} must subclass {CljsAbstractTask.__name__} to be registered as task."
            )
        return _attach_task_metadata(target, name=name, needs=needs)

    if cls is None:
        return wrap
    return wrap(cls)
