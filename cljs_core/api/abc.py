"""Abstract base classes for cljs tasks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import ArgumentParser, Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cljs_core.app import CljsApp


class CljsAbstractTask(ABC):
    """Base interface for tasks invoked as ``cljs <task> [build-id] [args...]``."""

    def __init__(self, app: "CljsApp") -> None:
        self.app = app

    @classmethod
    @abstractmethod
    def configure(cls, parser: ArgumentParser) -> None:
        """Let the task configure CLI arguments."""

    @abstractmethod
    async def run(self, args: Namespace) -> int:
        """Execute the task with parsed arguments."""
