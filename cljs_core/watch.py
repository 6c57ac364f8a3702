"""Supervises the long-running watch task and restarts it on config changes."""

from __future__ import annotations

import contextlib
import logging
import signal
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable

from .config import ConfigStore
from .dispatch import TaskDispatcher

logger = logging.getLogger(__name__)

Prepare = Callable[[int], Awaitable[None]]


def interrupt(child: Any) -> None:
    """Ask a child process to stop the way Ctrl+C would."""

    sig = signal.CTRL_C_EVENT if sys.platform == "win32" else signal.SIGINT
    with contextlib.suppress(ProcessLookupError):
        child.send_signal(sig)


class WatchSupervisor:
    def __init__(
        self,
        store: ConfigStore,
        dispatcher: TaskDispatcher,
        script_path: Path | str,
        *,
        prepare: Prepare | None = None,
    ) -> None:
        self.store = store
        self.dispatcher = dispatcher
        self.script_path = script_path
        self.prepare = prepare
        self.restarts = 0

    async def run(self, build_id: str | None, *, max_cycles: int | None = None) -> None:
        """Spawn the watcher, then respawn it every time the build's config changes.

        Each cycle starts from a freshly loaded config, so dependency and
        runtime checks run again before the respawn. Runs until the process
        is terminated unless ``max_cycles`` bounds it.
        """

        cycle = 0
        while max_cycles is None or cycle < max_cycles:
            if self.prepare is not None:
                await self.prepare(cycle)
            build = self.dispatcher.resolve_build(build_id)
            child = await self.dispatcher.run_managed_task(self.script_path, build_id=build.id)
            logger.debug("watch child started for build %s (cycle %d)", build.id, cycle)

            try:
                await self.store.wait_for_relevant_change(build.id)
            finally:
                # never leave the JVM running past a failed reload or cancellation
                interrupt(child)
                await child.wait()
            self.restarts += 1
            print(f"\n[cljs:watch] Config for {build.id} has changed. Restarting to ensure they take effect...\n")
            cycle += 1
