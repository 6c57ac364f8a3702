"""Application object that wires the cljs core services together."""

from __future__ import annotations

import argparse
import inspect
import logging
import os
from pathlib import Path
from typing import Any, Callable, Sequence

from .builtins import register_builtin_tasks
from .classpath import ClasspathBuilder
from .config import CONFIG_ENV, CONFIG_FILE_NAME, ConfigStore
from .deps import CACHE_FILE_NAME, CommandRunner, DependencyCache
from .dispatch import Spawner, TaskDispatcher
from .errors import UnrecognizedTaskError
from .net import Downloader
from .paths import ToolHome
from .registry import TaskEntry, TaskRegistry
from .runtime import HostFacts, RuntimeProvisioner, ToolchainJars

DEPENDENCY_RATIONALE = "Dependency resolution currently requires Java."
COMPILE_RATIONALE = "Compilation to JavaScript currently requires Java."


def print_welcome() -> None:
    """Show something immediately, since the JVM compiler can be silent while loading."""

    print()
    print("(cljs) ClojureScript starting...")
    print()


class CljsApp:
    """Entry point that glues config, provisioning, dispatch and tasks."""

    def __init__(
        self,
        *,
        workdir: Path | str | None = None,
        home: ToolHome | None = None,
        store: ConfigStore | None = None,
        host: HostFacts | None = None,
        downloader: Downloader | None = None,
        provisioner: RuntimeProvisioner | None = None,
        jars: ToolchainJars | None = None,
        retriever: CommandRunner | None = None,
        spawn: Spawner | None = None,
        run_sync: Callable[..., Any] | None = None,
        platform: str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.logger = logger or logging.getLogger("cljs_core.app")
        self.workdir = Path(workdir) if workdir is not None else Path.cwd()
        self.home = home or ToolHome.resolve()
        self.home.ensure()
        self.store = store or ConfigStore(self.workdir / _config_name())
        downloader = downloader or Downloader()
        self.runtime = provisioner or RuntimeProvisioner(self.home, host=host, downloader=downloader)
        self.jars = jars or ToolchainJars(self.home, downloader=downloader)
        self.deps = DependencyCache(
            self.store,
            self.home,
            lambda: self.runtime.java_path,
            path=self.workdir / CACHE_FILE_NAME,
            runner=retriever,
        )
        self.classpath = ClasspathBuilder(self.store, self.deps, self.jars, platform=platform)
        self.dispatcher = TaskDispatcher(
            self.store,
            self.classpath,
            lambda: self.runtime.java_path,
            spawn=spawn,
            run=run_sync,
        )
        self.tasks = TaskRegistry()
        register_builtin_tasks(self.tasks)

    async def run(self, task: str | None, args: Sequence[str] = ()) -> int:
        """Run one CLI invocation and return its exit code."""

        await self.load()

        if task is None:
            print_welcome()
            return self.dispatcher.run_lightweight_task(None).returncode

        if task.endswith(".cljs"):
            return self.dispatcher.run_lightweight_task([task, *args]).returncode

        if task == "install":
            self.store.require()
            return await self.run_task(self.tasks.resolve(task), args)

        entry = self.tasks.resolve(task) if task in self.tasks else None
        if entry is None and not task.endswith(".clj"):
            raise UnrecognizedTaskError(f"Unrecognized task: {task}")

        print_welcome()
        await self.provision(entry.needs if entry else ("cljs",))

        if entry is not None:
            return await self.run_task(entry, args)
        child = await self.dispatcher.run_managed_task(task, args=args)
        return await child.wait()

    async def load(self) -> None:
        config = self.store.load()
        if config is not None and config.dependencies:
            await self.runtime.ensure_installed(DEPENDENCY_RATIONALE)

    async def provision(self, needs: Sequence[str]) -> None:
        config = self.store.require()
        await self.jars.ensure_cljs(config.cljs_version)
        if "figwheel" in needs:
            await self.jars.ensure_figwheel(config.figwheel_version)
        await self.runtime.ensure_installed(COMPILE_RATIONALE)

    async def prepare_watch_cycle(self, cycle: int) -> None:
        """Re-run loading and provisioning before every watch restart."""

        if cycle == 0:
            return
        await self.load()
        await self.provision(self.tasks.resolve("watch").needs)

    async def run_task(self, entry: TaskEntry, args: Sequence[str]) -> int:
        parser = argparse.ArgumentParser(
            prog=f"cljs {entry.name}",
            description=inspect.getdoc(entry.target) or "",
        )
        entry.target.configure(parser)
        parsed = parser.parse_args(list(args))
        self.logger.debug("running task %s with %s", entry.name, parsed)
        return await entry.target(self).run(parsed)


def _config_name() -> str:
    return os.environ.get(CONFIG_ENV) or CONFIG_FILE_NAME
