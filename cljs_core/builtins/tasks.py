"""Built-in tasks backed by the ClojureScript compiler API scripts."""

from __future__ import annotations

import argparse
import asyncio
from argparse import ArgumentParser, Namespace

from cljs_core.api import CljsAbstractTask, cljstask
from cljs_core.deps import JARS_KEY
from cljs_core.paths import script_path
from cljs_core.watch import WatchSupervisor


class _ScriptTask(CljsAbstractTask):
    """Runs one of the bundled scripts on the JVM and waits for it."""

    script = ""

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument("build_id", nargs="?", help="Build from the builds map")
        parser.add_argument("args", nargs=argparse.REMAINDER, help="Arguments for the script")

    async def run(self, args: Namespace) -> int:
        child = await self.app.dispatcher.run_managed_task(
            script_path(self.script),
            build_id=args.build_id,
            args=args.args,
        )
        return await child.wait()


@cljstask(name="build", needs=("cljs", "figwheel"))
class BuildTask(_ScriptTask):
    """Compile a build once."""

    script = "build"


@cljstask(name="repl", needs=("cljs",))
class ReplTask(_ScriptTask):
    """Start a ClojureScript REPL for a build."""

    script = "repl"


@cljstask(name="figwheel", needs=("cljs", "figwheel"))
class FigwheelTask(_ScriptTask):
    """Run Figwheel Sidecar for a build."""

    script = "figwheel"


@cljstask(name="watch", needs=("cljs", "figwheel"))
class WatchTask(_ScriptTask):
    """Recompile a build on source changes; restarts when its config changes."""

    script = "watch"

    async def run(self, args: Namespace) -> int:
        supervisor = WatchSupervisor(
            self.app.store,
            self.app.dispatcher,
            script_path(self.script),
            prepare=self.app.prepare_watch_cycle,
        )
        await supervisor.run(args.build_id)
        return 0


@cljstask(name="install", needs=())
class InstallTask(CljsAbstractTask):
    """Resolve and download the dependencies declared in the config."""

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument("args", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)

    async def run(self, args: Namespace) -> int:
        self.app.store.require()
        cache = await asyncio.to_thread(self.app.deps.resolve)
        if cache is None:
            print("[cljs:install] dependency resolution failed")
            return 1
        print(f"[cljs:install] resolved {len(cache[JARS_KEY])} jar(s) into {self.app.deps.path}")
        return 0
