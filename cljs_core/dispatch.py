"""Maps CLI tasks onto JVM (clojure.main) or Lumo child processes."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Any, Callable, Sequence

from .classpath import ClasspathBuilder, all_sources
from .config import DEP_KEYS, BuildSpec, ConfigStore
from .edn import Keyword, dependency_vectors, dumps, keywordize
from .errors import AmbiguousBuildError, BuildNotFoundError, NoBuildsError, SpawnError

logger = logging.getLogger(__name__)

LUMO_ENV = "CLJS_LUMO"

Spawner = Callable[..., Any]


def default_lumo_path() -> str:
    return os.environ.get(LUMO_ENV) or shutil.which("lumo") or "lumo"


def edn_config(data: Any) -> Any:
    """Render config data as EDN-ready values (keyword keys, symbol deps)."""

    if not isinstance(data, dict):
        return keywordize(data)
    converted = keywordize(data)
    for key in DEP_KEYS:
        if data.get(key) is not None:
            converted[Keyword(key)] = dependency_vectors(data[key])
    if isinstance(data.get("id"), str):
        converted[Keyword("id")] = Keyword(data["id"])
    if isinstance(data.get("builds"), dict):
        converted[Keyword("builds")] = {
            Keyword(str(k)): edn_config(v) for k, v in data["builds"].items()
        }
    return converted


def onload_form(config: dict[str, Any] | None, build: dict[str, Any] | None) -> str:
    return (
        "(do "
        f"(def ^:dynamic *cljs-config* (quote {dumps(edn_config(config))})) "
        f"(def ^:dynamic *build-config* (quote {dumps(edn_config(build))})) "
        "nil)"
    )


class TaskDispatcher:
    """Resolves builds and spawns the processes that do the actual work."""

    def __init__(
        self,
        store: ConfigStore,
        classpath: ClasspathBuilder,
        java: Callable[[], str],
        *,
        lumo_path: str | None = None,
        spawn: Spawner | None = None,
        run: Callable[..., subprocess.CompletedProcess[Any]] | None = None,
    ) -> None:
        self.store = store
        self.classpath = classpath
        self.java = java
        self.lumo_path = lumo_path or default_lumo_path()
        self._spawn = spawn or asyncio.create_subprocess_exec
        self._run = run or subprocess.run

    def resolve_build(self, build_id: str | None) -> BuildSpec:
        """Return the build named ``build_id``, implying it when only one exists."""

        config = self.store.require()
        if not config.builds:
            raise NoBuildsError("No builds were found in the builds map!")
        if build_id is None:
            if len(config.builds) > 1:
                raise AmbiguousBuildError(list(config.builds))
            return next(iter(config.builds.values()))
        build = config.builds.get(build_id)
        if build is None:
            raise BuildNotFoundError(f"Unrecognized build: '{build_id}' is not found in builds map")
        return build

    def managed_args(
        self,
        script_path: Path | str,
        *,
        build_id: str | None = None,
        args: Sequence[str] = (),
    ) -> list[str]:
        config = self.store.require()
        build = self.resolve_build(build_id)
        src: Sequence[str] = build.src or all_sources(config)
        cp = self.classpath.build(src, jvm=True)
        onload = onload_form(config.to_dict(), build.to_dict())
        return ["-cp", cp, "clojure.main", "-e", onload, str(script_path), *args]

    async def run_managed_task(
        self,
        script_path: Path | str,
        *,
        build_id: str | None = None,
        args: Sequence[str] = (),
    ) -> Any:
        """Spawn ``script_path`` on the JVM with the config bound; does not wait."""

        # classpath assembly may resolve dependencies on the JVM
        argv = await asyncio.to_thread(self.managed_args, script_path, build_id=build_id, args=args)
        java = self.java()
        logger.debug("spawning %s %s", java, argv[:3] + ["..."])
        try:
            return await self._spawn(java, *argv)
        except OSError as exc:
            raise SpawnError(f"unable to start {java}: {exc}") from exc

    def lumo_args(self, args: Sequence[str] | None) -> list[str]:
        """Add config-derived classpath args when calling Lumo."""

        extra: list[str] = []
        if self.store.config is not None:
            extra = ["-c", self.classpath.build(all_sources(self.store.config))]
        return [*extra, *(args or ())]

    def run_lightweight_task(self, args: Sequence[str] | None = None) -> subprocess.CompletedProcess[Any]:
        command = [self.lumo_path, *self.lumo_args(args)]
        logger.debug("running lumo: %s", command)
        try:
            return self._run(command, check=False)
        except OSError as exc:
            raise SpawnError(
                f"unable to start lumo ({self.lumo_path}): {exc}. Install it with `npm install -g lumo-cljs`."
            ) from exc
