"""Classpath assembly for JVM and Lumo invocations."""

from __future__ import annotations

import sys
from typing import Iterable, Sequence

from .config import Config, ConfigStore
from .deps import JARS_KEY, DependencyCache
from .errors import DependencyResolutionError
from .runtime.jars import ToolchainJars


def path_separator(platform: str | None = None) -> str:
    platform = sys.platform if platform is None else platform
    return ";" if platform.startswith("win") else ":"


def all_sources(config: Config | None) -> list[str]:
    """Whenever it is ambiguous which source directory to use, use them all."""

    if config is None:
        return []
    sources: list[str] = []
    for build in config.builds.values():
        sources.extend(build.src)
    return sources


class ClasspathBuilder:
    def __init__(
        self,
        store: ConfigStore,
        deps: DependencyCache,
        jars: ToolchainJars,
        *,
        platform: str | None = None,
    ) -> None:
        self.store = store
        self.deps = deps
        self.jars = jars
        self.platform = platform

    def entries(self, src: str | Sequence[str] | None = None, *, jvm: bool = False) -> list[str]:
        cache = self.deps.query()
        if cache is None:
            raise DependencyResolutionError(
                "Unable to resolve dependencies; see the retriever output above."
            )
        entries: list[str] = []
        if jvm:
            config = self.store.require()
            entries.extend(str(p) for p in self.jars.paths(config.cljs_version, config.figwheel_version))
        entries.extend(cache[JARS_KEY])
        entries.extend(_as_list(src))
        return entries

    def build(self, src: str | Sequence[str] | None = None, *, jvm: bool = False) -> str:
        """Create the separator-joined string of dependency paths."""

        return path_separator(self.platform).join(self.entries(src, jvm=jvm))


def _as_list(src: str | Iterable[str] | None) -> list[str]:
    if src is None:
        return []
    if isinstance(src, str):
        return [src]
    return [str(item) for item in src]
