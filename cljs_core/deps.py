"""Dependency resolution cache.

Resolving dependencies means starting a JVM, so the resulting list of jars
is cached alongside the dependency config it was resolved for. The cache is
reused for as long as that dependency config is unchanged.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Any, Callable, Protocol, Sequence

from .config import DEP_KEYS, ConfigStore
from .edn import dependency_vectors, dumps
from .paths import ToolHome

logger = logging.getLogger(__name__)

CACHE_FILE_NAME = ".deps-cache.json"
JARS_KEY = "jars"


class CommandRunner(Protocol):
    """Injectable synchronous process runner."""

    def __call__(self, command: Sequence[str]) -> subprocess.CompletedProcess[bytes]: ...


def run_retriever(command: Sequence[str]) -> subprocess.CompletedProcess[bytes]:
    # stderr stays attached to the terminal so retriever diagnostics reach the user
    return subprocess.run(list(command), check=False, stdout=subprocess.PIPE, stderr=None)


def read_cache(path: Path) -> dict[str, Any] | None:
    if not path.exists():
        return None
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.debug("ignoring unreadable dependency cache %s", path)
        return None
    if not isinstance(payload, dict) or not isinstance(payload.get(JARS_KEY), list):
        return None
    return payload


def write_cache(path: Path, payload: dict[str, Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=path.name, suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, ensure_ascii=False, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path


class DependencyCache:
    """Resolves declared dependencies into jar paths, caching the result."""

    def __init__(
        self,
        store: ConfigStore,
        home: ToolHome,
        java: Callable[[], str],
        *,
        path: Path | str = CACHE_FILE_NAME,
        runner: CommandRunner | None = None,
    ) -> None:
        self.store = store
        self.home = home
        self.java = java
        self.path = Path(path)
        self.runner = runner or run_retriever

    def query(self) -> dict[str, Any] | None:
        """Return the cache record for the current config, resolving if stale."""

        config = self.store.require()
        cache = read_cache(self.path)
        if cache is not None and _dep_subset(cache) == config.dependency_subset():
            logger.debug("dependency cache hit (%d jars)", len(cache[JARS_KEY]))
            return cache
        logger.debug("dependency cache miss; resolving")
        return self.resolve()

    def resolve(self) -> dict[str, Any] | None:
        """Run the dependency retriever and persist its jar list."""

        config = self.store.require()
        deps = [*config.dependencies, *config.dev_dependencies]
        if not deps:
            cache = {**config.dependency_subset(), JARS_KEY: []}
            write_cache(self.path, cache)
            return cache
        command = [self.java(), "-jar", str(self.home.dep_retriever), dumps(dependency_vectors(deps))]
        logger.debug("resolving dependencies: %s", command)
        try:
            result = self.runner(command)
        except OSError as exc:
            print(f"[cljs:deps] dependency retriever could not start: {exc}", file=sys.stderr)
            return None
        if result.returncode != 0:
            print(f"[cljs:deps] dependency retriever exited with status {result.returncode}", file=sys.stderr)
            return None

        output = result.stdout.decode("utf-8") if isinstance(result.stdout, bytes) else (result.stdout or "")
        jars = [line.strip() for line in output.splitlines() if line.strip()]
        cache = {**config.dependency_subset(), JARS_KEY: jars}
        write_cache(self.path, cache)
        return cache


def _dep_subset(record: dict[str, Any]) -> dict[str, Any]:
    return {key: record[key] for key in DEP_KEYS if key in record}
