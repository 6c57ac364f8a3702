"""Compiler uberjars used on the JVM classpath (AOT'd to reduce load time)."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from ..net import Downloader
from ..paths import ToolHome

logger = logging.getLogger(__name__)


def cljs_jar_url(version: str) -> str:
    return f"https://github.com/clojure/clojurescript/releases/download/r{version}/cljs.jar"


def figwheel_jar_url(version: str) -> str:
    return f"https://github.com/cljs/figwheel-sidecar/releases/download/v{version}/figwheel-sidecar.jar"


class ToolchainJars:
    """Downloads the ClojureScript and Figwheel Sidecar jars on demand."""

    def __init__(self, home: ToolHome, *, downloader: Downloader | None = None) -> None:
        self.home = home
        self.downloader = downloader or Downloader()

    def paths(self, cljs_version: str, figwheel_version: str) -> list[Path]:
        return [self.home.cljs_jar(cljs_version), self.home.figwheel_jar(figwheel_version)]

    async def ensure_cljs(self, version: str) -> Path:
        """Download the ClojureScript compiler uberjar for ``version``."""

        return await self._ensure(
            self.home.cljs_jar(version), cljs_jar_url(version), f"ClojureScript {version}"
        )

    async def ensure_figwheel(self, version: str) -> Path:
        """Download the Figwheel Sidecar uberjar for ``version``."""

        return await self._ensure(
            self.home.figwheel_jar(version),
            figwheel_jar_url(version),
            f"Figwheel Sidecar {version}",
        )

    async def _ensure(self, path: Path, url: str, label: str) -> Path:
        if path.exists():
            logger.debug("%s already present at %s", label, path)
            return path
        return await asyncio.to_thread(self.downloader.download, url, path, label=label)
