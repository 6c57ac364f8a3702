"""Java runtime detection and auto-installation.

Java is required to run the ClojureScript compiler and the dependency
retriever. When no working ``java`` is on the PATH, a JRE is downloaded and
unpacked into the tool home; the resulting binary path then replaces the
default ``java`` command for the rest of the process.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import platform as _platform
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from ..archive import child_dirs, extract_targz
from ..errors import RuntimeNotFoundError, UnsupportedPlatformError
from ..net import Downloader
from ..paths import ToolHome

logger = logging.getLogger(__name__)

# version and url info from:
# http://www.oracle.com/technetwork/java/javase/downloads/jre8-downloads-2133155.html
JAVA_VERSION = "8u131"
JAVA_BUILD = "b11"
JAVA_HASH = "d54c1d3a095b4ff2b6607d096fa80163"

_DOWNLOAD_HEADERS = {
    "Connection": "keep-alive",
    "Cookie": "gpw_e24=http://www.oracle.com/; oraclelicense=accept-securebackup-cookie",
}


class RuntimeState(enum.Enum):
    NOT_CHECKED = "not-checked"
    INSTALLED = "installed"
    NEEDS_INSTALL = "needs-install"
    DOWNLOADING = "downloading"
    EXTRACTING = "extracting"
    READY = "ready"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class HostFacts:
    platform: str
    arch: str

    @classmethod
    def detect(cls) -> "HostFacts":
        return normalize_host(_platform.system(), _platform.machine())


@dataclass(frozen=True)
class RuntimeMeta:
    platform: str
    arch: str
    binary: str
    supported: bool = True


_PLATFORM_NAMES = {
    "darwin": "darwin",
    "windows": "win32",
    "win32": "win32",
    "linux": "linux",
    "sunos": "sunos",
    "solaris": "sunos",
}
_ARCH_NAMES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "i386": "ia32",
    "i586": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "ia32": "ia32",
}

# (host platform, host arch) -> download target; anything missing is unsupported
RUNTIME_TABLE: dict[tuple[str, str], RuntimeMeta] = {
    ("darwin", "x64"): RuntimeMeta("macosx", "x64", "Contents/Home/bin/java"),
    ("win32", "x64"): RuntimeMeta("windows", "x64", "bin/javaw.exe"),
    ("win32", "ia32"): RuntimeMeta("windows", "i586", "bin/javaw.exe"),
    ("linux", "x64"): RuntimeMeta("linux", "x64", "bin/java"),
    ("linux", "ia32"): RuntimeMeta("linux", "i586", "bin/java"),
    ("sunos", "x64"): RuntimeMeta("solaris", "x64", "bin/java"),
    # no Solaris JRE is published for 32-bit x86
    ("sunos", "ia32"): RuntimeMeta("solaris", "i586", "bin/java", supported=False),
}


def normalize_host(system: str, machine: str) -> HostFacts:
    system = (system or "").strip().lower()
    machine = (machine or "").strip().lower()
    return HostFacts(
        platform=_PLATFORM_NAMES.get(system, system),
        arch=_ARCH_NAMES.get(machine, machine),
    )


def runtime_meta(host: HostFacts) -> RuntimeMeta | None:
    return RUNTIME_TABLE.get((host.platform, host.arch))


def java_url(meta: RuntimeMeta) -> str:
    return (
        "https://download.oracle.com/otn-pub/java/jdk/"
        f"{JAVA_VERSION}-{JAVA_BUILD}/{JAVA_HASH}/"
        f"jre-{JAVA_VERSION}-{meta.platform}-{meta.arch}.tar.gz"
    )


def probe_java(java: str) -> bool:
    """Return True when ``java -version`` exits cleanly."""

    try:
        result = subprocess.run(
            [java, "-version"],
            check=False,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError:
        return False
    return result.returncode == 0


Extractor = Callable[[Path, Path], Path]


class RuntimeProvisioner:
    """Makes sure a usable java executable is known before JVM tasks run."""

    def __init__(
        self,
        home: ToolHome,
        *,
        host: HostFacts | None = None,
        downloader: Downloader | None = None,
        extractor: Extractor | None = None,
        probe: Callable[[str], bool] | None = None,
        java: str = "java",
    ) -> None:
        self.home = home
        self.host = host or HostFacts.detect()
        self.downloader = downloader or Downloader()
        self.extractor = extractor or extract_targz
        self.probe = probe or probe_java
        self.java_path = java
        self.state = RuntimeState.NOT_CHECKED

    @property
    def meta(self) -> RuntimeMeta | None:
        return runtime_meta(self.host)

    def is_installed(self) -> bool:
        installed = self.probe(self.java_path)
        logger.debug("java probe path=%s installed=%s", self.java_path, installed)
        return installed

    def ensure_installable(self, rationale: str) -> RuntimeMeta:
        meta = self.meta
        if meta is None or not meta.supported:
            self._transition(RuntimeState.UNSUPPORTED)
            raise UnsupportedPlatformError(rationale, self.host.platform, self.host.arch)
        return meta

    async def ensure_installed(self, rationale: str) -> str:
        """Return the java command, installing a JRE first when needed."""

        if self.is_installed():
            self._transition(RuntimeState.INSTALLED)
            return self.java_path
        self._transition(RuntimeState.NEEDS_INSTALL)
        return await self.ensure_embedded(rationale)

    async def ensure_embedded(self, rationale: str) -> str:
        meta = self.ensure_installable(rationale)
        extract_path = self.home.java_dir
        extract_path.mkdir(parents=True, exist_ok=True)

        binary = self._binary_path(extract_path, meta)
        if binary is None or not binary.exists():
            print()
            print(f"[cljs:java] {rationale} Let us install it for you!")
            url = java_url(meta)
            archive = self.home.root / f"jre-{JAVA_VERSION}-{JAVA_BUILD}.tar.gz"
            self._transition(RuntimeState.DOWNLOADING)
            await asyncio.to_thread(
                self.downloader.download,
                url,
                archive,
                label=f"Java Runtime {JAVA_VERSION}-{JAVA_BUILD}",
                headers=_DOWNLOAD_HEADERS,
            )
            self._transition(RuntimeState.EXTRACTING)
            await asyncio.to_thread(self.extractor, archive, extract_path)
            binary = self._binary_path(extract_path, meta)
            if binary is None or not binary.exists():
                raise RuntimeNotFoundError(f"no java binary found under {extract_path}")

        self.java_path = str(binary)
        self._transition(RuntimeState.READY)
        return self.java_path

    @staticmethod
    def _binary_path(extract_path: Path, meta: RuntimeMeta) -> Path | None:
        roots = child_dirs(extract_path)
        if not roots:
            return None
        return roots[0] / meta.binary

    def _transition(self, state: RuntimeState) -> None:
        logger.debug("java runtime %s -> %s", self.state.value, state.value)
        self.state = state
