"""Platform-independent locations for the cljs tool home."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from platformdirs import user_data_dir

_DEFAULT_APP_NAME = "cljs"
HOME_ENV = "CLJS_HOME"
SCRIPTS_DIR = Path(__file__).resolve().parent / "scripts"


@dataclass(frozen=True)
class ToolHome:
    """Where downloaded runtimes, jars and helper tools live.

    The root defaults to the user data dir and is overridden by ``CLJS_HOME``.
    """

    root: Path

    @classmethod
    def resolve(cls, env: Mapping[str, str] | None = None) -> "ToolHome":
        env = os.environ if env is None else env
        override = env.get(HOME_ENV)
        if override:
            return cls(root=Path(override).expanduser().resolve())
        return cls(root=Path(user_data_dir(_DEFAULT_APP_NAME, appauthor=False)))

    @property
    def java_dir(self) -> Path:
        return self.root / "java"

    @property
    def dep_retriever(self) -> Path:
        return self.root / "dep-retriever.jar"

    def cljs_jar(self, version: str) -> Path:
        return self.root / f"cljs-{version}.jar"

    def figwheel_jar(self, version: str) -> Path:
        return self.root / f"figwheel-sidecar-{version}.jar"

    def ensure(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root


def script_path(name: str) -> Path:
    """Return the bundled compiler API script ``<name>.clj``."""

    return SCRIPTS_DIR / f"{name}.clj"
