"""Tests for classpath assembly."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from cljs_core.classpath import ClasspathBuilder, all_sources, path_separator
from cljs_core.config import Config, ConfigStore
from cljs_core.errors import DependencyResolutionError
from cljs_core.paths import ToolHome
from cljs_core.runtime import ToolchainJars


class StubDeps:
    def __init__(self, record: dict[str, Any] | None) -> None:
        self.record = record
        self.queries = 0

    def query(self) -> dict[str, Any] | None:
        self.queries += 1
        return self.record


def _builder(tmp_path: Path, platform: str, record: dict[str, Any] | None) -> ClasspathBuilder:
    store = ConfigStore(tmp_path / "cljs.yml")
    store._config = Config.from_dict({"builds": {"app": {"src": "src"}}})
    jars = ToolchainJars(ToolHome(Path("/home/cljs")))
    return ClasspathBuilder(store, StubDeps(record), jars, platform=platform)


def test_path_separator() -> None:
    assert path_separator("win32") == ";"
    assert path_separator("linux") == ":"
    assert path_separator("darwin") == ":"


@pytest.mark.parametrize(("platform", "sep"), [("win32", ";"), ("linux", ":")])
def test_build_joins_with_platform_separator(tmp_path: Path, platform: str, sep: str) -> None:
    builder = _builder(tmp_path, platform, {"jars": ["a.jar", "b.jar"]})
    assert builder.build(["src", "env"]) == sep.join(["a.jar", "b.jar", "src", "env"])


def test_build_prepends_toolchain_jars(tmp_path: Path) -> None:
    builder = _builder(tmp_path, "linux", {"jars": []})
    cp = builder.build("src", jvm=True)
    assert cp.split(":") == [
        str(Path("/home/cljs/cljs-1.9.562.jar")),
        str(Path("/home/cljs/figwheel-sidecar-0.5.10.jar")),
        "src",
    ]


def test_build_raises_when_resolution_fails(tmp_path: Path) -> None:
    builder = _builder(tmp_path, "linux", None)
    with pytest.raises(DependencyResolutionError):
        builder.build("src")


def test_all_sources_flattens_builds() -> None:
    config = Config.from_dict(
        {"builds": {"app": {"src": ["src", "env"]}, "test": {"src": "test"}, "bare": {}}}
    )
    assert all_sources(config) == ["src", "env", "test"]
    assert all_sources(None) == []
