"""Tests for build resolution and child process dispatch."""

from __future__ import annotations

import asyncio
import subprocess
from pathlib import Path
from typing import Any

import pytest

from cljs_core.config import Config, ConfigStore
from cljs_core.dispatch import TaskDispatcher, onload_form
from cljs_core.errors import (
    AmbiguousBuildError,
    BuildNotFoundError,
    ConfigNotFoundError,
    NoBuildsError,
    SpawnError,
)


class StubClasspath:
    def __init__(self) -> None:
        self.calls: list[tuple[Any, bool]] = []

    def build(self, src: Any = None, *, jvm: bool = False) -> str:
        self.calls.append((list(src or []), jvm))
        return ":".join((["cljs.jar"] if jvm else []) + list(src or []))


class Recorder:
    def __init__(self) -> None:
        self.spawned: list[tuple[str, ...]] = []
        self.ran: list[list[str]] = []

    async def spawn(self, *argv: str) -> str:
        self.spawned.append(argv)
        return "child-handle"

    def run(self, command: list[str], check: bool = False) -> subprocess.CompletedProcess[Any]:
        self.ran.append(command)
        return subprocess.CompletedProcess(command, 0)


def _dispatcher(tmp_path: Path, data: dict[str, Any] | None) -> tuple[TaskDispatcher, Recorder, StubClasspath]:
    store = ConfigStore(tmp_path / "cljs.yml")
    if data is not None:
        store._config = Config.from_dict(data)
    recorder = Recorder()
    classpath = StubClasspath()
    dispatcher = TaskDispatcher(
        store,
        classpath,
        lambda: "java",
        lumo_path="lumo",
        spawn=recorder.spawn,
        run=recorder.run,
    )
    return dispatcher, recorder, classpath


def test_resolve_build_requires_builds(tmp_path: Path) -> None:
    dispatcher, _, _ = _dispatcher(tmp_path, {"builds": {}})
    with pytest.raises(NoBuildsError):
        dispatcher.resolve_build(None)


def test_resolve_build_requires_config(tmp_path: Path) -> None:
    dispatcher, _, _ = _dispatcher(tmp_path, None)
    with pytest.raises(ConfigNotFoundError):
        dispatcher.resolve_build("app")


def test_resolve_build_implies_single_build(tmp_path: Path) -> None:
    dispatcher, _, _ = _dispatcher(tmp_path, {"builds": {"app": {"src": "src"}}})
    assert dispatcher.resolve_build(None).id == "app"


def test_resolve_build_ambiguous_lists_ids(tmp_path: Path) -> None:
    dispatcher, _, _ = _dispatcher(
        tmp_path, {"builds": {"app": {"src": "src"}, "test": {"src": "test"}}}
    )
    with pytest.raises(AmbiguousBuildError) as excinfo:
        dispatcher.resolve_build(None)
    assert excinfo.value.candidates == ("app", "test")
    assert "app, test" in str(excinfo.value)


def test_resolve_build_unknown_id(tmp_path: Path) -> None:
    dispatcher, _, _ = _dispatcher(tmp_path, {"builds": {"app": {"src": "src"}}})
    with pytest.raises(BuildNotFoundError, match="'prod'"):
        dispatcher.resolve_build("prod")


def test_managed_task_binds_config_and_build(tmp_path: Path) -> None:
    dispatcher, recorder, classpath = _dispatcher(
        tmp_path,
        {
            "dependencies": [["reagent", "0.6.0"]],
            "builds": {"app": {"src": "src", "compiler": {"output-to": "main.js"}}},
        },
    )

    handle = asyncio.run(
        dispatcher.run_managed_task("watch.clj", build_id="app", args=["--verbose"])
    )

    assert handle == "child-handle"
    assert classpath.calls == [(["src"], True)]
    argv = recorder.spawned[0]
    assert argv[:6] == ("java", "-cp", "cljs.jar:src", "clojure.main", "-e", argv[5])
    assert argv[6:] == ("watch.clj", "--verbose")
    onload = argv[5]
    assert onload.startswith("(do (def ^:dynamic *cljs-config* (quote {")
    assert ':dependencies [[reagent "0.6.0"]]' in onload
    assert '*build-config* (quote {:id :app, :src "src", :compiler {:output-to "main.js"}})' in onload


def test_managed_task_falls_back_to_all_sources(tmp_path: Path) -> None:
    dispatcher, _, classpath = _dispatcher(
        tmp_path, {"builds": {"app": {"compiler": {}}, "lib": {"src": ["lib", "env"]}}}
    )

    asyncio.run(dispatcher.run_managed_task("build.clj", build_id="app"))

    assert classpath.calls == [(["lib", "env"], True)]


def test_managed_script_implies_single_build(tmp_path: Path) -> None:
    dispatcher, recorder, _ = _dispatcher(tmp_path, {"builds": {"app": {"src": "src"}}})

    asyncio.run(dispatcher.run_managed_task("tool.clj"))

    assert "*build-config* (quote {:id :app, :src \"src\"})" in recorder.spawned[0][5]


def test_managed_script_requires_a_single_build(tmp_path: Path) -> None:
    dispatcher, recorder, _ = _dispatcher(tmp_path, {"builds": {}})
    with pytest.raises(NoBuildsError):
        asyncio.run(dispatcher.run_managed_task("tool.clj"))

    dispatcher, recorder, _ = _dispatcher(tmp_path, {"builds": {"app": {}, "test": {}}})
    with pytest.raises(AmbiguousBuildError):
        asyncio.run(dispatcher.run_managed_task("tool.clj"))
    assert recorder.spawned == []


def test_compiler_options_reach_compiler_as_keywords(tmp_path: Path) -> None:
    dispatcher, recorder, _ = _dispatcher(
        tmp_path,
        {"builds": {"app": {"src": "src", "compiler": {"optimizations": ":advanced", "target": ":nodejs"}}}},
    )

    asyncio.run(dispatcher.run_managed_task("build.clj"))

    onload = recorder.spawned[0][5]
    assert ":compiler {:optimizations :advanced, :target :nodejs}" in onload


def test_spawn_failure_is_wrapped(tmp_path: Path) -> None:
    dispatcher, _, _ = _dispatcher(tmp_path, {"builds": {"app": {"src": "src"}}})

    async def broken(*argv: str) -> None:
        raise FileNotFoundError(argv[0])

    dispatcher._spawn = broken
    with pytest.raises(SpawnError):
        asyncio.run(dispatcher.run_managed_task("build.clj"))


def test_lightweight_task_adds_classpath_only_with_config(tmp_path: Path) -> None:
    dispatcher, recorder, _ = _dispatcher(tmp_path, {"builds": {"app": {"src": "src"}}})
    dispatcher.run_lightweight_task(["script.cljs"])
    assert recorder.ran[-1] == ["lumo", "-c", "src", "script.cljs"]

    bare, bare_recorder, _ = _dispatcher(tmp_path, None)
    bare.run_lightweight_task(None)
    assert bare_recorder.ran[-1] == ["lumo"]


def test_onload_form_renders_nil_build() -> None:
    assert onload_form({"builds": {}}, None) == (
        "(do (def ^:dynamic *cljs-config* (quote {:builds {}})) "
        "(def ^:dynamic *build-config* (quote nil)) nil)"
    )
