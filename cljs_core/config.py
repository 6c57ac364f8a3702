"""Build configuration store for ``cljs.yml`` projects."""

from __future__ import annotations

import contextlib
import copy
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Mapping

import yaml

from .errors import ConfigError, ConfigNotFoundError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "cljs.yml"
CONFIG_ENV = "CLJS_CONFIG"

DEFAULT_CLJS_VERSION = "1.9.562"
DEFAULT_FIGWHEEL_VERSION = "0.5.10"

# Dependencies are found in these config keys
DEP_KEYS = ("dependencies", "dev-dependencies")

ChangeSource = Callable[[Path], AsyncIterator[Any]]


def _ensure_mapping(data: Any, label: str) -> Mapping[str, Any]:
    if isinstance(data, Mapping):
        return data
    raise ConfigError(f"expected mapping for {label}, got {type(data).__name__}")


@dataclass(frozen=True)
class BuildSpec:
    id: str
    src: tuple[str, ...] = ()
    options: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, build_id: str, data: Mapping[str, Any] | None) -> "BuildSpec":
        raw = _ensure_mapping(data or {}, f"build {build_id!r}")
        src = raw.get("src")
        if src is None:
            sources: tuple[str, ...] = ()
        elif isinstance(src, str):
            sources = (src,)
        else:
            sources = tuple(str(item) for item in src)
        options = {str(k): v for k, v in raw.items() if k not in ("src", "id")}
        return cls(id=build_id, src=sources, options=options)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id}
        if self.src:
            data["src"] = list(self.src) if len(self.src) > 1 else self.src[0]
        data.update(copy.deepcopy(dict(self.options)))
        return data


@dataclass(frozen=True)
class Config:
    """Snapshot of the project config; reloads produce a new instance."""

    builds: Mapping[str, BuildSpec]
    dependencies: tuple[Any, ...] = ()
    dev_dependencies: tuple[Any, ...] = ()
    cljs_version: str = DEFAULT_CLJS_VERSION
    figwheel_version: str = DEFAULT_FIGWHEEL_VERSION
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Config":
        raw = copy.deepcopy(dict(_ensure_mapping(data, "config")))
        builds_raw = _ensure_mapping(raw.get("builds") or {}, "builds")
        builds = {
            str(key): BuildSpec.from_dict(str(key), value) for key, value in builds_raw.items()
        }
        raw["cljs-version"] = str(raw.get("cljs-version") or DEFAULT_CLJS_VERSION)
        raw["figwheel-version"] = str(raw.get("figwheel-version") or DEFAULT_FIGWHEEL_VERSION)
        if builds:
            raw["builds"] = {key: spec.to_dict() for key, spec in builds.items()}
        return cls(
            builds=builds,
            dependencies=tuple(raw.get("dependencies") or ()),
            dev_dependencies=tuple(raw.get("dev-dependencies") or ()),
            cljs_version=raw["cljs-version"],
            figwheel_version=raw["figwheel-version"],
            raw=raw,
        )

    def dependency_subset(self) -> dict[str, Any]:
        return {key: copy.deepcopy(self.raw.get(key)) for key in DEP_KEYS if key in self.raw}

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(dict(self.raw))


def dependency_relevant_view(config: Config | None, build_id: str | None) -> dict[str, Any]:
    """Any values in the config that may change the given build."""

    if config is None:
        return {"builds": {build_id: None}}
    view = config.dependency_subset()
    build = config.builds.get(build_id) if build_id is not None else None
    view["builds"] = {build_id: build.to_dict() if build else None}
    return view


async def _awatch(path: Path) -> AsyncIterator[Any]:
    from watchfiles import awatch

    target = path.resolve()

    # editors often replace the file, so watch the directory and filter
    def _only_config(_change: Any, changed: str) -> bool:
        return Path(changed).name == target.name

    async for changes in awatch(target.parent, watch_filter=_only_config):
        yield changes


class ConfigStore:
    """Holds the current :class:`Config` snapshot for the working directory."""

    def __init__(
        self,
        path: Path | str | None = None,
        *,
        change_source: ChangeSource | None = None,
    ) -> None:
        if path is None:
            path = os.environ.get(CONFIG_ENV) or CONFIG_FILE_NAME
        self.path = Path(path)
        self._config: Config | None = None
        self._change_source = change_source or _awatch

    @property
    def config(self) -> Config | None:
        return self._config

    def load(self) -> Config | None:
        if not self.path.exists():
            logger.debug("no config at %s; keeping previous state", self.path)
            return self._config
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in {self.path}: {exc}") from exc
        self._config = Config.from_dict(data)
        logger.debug("loaded config from %s builds=%s", self.path, list(self._config.builds))
        return self._config

    def require(self) -> Config:
        if self._config is None:
            raise ConfigNotFoundError(f"No config found. Please create one in {self.path}")
        return self._config

    def dependency_relevant_view(self, build_id: str | None) -> dict[str, Any]:
        return dependency_relevant_view(self._config, build_id)

    async def wait_for_relevant_change(self, build_id: str | None) -> Config | None:
        """Return after a reload that changed the view for ``build_id``."""

        previous = self.dependency_relevant_view(build_id)
        async with contextlib.aclosing(self._change_source(self.path)) as changes:
            async for _ in changes:
                self.load()
                current = self.dependency_relevant_view(build_id)
                if current != previous:
                    logger.debug("relevant config change for build %s", build_id)
                    return self._config
                logger.debug("ignoring config change unrelated to build %s", build_id)
                previous = current
        return self._config
