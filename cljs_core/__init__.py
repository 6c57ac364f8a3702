"""Core services for the cljs build front end."""

from .app import CljsApp
from .classpath import ClasspathBuilder, all_sources, path_separator
from .config import BuildSpec, Config, ConfigStore, dependency_relevant_view
from .deps import DependencyCache
from .dispatch import TaskDispatcher
from .errors import CljsError, FatalError
from .paths import ToolHome
from .runtime import RuntimeProvisioner, RuntimeState, ToolchainJars
from .watch import WatchSupervisor

__all__ = [
    "CljsApp",
    "ClasspathBuilder",
    "all_sources",
    "path_separator",
    "BuildSpec",
    "Config",
    "ConfigStore",
    "dependency_relevant_view",
    "DependencyCache",
    "TaskDispatcher",
    "CljsError",
    "FatalError",
    "ToolHome",
    "RuntimeProvisioner",
    "RuntimeState",
    "ToolchainJars",
    "WatchSupervisor",
]
