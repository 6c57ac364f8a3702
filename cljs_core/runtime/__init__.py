"""Java runtime and compiler jar provisioning."""

from .jars import ToolchainJars, cljs_jar_url, figwheel_jar_url
from .provisioner import (
    JAVA_BUILD,
    JAVA_HASH,
    JAVA_VERSION,
    RUNTIME_TABLE,
    HostFacts,
    RuntimeMeta,
    RuntimeProvisioner,
    RuntimeState,
    java_url,
    normalize_host,
    probe_java,
    runtime_meta,
)

__all__ = [
    "ToolchainJars",
    "cljs_jar_url",
    "figwheel_jar_url",
    "JAVA_VERSION",
    "JAVA_BUILD",
    "JAVA_HASH",
    "RUNTIME_TABLE",
    "HostFacts",
    "RuntimeMeta",
    "RuntimeProvisioner",
    "RuntimeState",
    "java_url",
    "normalize_host",
    "probe_java",
    "runtime_meta",
]
