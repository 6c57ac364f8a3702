"""Typed errors raised by the cljs core services."""

from __future__ import annotations

from typing import Sequence


class CljsError(RuntimeError):
    """Base cljs error."""


class FatalError(CljsError):
    """User-facing error that terminates the current invocation."""


class ConfigError(FatalError):
    """The build config exists but cannot be parsed."""


class ConfigNotFoundError(FatalError):
    """A task needs the build config but none was found."""


class NoBuildsError(FatalError):
    """The config declares no builds."""


class BuildNotFoundError(FatalError):
    """The requested build id is not declared in the config."""


class AmbiguousBuildError(FatalError):
    """No build id was given and more than one build is declared."""

    def __init__(self, candidates: Sequence[str]) -> None:
        self.candidates = tuple(candidates)
        listing = ", ".join(self.candidates)
        super().__init__(f"Please specify a build ({listing}) since there are more than one.")


class UnrecognizedTaskError(FatalError):
    """The CLI task is neither registered nor a runnable file."""


class UnsupportedPlatformError(FatalError):
    """Java cannot be auto-installed on this host."""

    def __init__(self, rationale: str, platform: str | None, arch: str | None) -> None:
        self.rationale = rationale
        self.platform = platform
        self.arch = arch
        super().__init__(
            f"{rationale}\n"
            "Unfortunately we cannot auto-install Java on your platform "
            f"(platform={platform or 'unknown'} arch={arch or 'unknown'}).\n"
            "Please manually install Java if possible and try again here afterwards."
        )


class DownloadError(CljsError):
    """An artifact download failed."""


class ExtractionError(CljsError):
    """An archive could not be extracted."""


class RuntimeNotFoundError(CljsError):
    """An extracted runtime did not contain the expected java binary."""


class DependencyResolutionError(CljsError):
    """The dependency retriever did not produce a usable artifact list."""


class SpawnError(CljsError):
    """A child process (java or lumo) could not be started."""
