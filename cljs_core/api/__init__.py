"""Convenience imports for cljs task helpers."""

from .abc import CljsAbstractTask
from .decorators import cljstask

__all__ = ["CljsAbstractTask", "cljstask"]
