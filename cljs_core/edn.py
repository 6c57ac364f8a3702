"""Minimal EDN writer for handing data to Clojure processes."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

__all__ = ["Keyword", "Symbol", "dumps", "keyword_value", "keywordize", "dependency_vectors"]

_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


class Keyword(str):
    """A string written as ``:name``."""

    __slots__ = ()


class Symbol(str):
    """A string written bare, e.g. a dependency name."""

    __slots__ = ()


def dumps(value: Any) -> str:
    if value is None:
        return "nil"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, Keyword):
        return f":{value}"
    if isinstance(value, Symbol):
        return str(value)
    if isinstance(value, str):
        return '"' + "".join(_STRING_ESCAPES.get(ch, ch) for ch in value) + '"'
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, Mapping):
        items = (f"{dumps(k)} {dumps(v)}" for k, v in value.items())
        return "{" + ", ".join(items) + "}"
    if isinstance(value, (set, frozenset)):
        return "#{" + " ".join(dumps(item) for item in value) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(dumps(item) for item in value) + "]"
    raise TypeError(f"cannot serialize {type(value).__name__} as EDN")


def keyword_value(value: Any) -> Any:
    """Read a ``":name"`` string as the keyword ``:name``; YAML has no keywords."""

    if (
        isinstance(value, str)
        and not isinstance(value, (Keyword, Symbol))
        and len(value) > 1
        and value.startswith(":")
    ):
        return Keyword(value[1:])
    return value


def keywordize(value: Any) -> Any:
    """Recursively turn mapping keys and ``":name"`` strings into keywords."""

    if isinstance(value, Mapping):
        return {
            (Keyword(k[1:] if k.startswith(":") else k) if isinstance(k, str) else k): keywordize(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [keywordize(item) for item in value]
    return keyword_value(value)


def _dependency_option(item: Any) -> Any:
    # nested vectors hold artifact names, e.g. the value of :exclusions
    if isinstance(item, (list, tuple)):
        return [
            Symbol(part) if isinstance(part, str) and not part.startswith(":") else keywordize(part)
            for part in item
        ]
    return keywordize(item)


def dependency_vectors(coordinates: Iterable[Any]) -> list[list[Any]]:
    """Render ``[name, version, ...]`` coordinates as ``[name "version" ...]``."""

    out: list[list[Any]] = []
    for coord in coordinates:
        if isinstance(coord, str):
            name, _, version = coord.partition(" ")
            parts: list[Any] = [name, version] if version else [name]
        else:
            parts = list(coord)
        if not parts:
            continue
        head, *rest = parts
        out.append([Symbol(str(head)), *(_dependency_option(item) for item in rest)])
    return out
