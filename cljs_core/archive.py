"""Archive helpers for unpacking downloaded runtimes."""

from __future__ import annotations

import os
import tarfile
from pathlib import Path

from .errors import ExtractionError

__all__ = ["child_dirs", "extract_targz"]


def _safe_tar_extract(tf: tarfile.TarFile, dest: Path) -> None:
    dest = dest.resolve()
    for m in tf.getmembers():
        target = (dest / m.name).resolve()
        if not str(target).startswith(str(dest) + os.sep) and target != dest:
            raise ExtractionError(f"unsafe tar member path: {m.name}")
    tf.extractall(dest)


def extract_targz(archive: Path, dest: Path) -> Path:
    dest.mkdir(parents=True, exist_ok=True)
    try:
        with tarfile.open(archive, "r:gz") as tf:
            _safe_tar_extract(tf, dest)
    except (OSError, tarfile.TarError) as exc:
        raise ExtractionError(f"unable to extract {archive}: {exc}") from exc
    return dest


def child_dirs(path: Path) -> list[Path]:
    if not path.is_dir():
        return []
    return sorted(item for item in path.iterdir() if item.is_dir())
