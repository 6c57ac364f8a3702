"""Tests for artifact downloads and runtime archive extraction."""

from __future__ import annotations

import io
import tarfile
from pathlib import Path
from typing import Any

import pytest
import requests

from cljs_core.archive import child_dirs, extract_targz
from cljs_core.errors import DownloadError, ExtractionError
from cljs_core.net import Downloader


class FakeResponse:
    def __init__(self, chunks: list[bytes], status_code: int = 200) -> None:
        self.chunks = chunks
        self.status_code = status_code
        self.reason = "OK" if status_code < 400 else "Not Found"
        self.headers = {"Content-Length": str(sum(len(c) for c in chunks))}
        self.closed = False

    def iter_content(self, chunk_size: int = 1) -> Any:
        yield from self.chunks

    def close(self) -> None:
        self.closed = True


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.requests: list[tuple[str, dict[str, Any]]] = []

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.requests.append((url, kwargs))
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response


def test_download_streams_to_target(tmp_path: Path) -> None:
    response = FakeResponse([b"ab", b"cd"])
    session = FakeSession(response)
    out = io.StringIO()
    downloader = Downloader(session=session, out=out)  # type: ignore[arg-type]

    target = downloader.download(
        "https://example.invalid/cljs.jar",
        tmp_path / "jars" / "cljs.jar",
        label="ClojureScript",
        headers={"Cookie": "x=1"},
    )

    assert target.read_bytes() == b"abcd"
    assert not (tmp_path / "jars" / "cljs.jar.part").exists()
    assert response.closed
    assert session.requests[0][1]["headers"] == {"Cookie": "x=1"}
    assert session.requests[0][1]["stream"] is True
    assert "[cljs:download] ClojureScript: 100%" in out.getvalue()


def test_download_http_error(tmp_path: Path) -> None:
    session = FakeSession(FakeResponse([], status_code=404))
    downloader = Downloader(session=session, out=io.StringIO())  # type: ignore[arg-type]

    with pytest.raises(DownloadError, match="404"):
        downloader.download("https://example.invalid/x", tmp_path / "x")
    assert not (tmp_path / "x").exists()


def test_download_connection_error(tmp_path: Path) -> None:
    session = FakeSession(error=requests.ConnectionError("offline"))
    downloader = Downloader(session=session, out=io.StringIO())  # type: ignore[arg-type]

    with pytest.raises(DownloadError, match="offline"):
        downloader.download("https://example.invalid/x", tmp_path / "x")


def _tarball(path: Path, members: dict[str, bytes]) -> Path:
    with tarfile.open(path, "w:gz") as tf:
        for name, data in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))
    return path


def test_extract_targz_and_child_dirs(tmp_path: Path) -> None:
    archive = _tarball(tmp_path / "jre.tar.gz", {"jre1.8.0_131/bin/java": b"#!"})
    dest = tmp_path / "java"

    extract_targz(archive, dest)

    assert child_dirs(dest) == [dest / "jre1.8.0_131"]
    assert (dest / "jre1.8.0_131" / "bin" / "java").read_bytes() == b"#!"


def test_extract_rejects_path_traversal(tmp_path: Path) -> None:
    archive = _tarball(tmp_path / "evil.tar.gz", {"../escape.txt": b"x"})

    with pytest.raises(ExtractionError, match="unsafe"):
        extract_targz(archive, tmp_path / "java")
    assert not (tmp_path / "escape.txt").exists()


def test_extract_corrupt_archive(tmp_path: Path) -> None:
    archive = tmp_path / "broken.tar.gz"
    archive.write_bytes(b"not a tarball")

    with pytest.raises(ExtractionError):
        extract_targz(archive, tmp_path / "java")


def test_child_dirs_missing_path(tmp_path: Path) -> None:
    assert child_dirs(tmp_path / "absent") == []
