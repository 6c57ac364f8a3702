"""HTTP download helper used to fetch runtimes and compiler jars."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Mapping

import requests
from requests import RequestException

from .errors import DownloadError

log = logging.getLogger(__name__)


@dataclass
class Downloader:
    """Streams remote artifacts to disk with a simple progress line."""

    timeout: float = 30.0
    chunk_size: int = 1024 * 1024
    verify: bool = True
    out: IO[str] = field(default_factory=lambda: sys.stdout, repr=False)
    session: requests.Session = field(default_factory=requests.Session, repr=False)

    def download(
        self,
        url: str,
        out_path: Path | str,
        *,
        label: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Path:
        label = label or url
        log.info("Downloading %s from %s", label, url)
        try:
            resp = self.session.get(
                url,
                stream=True,
                timeout=self.timeout,
                headers=dict(headers or {}),
                verify=self.verify,
            )
        except RequestException as exc:
            raise DownloadError(f"download {label} failed: {exc}") from exc

        if resp.status_code >= 400:
            raise DownloadError(f"download {label} failed: {resp.status_code} {resp.reason}")

        target = Path(out_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        total = int(resp.headers.get("Content-Length") or 0)
        received = 0
        partial = target.with_name(target.name + ".part")
        try:
            with partial.open("wb") as f:
                for chunk in resp.iter_content(chunk_size=self.chunk_size):
                    if chunk:
                        f.write(chunk)
                        received += len(chunk)
                        self._progress(label, received, total)
        except RequestException as exc:
            partial.unlink(missing_ok=True)
            raise DownloadError(f"download {label} interrupted: {exc}") from exc
        finally:
            resp.close()
        partial.replace(target)
        self.out.write("\n")
        self.out.flush()
        return target

    def _progress(self, label: str, received: int, total: int) -> None:
        megabytes = received / (1024 * 1024)
        if total:
            percent = received * 100 // total
            self.out.write(f"\r[cljs:download] {label}: {percent:3d}% ({megabytes:.1f} MB)")
        else:
            self.out.write(f"\r[cljs:download] {label}: {megabytes:.1f} MB")
        self.out.flush()
