"""cljs CLI entrypoint backed by the task registry."""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Sequence

from cljs_core.app import CljsApp
from cljs_core.errors import CljsError, UnsupportedPlatformError

CLI_VERSION = "0.1.0"
LOG_LEVEL_ENV = "CLJS_LOG_LEVEL"

USAGE = """Usage: cljs [task] [build-id] [args...]

Tasks:
  build      compile a build once
  watch      recompile a build on change (restarts when its config changes)
  repl       start a ClojureScript REPL
  figwheel   run Figwheel Sidecar
  install    resolve the dependencies declared in cljs.yml

  <file>.cljs   run a script with Lumo
  <file>.clj    run a script on the JVM with the config bound
  (no task)     start a Lumo REPL
"""


def configure_logging(env: dict[str, str] | None = None) -> None:
    env = dict(os.environ) if env is None else env
    level_name = (env.get(LOG_LEVEL_ENV) or "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(
    argv: Sequence[str] | None = None,
    *,
    app: CljsApp | None = None,
    workdir: Path | str | None = None,
) -> int:
    """Resolve and run a cljs task."""

    tokens = list(argv) if argv is not None else list(sys.argv[1:])
    if tokens and tokens[0] in ("-h", "--help"):
        print(USAGE)
        return 0
    if tokens and tokens[0] == "--version":
        print(f"cljs v{CLI_VERSION}")
        return 0

    configure_logging()
    task, args = (tokens[0], tokens[1:]) if tokens else (None, [])
    try:
        app = app or CljsApp(workdir=workdir)
        return to_int(asyncio.run(app.run(task, args)))
    except UnsupportedPlatformError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except CljsError as exc:
        print(f"[cljs] error: {exc}", file=sys.stderr)
        return 1
    except SystemExit as exc:
        # argparse exits 2 on usage errors; every failure maps to 1
        return 0 if exc.code in (0, None) else 1
    except KeyboardInterrupt:
        return 130


def to_int(result: int | None) -> int:
    return 0 if result is None else result
