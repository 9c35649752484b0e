from __future__ import annotations

import argparse
import os
import subprocess
import sys
from pathlib import Path
from typing import List, Optional


def _check_db(path: str) -> Path:
    p = Path(path)
    if not p.exists():
        raise SystemExit(f"cannot access database file: {path} does not exist")
    if p.is_dir():
        raise SystemExit(f"cannot access database file: {path} is a directory")
    return p.resolve()


def _check_static(path: str) -> Path:
    p = Path(path)
    if not p.is_dir():
        raise SystemExit(f"invalid static directory: {path}")
    return p.resolve()


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Serve a browser client for inspecting and editing a SQLite file."
    )
    ap.add_argument(
        "--db",
        required=True,
        help="Path to the SQLite file to inspect.",
    )
    ap.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0).")
    ap.add_argument("--port", type=int, default=8080, help="Bind port (default: 8080).")
    ap.add_argument(
        "--static",
        default="",
        help="Optional directory with frontend assets served with SPA fallback.",
    )
    ap.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug"],
        help="Log level forwarded to uvicorn (default: info).",
    )
    return ap


def uvicorn_command(args: argparse.Namespace) -> List[str]:
    # A single worker: every request shares one SQLite connection
    return [
        "uvicorn",
        "app.main:app",
        "--host",
        args.host,
        "--port",
        str(args.port),
        "--log-level",
        args.log_level,
        "--workers",
        "1",
    ]


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    db_path = _check_db(args.db)
    print(f"[start] using database file: {db_path}", flush=True)
    os.environ["SQLITE_VIEWER_DB"] = str(db_path)

    if args.static:
        os.environ["SQLITE_VIEWER_STATIC"] = str(_check_static(args.static))

    print(f"[start] starting sqlite viewer on {args.host}:{args.port}", flush=True)
    try:
        subprocess.run(uvicorn_command(args), check=True)
    except subprocess.CalledProcessError as exc:
        print(f"[start] server stopped: {exc}", file=sys.stderr, flush=True)
        return exc.returncode or 1
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())
