#!/usr/bin/env python3
"""
Warehouse ledger management CLI.

Usage:
    python manage.py start       Migrate the database and start the server
    python manage.py stop        Graceful shutdown
    python manage.py status      Check if server is running
    python manage.py migrate     Apply pending migrations (--status, --verify)
"""

import argparse
import asyncio
import os
import signal
import socket
import subprocess
import sys
import time
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
PID_FILE = ROOT_DIR / ".warehouse.pid"


def _read_pid() -> int | None:
    """Read PID from the PID file, return None if missing or stale."""
    if not PID_FILE.exists():
        return None
    try:
        pid = int(PID_FILE.read_text().strip())
    except (ValueError, OSError):
        return None
    if _is_pid_alive(pid):
        return pid
    # Stale PID file
    PID_FILE.unlink(missing_ok=True)
    return None


def _is_pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
        return True
    except OSError:
        return False


def _is_port_free(port: int) -> bool:
    """Check if a port is available for binding."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", port))
        return True
    except OSError:
        return False


def _migrate() -> bool:
    """Apply pending migrations. Returns True on success."""
    from src.infrastructure.storage.sqlite.migrations.migrator import run_migrations

    try:
        results = asyncio.run(run_migrations())
    except RuntimeError as e:
        print(f"Error: migration failed: {e}")
        return False

    if not results:
        print("Database is up to date.")
    for result in results:
        print(f"Applied v{result.version}_{result.name} ({result.execution_time_ms}ms)")
    return True


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply migrations, or report status / integrity."""
    from src.infrastructure.storage.sqlite.migrations.migrator import (
        get_migration_status,
        verify_schema_integrity,
    )

    if args.status:
        status = asyncio.run(get_migration_status())
        print(f"Current version: {status['current_version'] or 'none'}")
        for version in status["pending_migrations"]:
            print(f"  pending: v{version}")
        return

    if args.verify:
        checks = asyncio.run(verify_schema_integrity())
        failed = [check for check in checks if check["status"] != "PASS"]
        for check in checks:
            print(f"  {check['check']}: {check['status']}")
        if failed:
            sys.exit(1)
        return

    if not _migrate():
        sys.exit(1)


def cmd_start(args: argparse.Namespace) -> None:
    """Migrate and start the server in the background."""
    existing_pid = _read_pid()
    if existing_pid is not None:
        print(f"Server already running (PID {existing_pid}). Use 'stop' first.")
        sys.exit(1)

    if not _is_port_free(args.port):
        print(f"Error: port {args.port} is in use.")
        sys.exit(1)

    if not _migrate():
        sys.exit(1)

    # One worker: all writers share the process-wide connection pool
    uvicorn_cmd = [
        sys.executable, "-m", "uvicorn",
        "src.api.main:app",
        "--host", args.host,
        "--port", str(args.port),
    ]

    print(f"Starting server on {args.host}:{args.port}...")
    proc = subprocess.Popen(uvicorn_cmd, cwd=str(ROOT_DIR))
    PID_FILE.write_text(str(proc.pid))

    print(f"Server started (PID {proc.pid}).")
    print(f"  API:      http://{args.host}:{args.port}/api")
    print(f"  PID file: {PID_FILE}")


def cmd_stop(args: argparse.Namespace) -> None:
    """Stop the running server."""
    pid = _read_pid()
    if pid is None:
        print("Server is not running.")
        return

    print(f"Stopping server (PID {pid})...")
    try:
        os.kill(pid, signal.SIGTERM)
    except OSError as e:
        print(f"Error: could not signal PID {pid}: {e}")
        sys.exit(1)

    for _ in range(50):
        if not _is_pid_alive(pid):
            break
        time.sleep(0.1)

    PID_FILE.unlink(missing_ok=True)
    if _is_pid_alive(pid):
        print("Warning: Server may still be running.")
    else:
        print("Server stopped.")


def cmd_status(args: argparse.Namespace) -> None:
    """Check if the server is running."""
    pid = _read_pid()
    if pid is not None:
        print(f"Server is running (PID {pid}).")
    elif not _is_port_free(args.port):
        print(f"No PID file, but port {args.port} is in use.")
    else:
        print(f"Server is not running (port {args.port} is free).")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Warehouse ledger management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_start = sub.add_parser("start", help="Migrate and start the server")
    p_start.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    p_start.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    p_start.set_defaults(func=cmd_start)

    p_stop = sub.add_parser("stop", help="Stop the server")
    p_stop.set_defaults(func=cmd_stop)

    p_status = sub.add_parser("status", help="Check if server is running")
    p_status.add_argument("--port", type=int, default=8000, help="Port to check (default: 8000)")
    p_status.set_defaults(func=cmd_status)

    p_migrate = sub.add_parser("migrate", help="Apply database migrations")
    p_migrate.add_argument("--status", action="store_true", help="Show migration status")
    p_migrate.add_argument("--verify", action="store_true", help="Verify schema integrity")
    p_migrate.set_defaults(func=cmd_migrate)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
