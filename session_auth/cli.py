"""Small CLI helpers wired to project scripts for developer convenience.

Usage (from project root):
  runserver --host=0.0.0.0 --port=8000 --no-reload
  run-tests
  init-db                   # create tables if missing
  create-user --username=admin --password=secret [--nickname=Admin] [--status=active]
  purge-sessions            # delete expired session records
  init-env                  # copies .env.example -> .env if missing
"""
from __future__ import annotations

import sys
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List


def _args() -> List[str]:
    return sys.argv[1:]


def _options() -> Dict[str, str]:
    """Parse `--key=value` flags; bare `--flag` maps to an empty string."""
    options = {}
    for a in _args():
        if not a.startswith("--"):
            continue
        key, _, value = a[2:].partition("=")
        options[key] = value
    return options


def runserver() -> None:
    """Run Uvicorn programmatically. Accepts simple flags:

    --host=<host>  (default 127.0.0.1)
    --port=<port>  (default 8000)
    --no-reload    (disable auto-reload)
    --reload       (enable auto-reload)
    """
    import uvicorn

    host = "127.0.0.1"
    port = 8000
    reload = True

    for a in _args():
        if a.startswith("--host="):
            host = a.split("=", 1)[1]
        elif a.startswith("--port="):
            try:
                port = int(a.split("=", 1)[1])
            except ValueError:
                print(f"Ignoring invalid port: {a}")
        elif a == "--no-reload":
            reload = False
        elif a == "--reload":
            reload = True

    print(f"Starting uvicorn on {host}:{port} (reload={reload})")
    uvicorn.run("session_auth.main:create_app", factory=True, host=host, port=port, reload=reload)


def run_tests() -> None:
    """Run pytest with any forwarded args."""
    args = _args()
    cmd = ["pytest"] + args
    subprocess.run(cmd, check=True)


def init_database() -> None:
    """Create all tables for the configured DATABASE_URL."""
    from session_auth.core.database import init_db
    from session_auth.core.logger import setup_logging

    setup_logging()
    init_db()
    print("Database tables created")


def create_user() -> None:
    """Create a user account in the identity directory."""
    from session_auth.core.database import SessionLocal, init_db
    from session_auth.core.logger import setup_logging
    from session_auth.models.user import UserStatusEnum
    from session_auth.services.user_directory import UserDirectory

    options = _options()
    username = options.get("username")
    password = options.get("password")
    if not username or not password:
        print("create-user requires --username=<name> and --password=<password>")
        sys.exit(2)

    try:
        status = UserStatusEnum(options.get("status") or UserStatusEnum.ACTIVE.value)
    except ValueError:
        print(f"Unknown status {options.get('status')!r}, expected one of: active, locked, disabled")
        sys.exit(2)

    setup_logging()
    init_db()
    db = SessionLocal()
    try:
        directory = UserDirectory(db)
        if directory.lookup(username) is not None:
            print(f"User {username} already exists")
            sys.exit(1)
        user = directory.create_user(username, password, nickname=options.get("nickname"), status=status)
        print(f"Created user {user.username} (id={user.id})")
    finally:
        db.close()


def purge_sessions() -> None:
    """Delete session records whose expiry has passed."""
    from session_auth.core.database import SessionLocal
    from session_auth.core.logger import setup_logging
    from session_auth.services.session_store import SqlSessionStore

    setup_logging()
    db = SessionLocal()
    try:
        removed = SqlSessionStore(db).purge_expired()
    finally:
        db.close()
    print(f"Removed {removed} expired session(s)")


def init_env() -> None:
    """Copy `.env.example` to `.env` if `.env` is missing."""
    root = Path(__file__).resolve().parents[1]
    src = root / ".env.example"
    dst = root / ".env"
    if dst.exists():
        print(f".env already exists at {dst}")
        return
    if not src.exists():
        print(f".env.example not found at {src}")
        return
    shutil.copy(src, dst)
    print(f"Created .env from .env.example at {dst}")


COMMANDS = {
    "runserver": runserver,
    "run-tests": run_tests,
    "test": run_tests,
    "init-db": init_database,
    "create-user": create_user,
    "purge-sessions": purge_sessions,
    "init-env": init_env,
}


if __name__ == "__main__":
    # Allow running the helpers directly: python -m session_auth.cli runserver
    if len(sys.argv) <= 1:
        print(__doc__)
        sys.exit(0)
    cmd = sys.argv[1]
    sys.argv.pop(1)
    if cmd in COMMANDS:
        COMMANDS[cmd]()
    else:
        print(f"Unknown command: {cmd}")
        sys.exit(2)
