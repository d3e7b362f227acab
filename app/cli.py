"""Developer console scripts for the Snappie backend.

Usage (from project root, after `pip install -e .[test]`):
  runserver --host=0.0.0.0 --port=8000 --no-reload
  run-tests -k session        # forwards args to pytest, always with ENV=test
  migrate                     # defaults to `alembic upgrade head`
  init-env                    # writes .env with freshly generated secrets
"""
from __future__ import annotations

import os
import re
import secrets
import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Optional

ROOT = Path(__file__).resolve().parents[1]

# Keys that must never ship with the placeholder values from .env.example
GENERATED_SECRETS = ("REGISTRATION_API_KEY", "SECRET_KEY")


def _args() -> List[str]:
    return sys.argv[1:]


def runserver() -> None:
    """Serve `app.main:app` with uvicorn.

    --host=<host>  (default 127.0.0.1)
    --port=<port>  (default 8000)
    --no-reload / --reload  (default: reload only when DEBUG or ENV=development)
    """
    import uvicorn
    from app.core.config import settings

    host = "127.0.0.1"
    port = 8000
    reload = settings.diagnostics_enabled

    for a in _args():
        if a.startswith("--host="):
            host = a.split("=", 1)[1]
        elif a.startswith("--port="):
            value = a.split("=", 1)[1]
            if not value.isdigit():
                sys.exit(f"Invalid port: {value}")
            port = int(value)
        elif a == "--no-reload":
            reload = False
        elif a == "--reload":
            reload = True

    if not settings.REGISTRATION_API_KEY:
        print("warning: REGISTRATION_API_KEY is not set, POST /auth/register will answer 500")
    print(f"Starting {settings.APP_NAME} on {host}:{port}{settings.API_PREFIX} (env={settings.ENV}, reload={reload})")
    uvicorn.run("app.main:app", host=host, port=port, reload=reload, log_level=settings.LOG_LEVEL.lower())


def pytest_environ(base: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Environment for a pytest run: never points at a developer's real settings."""
    env = dict(os.environ if base is None else base)
    env["ENV"] = "test"
    env.pop("DEBUG", None)
    return env


def run_tests() -> None:
    """Run pytest with any forwarded args."""
    cmd = [sys.executable, "-m", "pytest"] + _args()
    subprocess.run(cmd, check=True, cwd=ROOT, env=pytest_environ())


def run_migrations() -> None:
    """Run alembic. If no args provided, runs `alembic upgrade head`."""
    from sqlalchemy.engine import make_url
    from app.core.config import settings

    args = _args() or ["upgrade", "head"]
    target = make_url(settings.DATABASE_URL).render_as_string(hide_password=True)
    print(f"alembic {' '.join(args)} -> {target}")
    subprocess.run(["alembic"] + args, check=True, cwd=ROOT)


def render_env(template: str, token_bytes: int = 32) -> str:
    """Fill the secret keys of an .env template with fresh random values."""
    rendered = template
    for key in GENERATED_SECRETS:
        value = secrets.token_urlsafe(token_bytes)
        pattern = re.compile(rf"^{key}=.*$", re.MULTILINE)
        if pattern.search(rendered):
            rendered = pattern.sub(f"{key}={value}", rendered)
        else:
            rendered = rendered.rstrip("\n") + f"\n{key}={value}\n"
    return rendered


def init_env() -> None:
    """Write `.env` from `.env.example` with generated secrets, unless `.env` exists."""
    src = ROOT / ".env.example"
    dst = ROOT / ".env"
    if dst.exists():
        print(f".env already exists at {dst}")
        return
    if not src.exists():
        print(f".env.example not found at {src}")
        return
    dst.write_text(render_env(src.read_text()))
    print(f"Created {dst} with new {', '.join(GENERATED_SECRETS)}")


if __name__ == "__main__":
    # Allow running the helpers directly: python -m app.cli runserver
    if len(sys.argv) <= 1:
        print(__doc__)
        sys.exit(0)
    cmd = sys.argv.pop(1)
    commands = {
        "runserver": runserver,
        "run-tests": run_tests,
        "migrate": run_migrations,
        "init-env": init_env,
    }
    if cmd not in commands:
        sys.exit(f"Unknown command: {cmd}")
    commands[cmd]()
