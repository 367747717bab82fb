"""FarmLedger deployment preflight.

Usage:
    python scripts/db_preflight.py

Reads the environment directly (not ``Settings``) so that a misconfigured
production environment is reported line by line instead of failing on the
first validator error. Exits non-zero when any required control fails.
"""

from __future__ import annotations

import os
import sys
from typing import Callable, List, NamedTuple

# Mirrors farmledger.config.DEFAULT_SECRET_KEY; importing the config would
# instantiate Settings and stop at its first production error.
DEFAULT_SECRET_KEY = "farmledger-dev-secret-key-change-in-production"
PRODUCTION_NAMES = {"production", "prod"}


class Check(NamedTuple):
    title: str
    ok: bool
    detail: str


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _production_checks() -> List[Check]:
    database_url = os.getenv("DATABASE_URL", "sqlite:///./farmledger.db")
    secret_key = os.getenv("SECRET_KEY", DEFAULT_SECRET_KEY)
    auto_create = _env_flag("AUTO_CREATE_TABLES", True)
    debug = _env_flag("DEBUG", True)
    return [
        Check("DATABASE_URL points at a server database", "sqlite" not in database_url.lower(),
              database_url.split("@")[-1]),
        Check("SECRET_KEY was changed from the development default", secret_key != DEFAULT_SECRET_KEY,
              "custom" if secret_key != DEFAULT_SECRET_KEY else "default"),
        Check("SECRET_KEY is at least 32 characters", len(secret_key) >= 32, f"length={len(secret_key)}"),
        Check("AUTO_CREATE_TABLES is off (schema comes from Alembic)", not auto_create,
              f"AUTO_CREATE_TABLES={auto_create}"),
        Check("DEBUG is off", not debug, f"DEBUG={debug}"),
    ]


def run(echo: Callable[[str], None] = print) -> int:
    environment = os.getenv("ENVIRONMENT", "development").strip().lower()
    checks = [Check("ENVIRONMENT is set", bool(environment), environment or "<empty>")]
    if environment in PRODUCTION_NAMES:
        checks.extend(_production_checks())

    echo(f"FarmLedger preflight (environment: {environment})")
    for check in checks:
        echo(f"[{'PASS' if check.ok else 'FAIL'}] {check.title} ({check.detail})")

    failed = [c for c in checks if not c.ok]
    if failed:
        echo(f"\n{len(failed)} check(s) failed. Fix them before deploying.")
        return 1
    echo("\nAll checks passed.")
    return 0


if __name__ == "__main__":
    sys.exit(run())
