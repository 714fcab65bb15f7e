"""Deployment preflight for SmartHourly.

Usage:
    python scripts/db_preflight.py

Reads the same environment variables as ``smarthourly.config`` and exits
non-zero when a production deployment would be unsafe or misconfigured.
"""

from __future__ import annotations

import os
import sys
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


DEFAULT_SECRET = "smarthourly-secret-key-change-in-production"


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _timezone_ok(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def _line_count_ok(raw: str) -> bool:
    return raw.isdigit() and int(raw) >= 1


def collect_checks(env: dict) -> list[tuple[str, bool, str]]:
    environment = env.get("ENVIRONMENT", "development").strip().lower()
    database_url = env.get("DATABASE_URL", "sqlite:///./smarthourly.db")
    secret_key = env.get("SECRET_KEY", DEFAULT_SECRET)
    timezone = env.get("PLANT_TIMEZONE", "Asia/Kolkata")
    line_count = env.get("PRODUCTION_LINE_COUNT", "18").strip()

    checks: list[tuple[str, bool, str]] = [
        ("PLANT_TIMEZONE is a known IANA zone", _timezone_ok(timezone), f"PLANT_TIMEZONE={timezone}"),
        ("PRODUCTION_LINE_COUNT is a positive integer", _line_count_ok(line_count), f"PRODUCTION_LINE_COUNT={line_count}"),
    ]

    if environment in {"production", "prod"}:
        auto_create_tables = env.get("AUTO_CREATE_TABLES", "true").strip().lower() in {"1", "true", "yes", "y", "on"}
        has_factory_creds = bool(env.get("FACTORY_API_USER")) and bool(env.get("FACTORY_API_PASS"))
        checks.extend(
            [
                ("DATABASE_URL is not SQLite", "sqlite" not in database_url.lower(), f"DATABASE_URL={database_url}"),
                (
                    "SECRET_KEY is not the default value",
                    secret_key != DEFAULT_SECRET,
                    "SECRET_KEY is custom" if secret_key != DEFAULT_SECRET else "SECRET_KEY is default",
                ),
                ("AUTO_CREATE_TABLES is disabled", not auto_create_tables, f"AUTO_CREATE_TABLES={auto_create_tables}"),
                (
                    "Factory API credentials are set",
                    has_factory_creds,
                    "FACTORY_API_USER/FACTORY_API_PASS present" if has_factory_creds else "missing",
                ),
            ]
        )
    return checks


def run() -> int:
    environment = os.getenv("ENVIRONMENT", "development").strip().lower()
    checks = collect_checks(dict(os.environ))

    print("SmartHourly Preflight")
    print(f"- environment: {environment}")
    failed = [title for title, ok, _ in checks if not ok]
    for title, ok, detail in checks:
        print(f"[{'PASS' if ok else 'FAIL'}] {title} ({detail})")

    if failed:
        print(f"\nPreflight failed ({len(failed)} check(s)). Resolve them before deployment.")
        return 1

    print("\nPreflight passed.")
    return 0


if __name__ == "__main__":
    sys.exit(run())
