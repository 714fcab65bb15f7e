"""Static checks over the Alembic revision files.

Usage:
    python scripts/check_migration_chain.py

Fails when a revision id is duplicated, a down_revision points nowhere, the
chain has more than one head, or a file name does not start with its
revision id.
"""

from __future__ import annotations

import re
import sys
from pathlib import Path


REVISION_RE = re.compile(r'^revision\s*=\s*["\']([^"\']+)["\']', re.MULTILINE)
DOWN_RE = re.compile(r'^down_revision\s*=\s*(.+)$', re.MULTILINE)
VERSIONS_DIR = Path(__file__).resolve().parents[1] / "alembic" / "versions"


def _parse_down(raw: str) -> str | None:
    raw = raw.strip()
    if raw.startswith(("'", '"')) and raw.endswith(("'", '"')):
        return raw[1:-1]
    return None


def find_problems(versions_dir: Path = VERSIONS_DIR) -> tuple[list[str], list[str]]:
    """Returns ``(heads, errors)`` for the revision files in ``versions_dir``."""
    revisions: dict[str, Path] = {}
    parents: dict[str, str | None] = {}
    errors: list[str] = []

    for path in sorted(versions_dir.glob("*.py")):
        source = path.read_text(encoding="utf-8")
        rev_match = REVISION_RE.search(source)
        if not rev_match:
            errors.append(f"{path.name}: no revision id")
            continue

        rev = rev_match.group(1)
        if rev in revisions:
            errors.append(f"revision {rev} declared in both {revisions[rev].name} and {path.name}")
        if not path.name.startswith(rev):
            errors.append(f"{path.name}: file name should start with {rev}")
        revisions[rev] = path

        down_match = DOWN_RE.search(source)
        parents[rev] = _parse_down(down_match.group(1)) if down_match else None

    for rev, parent in parents.items():
        if parent is not None and parent not in revisions:
            errors.append(f"revision {rev} revises unknown {parent}")

    referenced = {p for p in parents.values() if p is not None}
    heads = [r for r in revisions if r not in referenced]
    if len(heads) != 1:
        errors.append(f"expected a single head, found {len(heads)}: {heads}")
    return heads, errors


def main() -> int:
    heads, errors = find_problems()
    print("Migration chain check")
    for err in errors:
        print(f"[FAIL] {err}")
    if errors:
        return 1
    print(f"[PASS] single head: {heads[0]}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
