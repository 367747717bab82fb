"""Static checks over the Alembic revision files.

Usage:
    python scripts/check_migration_chain.py

Fails when a revision id is missing or duplicated, when a down_revision
points at an unknown revision, or when the chain has more than one head
or more than one root.
"""

from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional

REVISION_RE = re.compile(r'^revision\s*=\s*["\']([^"\']+)["\']', re.MULTILINE)
DOWN_REVISION_RE = re.compile(r'^down_revision\s*=\s*(?:["\']([^"\']+)["\']|None)', re.MULTILINE)

VERSIONS_DIR = Path(__file__).resolve().parents[1] / "alembic" / "versions"


class ChainReport(NamedTuple):
    files: int
    heads: List[str]
    roots: List[str]
    errors: List[str]

    @property
    def ok(self) -> bool:
        return not self.errors


def inspect_chain(versions_dir: Path = VERSIONS_DIR) -> ChainReport:
    parents: Dict[str, Optional[str]] = {}
    origin: Dict[str, str] = {}
    errors: List[str] = []
    files = sorted(versions_dir.glob("*.py"))

    for path in files:
        source = path.read_text(encoding="utf-8")
        rev_match = REVISION_RE.search(source)
        if rev_match is None:
            errors.append(f"{path.name}: no revision id")
            continue
        rev = rev_match.group(1)
        if rev in origin:
            errors.append(f"{path.name}: revision {rev} already defined in {origin[rev]}")
            continue
        origin[rev] = path.name
        down_match = DOWN_REVISION_RE.search(source)
        parents[rev] = down_match.group(1) if down_match else None

    for rev, parent in parents.items():
        if parent is not None and parent not in parents:
            errors.append(f"{origin[rev]}: down_revision {parent} does not exist")

    referenced = {parent for parent in parents.values() if parent is not None}
    heads = sorted(rev for rev in parents if rev not in referenced)
    roots = sorted(rev for rev, parent in parents.items() if parent is None)
    if parents and len(heads) != 1:
        errors.append(f"expected one head, found {len(heads)}: {heads}")
    if parents and len(roots) != 1:
        errors.append(f"expected one root, found {len(roots)}: {roots}")

    return ChainReport(files=len(files), heads=heads, roots=roots, errors=errors)


def main() -> int:
    report = inspect_chain()
    print(f"Migration chain: {report.files} file(s)")
    for err in report.errors:
        print(f"[FAIL] {err}")
    if not report.ok:
        return 1
    print(f"[PASS] root {report.roots[0]} -> head {report.heads[0]}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
