"""
Enforce: DB reads/writes (session.execute, session.query, get_db(...)) only in repo.py.
Repo is the single place for DB access; routes, services and cron go through DescriptionCache.
"""

import subprocess
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
SCANNED_DIRS = ("apps", "cron")
ALLOWED_DB_ACCESS_FILES = {"apps/api/services/repo.py", "apps/api/db.py"}


def _grep_pattern(pattern: str) -> list[tuple[str, int, str]]:
    """Run ripgrep over the scanned source dirs (tests excluded), return [(file, line_no, line), ...]."""
    try:
        out = subprocess.run(
            ["rg", "-n", pattern, "--type", "py", "--glob", "!**/tests/**", *SCANNED_DIRS],
            capture_output=True,
            text=True,
            check=False,
            cwd=ROOT,
        )
    except FileNotFoundError:
        return []  # rg not installed, skip
    if out.returncode != 0:
        return []  # no matches
    results = []
    for line in (out.stdout or "").strip().split("\n"):
        parts = line.split(":", 2)
        if len(parts) == 3:
            try:
                results.append((parts[0], int(parts[1]), parts[2].strip()))
            except ValueError:
                pass
    return results


def _path_in_allowed(p: str) -> bool:
    normalized = p.replace("\\", "/")
    if normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized in ALLOWED_DB_ACCESS_FILES


def _assert_only_in_repo(pattern: str, what: str) -> None:
    bad = [(f, ln, c) for f, ln, c in _grep_pattern(pattern) if not _path_in_allowed(f)]
    assert not bad, f"{what} must only be in repo.py. Found in:\n" + "\n".join(
        f"  {f}:{ln}: {c}" for f, ln, c in bad
    )


def test_no_session_execute_outside_repo() -> None:
    _assert_only_in_repo(r"session\.execute", "session.execute")


def test_no_session_query_outside_repo() -> None:
    _assert_only_in_repo(r"session\.query", "session.query")


def test_no_get_db_call_outside_repo() -> None:
    """get_db(...) may only be called from repo.py (db.py defines it)."""
    _assert_only_in_repo(r"get_db\s*\(", "get_db()")
