"""Application version.

The major.minor part comes from the VERSION file at the repository root; in
a git checkout the patch number is the commit count since the last tag.
Packaged builds overwrite _BAKED_VERSION instead.
"""

import subprocess
from pathlib import Path

_BAKED_VERSION = None

# editor/src/version.py -> repository root
_ROOT = Path(__file__).resolve().parent.parent.parent


def _read_major_minor() -> str:
    try:
        return (_ROOT / "VERSION").read_text().strip()
    except FileNotFoundError:
        return "0.0"


def _commits_since_tag():
    """Commit count after the latest tag, or None outside a git checkout."""
    try:
        result = subprocess.run(
            ['git', 'describe', '--tags', '--long'],
            capture_output=True, text=True, check=False, cwd=str(_ROOT),
        )
    except FileNotFoundError:
        return None
    if result.returncode != 0:
        return None
    # v0.3-5-gabcdef -> 5
    parts = result.stdout.strip().rsplit('-', 2)
    return parts[1] if len(parts) == 3 else None


def get_version() -> str:
    """Version string such as '0.3.5'."""
    if _BAKED_VERSION is not None:
        return _BAKED_VERSION
    return f"{_read_major_minor()}.{_commits_since_tag() or 0}"
