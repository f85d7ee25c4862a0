"""
output.py

Responsibility: decide where the finished archive is written.

Resolution happens after the build, once the package identifier is known.
"""

from __future__ import annotations

from pathlib import Path

RPM_SUFFIX = ".rpm"


def resolve_output_path(out: str | Path | None, identifier: str) -> Path:
    """
    Resolve the archive path from an optional user path and `name-version-release.arch`.

    - no path: `./<identifier>.rpm`
    - an existing directory: `<dir>/<identifier>.rpm`
    - anything else: that path with its extension forced to `.rpm`
    """
    filename = f"{identifier}{RPM_SUFFIX}"
    if out is None:
        return Path(".") / filename
    path = Path(out)
    if path.is_dir():
        return path / filename
    return path.with_suffix(RPM_SUFFIX)
