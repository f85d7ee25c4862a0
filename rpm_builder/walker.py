"""
walker.py

Responsibility: expand a `source-dir:dest-dir` mapping into file entries.

Rules:
- Relative structure under the source root is mirrored under the destination root.
- Symlinks are never packaged as links: the link value is read and used as the
  effective source. Relative link values are not rebased onto the link's
  directory, so they are resolved later against the working directory.
- Entries are returned in the order the filesystem yields them; callers must
  not rely on any ordering.

Each call returns its own list; nothing is accumulated across calls.
"""

from __future__ import annotations

import os
from pathlib import PurePosixPath

from rpm_builder.errors import IoFailure, PathHasNoFilename
from rpm_builder.logging import get_logger
from rpm_builder.models import DirectoryMapping, FileSpec

logger = get_logger("walker")


def _effective_source(entry: os.DirEntry[str]) -> str:
    if not entry.is_symlink():
        return entry.path
    try:
        return os.readlink(entry.path)
    except OSError as e:
        raise IoFailure(f"unable to read symlink {entry.path}: {e}") from e


def walk_directory(mapping: DirectoryMapping, *, _ancestors: frozenset[str] = frozenset()) -> list[FileSpec]:
    """
    Recursively list every file under `mapping.source_root`.

    Files inherit the mapping's config/doc classification. A directory that
    resolves to one of its own ancestors is a symlink loop and fails.
    """
    files: list[FileSpec] = []
    destination_root = PurePosixPath(mapping.destination_root)
    ancestors = _ancestors | {os.path.realpath(mapping.source_root)}

    try:
        entries = os.scandir(mapping.source_root)
    except OSError as e:
        raise IoFailure(f"unable to read directory {mapping.source_root}: {e}") from e

    with entries:
        for entry in entries:
            source = _effective_source(entry)
            name = os.path.basename(os.path.normpath(source))
            if not name or name in (os.curdir, os.pardir):
                raise PathHasNoFilename(f"path does not have a filename: {source!r} (from {entry.path})")

            destination = destination_root / name
            if os.path.isdir(source):
                if os.path.realpath(source) in ancestors:
                    raise IoFailure(f"symlink loop at {entry.path}")
                logger.debug("descending into %s -> %s", source, destination)
                files.extend(
                    walk_directory(
                        DirectoryMapping(
                            source_root=source,
                            destination_root=str(destination),
                            is_config=mapping.is_config,
                            is_doc=mapping.is_doc,
                        ),
                        _ancestors=ancestors,
                    )
                )
            else:
                files.append(
                    FileSpec(
                        source_path=source,
                        destination_path=str(destination),
                        is_config=mapping.is_config,
                        is_doc=mapping.is_doc,
                    )
                )
    return files
