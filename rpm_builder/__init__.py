"""
rpm_builder package

This package implements a CLI-first RPM builder.

Key responsibilities are split across modules:
- `parsers.py`: parse `source:dest`, dependency and changelog arguments into typed records
- `walker.py`: expand a `source-dir:dest-dir` mapping into file entries
- `orchestrator.py`: assemble a `BuildSpec`, hand it to a backend, write the archive
- `backend.py`: the package-building collaborator (rpmbuild / rpmsign / gpg)
- `cli.py`: CLI entrypoint
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
