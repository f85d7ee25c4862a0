"""
errors.py

Responsibility: the error taxonomy shared by parsers, walker, backend and CLI.

Every error is fatal to the run. The CLI turns any `BuildError` into a single
line on stderr and a non-zero exit code.
"""

from __future__ import annotations


class BuildError(RuntimeError):
    pass


class MalformedEntry(BuildError, ValueError):
    pass


class MalformedChangelogEntry(BuildError, ValueError):
    pass


class InvalidDependencyExpression(BuildError, ValueError):
    pass


class InvalidDate(BuildError, ValueError):
    pass


class PathHasNoFilename(BuildError):
    pass


class IoFailure(BuildError):
    pass


class BuilderFailure(BuildError):
    pass


class SigningFailure(BuildError):
    pass


class ConfigError(BuildError, ValueError):
    pass
