"""
parsers.py

Responsibility: turn single-line CLI arguments into typed records.

Three deliberately small line grammars are supported:
- `<source-path>:<dest-path>` for files and directories
- `<name> [>|>=|=|<=|< <version>]` for dependency relations
- `<author>:<content>:<yyyy-mm-dd>` for changelog entries

There is no escaping: the `:` delimiter cannot appear inside a segment.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

from rpm_builder.errors import (
    InvalidDate,
    InvalidDependencyExpression,
    MalformedChangelogEntry,
    MalformedEntry,
)
from rpm_builder.models import (
    EXECUTABLE_MODE,
    ChangelogRecord,
    Comparison,
    DependencyRecord,
    DirectoryMapping,
    FileSpec,
)

DELIMITER = ":"

# The version is one token that cannot start with an operator, so `>=` is never read as `>` + `=1.0`.
_DEPENDENCY_RE = re.compile(r"^([A-Za-z0-9\-._]+)(?:\s*(>=|<=|>|<|=)\s*([^\s<>=]\S*)\s*)?$")
_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")


def _split_pair(raw: str) -> tuple[str, str]:
    parts = raw.split(DELIMITER)
    if len(parts) != 2 or not all(parts):
        raise MalformedEntry(
            f"invalid file argument: {raw!r} it needs to be of the form <source-path>:<dest-path>"
        )
    return parts[0], parts[1]


def parse_file_entry(
    raw: str,
    *,
    executable: bool = False,
    is_config: bool = False,
    is_doc: bool = False,
) -> FileSpec:
    """
    Parse `<source-path>:<dest-path>` into a `FileSpec`.

    Plain, executable, config and doc files share the grammar; the flags only
    set attributes on the result.
    """
    source, destination = _split_pair(raw)
    return FileSpec(
        source_path=source,
        destination_path=destination,
        mode_override=EXECUTABLE_MODE if executable else None,
        is_config=is_config,
        is_doc=is_doc,
    )


def parse_directory_mapping(raw: str, *, is_config: bool = False, is_doc: bool = False) -> DirectoryMapping:
    source, destination = _split_pair(raw)
    return DirectoryMapping(
        source_root=source,
        destination_root=destination,
        is_config=is_config,
        is_doc=is_doc,
    )


def parse_dependency(raw: str) -> DependencyRecord:
    """
    Parse `<name> [<op> <version>]`.

    Without an operator the relation is satisfied by any version of `name`.
    """
    match = _DEPENDENCY_RE.match(raw)
    if match is None:
        raise InvalidDependencyExpression(
            f"invalid pattern in dependency {raw!r}, use the format '<name> [>|>=|=|<=|< version]'"
        )
    name, operator, version = match.groups()
    if operator is None:
        return DependencyRecord(name)
    return DependencyRecord(name, Comparison(operator), version)


def parse_changelog_entry(raw: str) -> ChangelogRecord:
    """
    Parse `<author>:<content>:<yyyy-mm-dd>`.

    The date is read as midnight UTC; no time of day is ever taken from input.
    """
    parts = raw.split(DELIMITER)
    if len(parts) != 3:
        raise MalformedChangelogEntry(
            f"invalid changelog argument: {raw!r} it needs to be of the form <author>:<content>:<yyyy-mm-dd>"
        )
    author, description, raw_date = parts
    return ChangelogRecord(
        author=author,
        description=description,
        timestamp=parse_date(raw_date),
    )


def parse_date(raw: str) -> int:
    """Return the Unix timestamp of 00:00:00 UTC on a `YYYY-MM-DD` date."""
    if not _DATE_RE.match(raw):
        raise InvalidDate(f"error while parsing date {raw!r}, expected yyyy-mm-dd")
    try:
        date = datetime.strptime(raw, "%Y-%m-%d")
    except ValueError as e:
        raise InvalidDate(f"error while parsing date {raw!r}: {e}") from e
    return int(date.replace(tzinfo=timezone.utc).timestamp())
