"""
models.py

Responsibility: typed, immutable records describing one package build.

Parsers and the directory walker produce `FileSpec`, `DependencyRecord` and
`ChangelogRecord` values; the orchestrator gathers them into a single
`BuildSpec`, which a backend consumes exactly once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping

EXECUTABLE_MODE = 0o755


class Comparison(Enum):
    ANY = ""
    EQ = "="
    LESS = "<"
    LESS_EQ = "<="
    GREATER = ">"
    GREATER_EQ = ">="


class RelationKind(Enum):
    REQUIRES = "requires"
    PROVIDES = "provides"
    OBSOLETES = "obsoletes"
    CONFLICTS = "conflicts"
    SUGGESTS = "suggests"
    RECOMMENDS = "recommends"
    ENHANCES = "enhances"
    SUPPLEMENTS = "supplements"

    @property
    def tag(self) -> str:
        """Spec-file tag name, e.g. `Requires`."""
        return self.value.capitalize()


class Compression(Enum):
    GZIP = "gzip"
    ZSTD = "zstd"
    NONE = "none"


DEFAULT_COMPRESSION = Compression.NONE


@dataclass(frozen=True)
class FileSpec:
    """A single file to package: where to read it and where it installs."""

    source_path: str
    destination_path: str
    mode_override: int | None = None
    is_config: bool = False
    is_doc: bool = False


@dataclass(frozen=True)
class DependencyRecord:
    name: str
    comparison: Comparison = Comparison.ANY
    version: str | None = None

    def render(self) -> str:
        if self.comparison is Comparison.ANY or self.version is None:
            return self.name
        return f"{self.name} {self.comparison.value} {self.version}"


@dataclass(frozen=True)
class ChangelogRecord:
    """Changelog line; `timestamp` is midnight UTC of the entry's date."""

    author: str
    description: str
    timestamp: int


@dataclass(frozen=True)
class DirectoryMapping:
    source_root: str
    destination_root: str
    is_config: bool = False
    is_doc: bool = False


@dataclass(frozen=True)
class Scriptlets:
    pre_install: str | None = None
    post_install: str | None = None
    pre_uninstall: str | None = None
    post_uninstall: str | None = None


def _freeze_dependencies(
    dependencies: Mapping[RelationKind, tuple[DependencyRecord, ...]],
) -> Mapping[RelationKind, tuple[DependencyRecord, ...]]:
    # Every kind is present, in declaration order, even when empty.
    return MappingProxyType({kind: tuple(dependencies.get(kind, ())) for kind in RelationKind})


@dataclass(frozen=True)
class BuildSpec:
    """
    Everything needed to produce one package artifact.

    Built once per invocation from fully parsed parts; never mutated afterwards.
    """

    name: str
    version: str = "1.0.0"
    release: str = "1"
    epoch: int = 0
    arch: str = "noarch"
    license: str = "MIT"
    summary: str = ""
    files: tuple[FileSpec, ...] = ()
    dependencies: Mapping[RelationKind, tuple[DependencyRecord, ...]] = field(default_factory=dict)
    changelog: tuple[ChangelogRecord, ...] = ()
    scriptlets: Scriptlets = field(default_factory=Scriptlets)
    compression: Compression = DEFAULT_COMPRESSION

    def __post_init__(self) -> None:
        object.__setattr__(self, "files", tuple(self.files))
        object.__setattr__(self, "changelog", tuple(self.changelog))
        object.__setattr__(self, "dependencies", _freeze_dependencies(self.dependencies))

    @property
    def identifier(self) -> str:
        """Canonical `name-version-release.arch` string used to name the archive."""
        return f"{self.name}-{self.version}-{self.release}.{self.arch}"

    @property
    def evr(self) -> str:
        prefix = f"{self.epoch}:" if self.epoch else ""
        return f"{prefix}{self.version}-{self.release}"

    @property
    def self_provides(self) -> DependencyRecord:
        return DependencyRecord(self.name, Comparison.EQ, self.evr)

    def dependencies_of(self, kind: RelationKind) -> tuple[DependencyRecord, ...]:
        return self.dependencies[kind]

    def all_provides(self) -> tuple[DependencyRecord, ...]:
        """Declared provides plus the package's implicit self-provide."""
        return (self.self_provides, *self.dependencies_of(RelationKind.PROVIDES))
