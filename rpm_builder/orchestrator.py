"""
orchestrator.py

Responsibility: sequence one package build from raw option strings.

High-level flow:
1) Parse every file, directory, scriptlet, changelog and dependency argument
2) Assemble a single immutable `BuildSpec`
3) (Optional) Load the PGP signing key
4) Hand the spec to a `PackageBackend`
5) Resolve the output path from the built package's identifier and write it

Any failure aborts the run before anything is written. The output file only
appears once the archive has been fully built in memory.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from rpm_builder.backend import PackageBackend, PgpSigner, RpmbuildBackend, load_signer
from rpm_builder.errors import BuildError, BuilderFailure, IoFailure
from rpm_builder.logging import get_logger
from rpm_builder.models import (
    DEFAULT_COMPRESSION,
    BuildSpec,
    ChangelogRecord,
    Compression,
    DependencyRecord,
    FileSpec,
    RelationKind,
    Scriptlets,
)
from rpm_builder.output import resolve_output_path
from rpm_builder.parsers import (
    parse_changelog_entry,
    parse_dependency,
    parse_directory_mapping,
    parse_file_entry,
)
from rpm_builder.walker import walk_directory

logger = get_logger("orchestrator")


@dataclass(frozen=True)
class BuildOptions:
    """Raw, unparsed inputs for one invocation."""

    name: str
    out: str | None = None
    epoch: int = 0
    version: str = "1.0.0"
    release: str = "1"
    arch: str = "noarch"
    license: str = "MIT"
    summary: str = ""
    compression: Compression = DEFAULT_COMPRESSION
    file: tuple[str, ...] = ()
    exec_file: tuple[str, ...] = ()
    doc_file: tuple[str, ...] = ()
    config_file: tuple[str, ...] = ()
    dir: tuple[str, ...] = ()
    config_dir: tuple[str, ...] = ()
    doc_dir: tuple[str, ...] = ()
    changelog: tuple[str, ...] = ()
    requires: tuple[str, ...] = ()
    provides: tuple[str, ...] = ()
    obsoletes: tuple[str, ...] = ()
    conflicts: tuple[str, ...] = ()
    suggests: tuple[str, ...] = ()
    recommends: tuple[str, ...] = ()
    enhances: tuple[str, ...] = ()
    supplements: tuple[str, ...] = ()
    pre_install_script: str | None = None
    post_install_script: str | None = None
    pre_uninstall_script: str | None = None
    post_uninstall_script: str | None = None
    sign_with_pgp_asc: str | None = None


def _collect_files(options: BuildOptions) -> list[FileSpec]:
    files: list[FileSpec] = []

    files.extend(parse_file_entry(raw) for raw in options.file)
    files.extend(parse_file_entry(raw, executable=True) for raw in options.exec_file)
    files.extend(parse_file_entry(raw, is_config=True) for raw in options.config_file)

    mappings = [(raw, "dir", parse_directory_mapping(raw)) for raw in options.dir]
    mappings += [
        (raw, "config-dir", parse_directory_mapping(raw, is_config=True)) for raw in options.config_dir
    ]
    mappings += [(raw, "doc-dir", parse_directory_mapping(raw, is_doc=True)) for raw in options.doc_dir]
    for raw, option_name, mapping in mappings:
        try:
            walked = walk_directory(mapping)
        except BuildError as e:
            raise type(e)(f"error adding {option_name} {raw}: {e}") from e
        logger.debug("dir %s -> %s: %d file(s)", mapping.source_root, mapping.destination_root, len(walked))
        files.extend(walked)

    files.extend(parse_file_entry(raw, is_doc=True) for raw in options.doc_file)
    return files


def _read_scriptlet(option_name: str, path: str | None) -> str | None:
    if path is None:
        return None
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise IoFailure(f"error reading {option_name} {path}: {e}") from e


def _load_scriptlets(options: BuildOptions) -> Scriptlets:
    return Scriptlets(
        pre_install=_read_scriptlet("pre-install-script", options.pre_install_script),
        post_install=_read_scriptlet("post-install-script", options.post_install_script),
        pre_uninstall=_read_scriptlet("pre-uninstall-script", options.pre_uninstall_script),
        post_uninstall=_read_scriptlet("post-uninstall-script", options.post_uninstall_script),
    )


def _collect_changelog(options: BuildOptions) -> list[ChangelogRecord]:
    return [parse_changelog_entry(raw) for raw in options.changelog]


def _collect_dependencies(options: BuildOptions) -> dict[RelationKind, tuple[DependencyRecord, ...]]:
    # BuildOptions fields are named after the relation kinds.
    return {
        kind: tuple(parse_dependency(raw) for raw in getattr(options, kind.value))
        for kind in RelationKind
    }


def assemble_build_spec(options: BuildOptions) -> BuildSpec:
    """Parse every raw input and return the finished `BuildSpec`."""
    files = _collect_files(options)
    scriptlets = _load_scriptlets(options)
    changelog = _collect_changelog(options)
    dependencies = _collect_dependencies(options)
    return BuildSpec(
        name=options.name,
        version=options.version,
        release=options.release,
        epoch=options.epoch,
        arch=options.arch,
        license=options.license,
        summary=options.summary,
        files=tuple(files),
        dependencies=dependencies,
        changelog=tuple(changelog),
        scriptlets=scriptlets,
        compression=options.compression,
    )


def _default_file_mode() -> int:
    # mkstemp creates 0600; match what a plain open() would have produced.
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _atomic_write(target_path: Path, payload: bytes) -> None:
    directory = target_path.parent
    try:
        fd, temp_name = tempfile.mkstemp(prefix=f".{target_path.name}.", suffix=".tmp", dir=directory)
    except OSError as e:
        raise IoFailure(f"unable to create output file {target_path}: {e}") from e
    temp_file = Path(temp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
        os.chmod(temp_file, _default_file_mode())
        os.replace(temp_file, target_path)
    except OSError as e:
        if temp_file.exists():
            temp_file.unlink()
        raise IoFailure(f"unable to write package to path {target_path}: {e}") from e


def build_package(options: BuildOptions, backend: PackageBackend | None = None) -> Path:
    """
    Build one package and write it to disk. Returns the path written.
    """
    spec = assemble_build_spec(options)

    signer: PgpSigner | None = None
    if options.sign_with_pgp_asc:
        signer = load_signer(options.sign_with_pgp_asc)

    backend = backend or RpmbuildBackend()
    logger.info("building %s", spec.identifier)
    package = backend.build(spec, signer)
    if not package.payload:
        raise BuilderFailure(f"backend produced an empty archive for {package.identifier}")

    output_path = resolve_output_path(options.out, package.identifier)
    _atomic_write(output_path, package.payload)
    logger.info("wrote %s (%d bytes%s)", output_path, len(package.payload), ", signed" if package.signed else "")
    return output_path
