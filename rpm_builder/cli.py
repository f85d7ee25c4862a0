"""
cli.py

Responsibility: CLI entrypoint for rpm-builder.

High-level flow (single command):
1) Parse flags; merge them over an optional YAML defaults file
2) Hand the resulting `BuildOptions` to the orchestrator
3) Report the written path, or a single error line on stderr

Argument grammars live in `parsers.py`; this module only declares flags.
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import Any

from rpm_builder.backend import RpmbuildBackend
from rpm_builder.config import LIST_KEYS, SCALAR_KEYS, load_config
from rpm_builder.errors import BuildError, ConfigError
from rpm_builder.logging import configure_logging
from rpm_builder.models import Compression
from rpm_builder.orchestrator import BuildOptions, build_package

SIGNING_KEY_ENV = "RPM_BUILDER_SIGNING_KEY"

DEPENDENCY_FORMAT = "Use the format '<name> [>|>=|=|<=|< version]'"


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="rpm-builder", description="Build RPMs with ease")
    p.add_argument("name", help="Specify the name of your package")
    p.add_argument("-o", "--out", default=None, help="Specify an out file or directory")

    p.add_argument("--epoch", type=int, default=None, help="Specify an epoch (default: 0)")
    p.add_argument("--version", default=None, help="Specify a version (default: 1.0.0)")
    p.add_argument("--release", default=None, help="Specify release number of the package (default: 1)")
    p.add_argument("--arch", default=None, help="Specify the target architecture (default: noarch)")
    p.add_argument("--license", default=None, help="Specify a license (default: MIT)")
    p.add_argument("--summary", default=None, help="Give a simple description of the package")
    p.add_argument(
        "--compression",
        choices=[c.value for c in Compression],
        default=None,
        help="Specify the compression algorithm (default: none)",
    )

    p.add_argument("--file", action="append", metavar="SRC:DEST", help="Add a regular file to the rpm")
    p.add_argument("--exec-file", action="append", metavar="SRC:DEST", help="Add an executable file to the rpm")
    p.add_argument("--doc-file", action="append", metavar="SRC:DEST", help="Add a documentation file to the rpm")
    p.add_argument("--config-file", action="append", metavar="SRC:DEST", help="Add a config file to the rpm")
    p.add_argument("--dir", action="append", metavar="SRC:DEST", help="Add a directory and all its files to the rpm")
    p.add_argument(
        "--config-dir",
        action="append",
        metavar="SRC:DEST",
        help="Add a directory and mark all its files as config files",
    )
    p.add_argument(
        "--doc-dir",
        action="append",
        metavar="SRC:DEST",
        help="Add a directory and mark all its files as documentation",
    )
    p.add_argument(
        "--changelog",
        action="append",
        metavar="CHANGELOG_ENTRY",
        help="Add a changelog entry to the rpm. The entry has the form <author>:<content>:<yyyy-mm-dd> (time is in UTC)",
    )

    for relation in (
        "requires",
        "provides",
        "obsoletes",
        "conflicts",
        "suggests",
        "recommends",
        "enhances",
        "supplements",
    ):
        p.add_argument(
            f"--{relation}",
            action="append",
            metavar=relation.upper(),
            help=f"Indicates that the rpm {relation} another package. {DEPENDENCY_FORMAT}",
        )

    p.add_argument("--pre-install-script", default=None, help="Path to a file that contains the pre-installation script")
    p.add_argument("--post-install-script", default=None, help="Path to a file that contains the post-installation script")
    p.add_argument("--pre-uninstall-script", default=None, help="Path to a file that contains a pre-uninstall script")
    p.add_argument("--post-uninstall-script", default=None, help="Path to a file that contains a post-uninstall script")
    p.add_argument(
        "--sign-with-pgp-asc",
        default=None,
        help=f"Sign this package with the specified PGP secret key (or set env {SIGNING_KEY_ENV})",
    )

    p.add_argument("--config", default=None, help="YAML file with default values for any of the options above")
    p.add_argument("--rpmbuild", default="rpmbuild", help="rpmbuild executable (default: rpmbuild)")
    p.add_argument("--rpmsign", default="rpmsign", help="rpmsign executable (default: rpmsign)")
    p.add_argument("--gpg", default="gpg", help="gpg executable (default: gpg)")
    p.add_argument("--gpgconf", default="gpgconf", help="gpgconf executable (default: gpgconf)")
    p.add_argument("-v", "--verbose", action="store_true", help="Increase log verbosity for troubleshooting.")
    return p


def _build_options(args: argparse.Namespace) -> BuildOptions:
    """
    Layer CLI flags over the optional config file over `BuildOptions` defaults.
    """
    config = load_config(args.config) if args.config else {}

    values: dict[str, Any] = {"name": args.name}
    for key in sorted(SCALAR_KEYS):
        cli_value = getattr(args, key)
        if cli_value is not None:
            values[key] = cli_value
        elif key in config:
            values[key] = config[key]

    for key in sorted(LIST_KEYS):
        values[key] = tuple(config.get(key, ())) + tuple(getattr(args, key) or ())

    if not values.get("sign_with_pgp_asc"):
        values["sign_with_pgp_asc"] = os.environ.get(SIGNING_KEY_ENV) or None

    compression = values.pop("compression", None)
    if compression is not None:
        try:
            values["compression"] = Compression(compression)
        except ValueError as e:
            raise ConfigError(f"invalid compression {compression!r}, choose from gzip, zstd, none") from e

    return BuildOptions(**values)


def build_cmd(args: argparse.Namespace) -> int:
    options = _build_options(args)
    backend = RpmbuildBackend(
        rpmbuild=args.rpmbuild,
        rpmsign=args.rpmsign,
        gpg=args.gpg,
        gpgconf=args.gpgconf,
    )
    output_path = build_package(options, backend)
    print(output_path)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=bool(args.verbose))
    try:
        return build_cmd(args)
    except BuildError as exc:
        print(f"rpm-builder: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
