from __future__ import annotations

from pathlib import Path

from rpm_builder.output import resolve_output_path

IDENTIFIER = "pkg-1.0.0-1.noarch"


def test_no_path_uses_working_directory() -> None:
    assert resolve_output_path(None, IDENTIFIER) == Path("./pkg-1.0.0-1.noarch.rpm")


def test_existing_directory_gets_default_filename(tmp_path: Path) -> None:
    out = tmp_path / "out"
    out.mkdir()
    assert resolve_output_path(out, IDENTIFIER) == out / "pkg-1.0.0-1.noarch.rpm"
    assert resolve_output_path(str(out), IDENTIFIER) == out / "pkg-1.0.0-1.noarch.rpm"


def test_file_path_extension_is_forced(tmp_path: Path) -> None:
    assert resolve_output_path("/tmp/custom.bin", IDENTIFIER) == Path("/tmp/custom.rpm")
    assert resolve_output_path(tmp_path / "custom", IDENTIFIER) == tmp_path / "custom.rpm"
    assert resolve_output_path(tmp_path / "custom.rpm", IDENTIFIER) == tmp_path / "custom.rpm"


def test_existing_file_is_treated_as_file(tmp_path: Path) -> None:
    existing = tmp_path / "previous.out"
    existing.write_bytes(b"old")
    assert resolve_output_path(existing, IDENTIFIER) == tmp_path / "previous.rpm"
