from __future__ import annotations

import os
from pathlib import Path

import pytest

from rpm_builder.errors import IoFailure, PathHasNoFilename
from rpm_builder.models import DirectoryMapping
from rpm_builder.walker import walk_directory


def _make_tree(root: Path) -> None:
    (root / "bin").mkdir(parents=True)
    (root / "share" / "icons").mkdir(parents=True)
    (root / "README").write_text("readme\n", encoding="utf-8")
    (root / "bin" / "tool").write_text("#!/bin/sh\n", encoding="utf-8")
    (root / "share" / "icons" / "tool.png").write_bytes(b"\x89PNG")


def test_walk_mirrors_relative_structure(tmp_path: Path) -> None:
    src = tmp_path / "src"
    _make_tree(src)

    files = walk_directory(DirectoryMapping(str(src), "/opt/tool"))

    by_destination = {f.destination_path: f for f in files}
    assert set(by_destination) == {
        "/opt/tool/README",
        "/opt/tool/bin/tool",
        "/opt/tool/share/icons/tool.png",
    }
    assert by_destination["/opt/tool/bin/tool"].source_path == str(src / "bin" / "tool")
    assert all(not f.is_config and not f.is_doc and f.mode_override is None for f in files)


def test_walk_is_idempotent(tmp_path: Path) -> None:
    src = tmp_path / "src"
    _make_tree(src)
    mapping = DirectoryMapping(str(src), "/opt/tool")

    first = {f.destination_path for f in walk_directory(mapping)}
    second = {f.destination_path for f in walk_directory(mapping)}
    assert first == second


def test_walk_empty_directory(tmp_path: Path) -> None:
    assert walk_directory(DirectoryMapping(str(tmp_path), "/empty")) == []


def test_walk_applies_directory_classification(tmp_path: Path) -> None:
    src = tmp_path / "etc"
    _make_tree(src)

    config_files = walk_directory(DirectoryMapping(str(src), "/etc/tool", is_config=True))
    doc_files = walk_directory(DirectoryMapping(str(src), "/usr/share/doc/tool", is_doc=True))

    assert config_files and all(f.is_config and not f.is_doc for f in config_files)
    assert doc_files and all(f.is_doc and not f.is_config for f in doc_files)


def test_walk_uses_symlink_target_as_source(tmp_path: Path) -> None:
    outside = tmp_path / "outside"
    outside.mkdir()
    target = outside / "real-name.conf"
    target.write_text("x=1\n", encoding="utf-8")
    src = tmp_path / "src"
    src.mkdir()
    os.symlink(target, src / "link-name.conf")

    files = walk_directory(DirectoryMapping(str(src), "/etc"))

    assert len(files) == 1
    assert files[0].source_path == str(target)
    # The destination takes the target's base name, not the link's.
    assert files[0].destination_path == "/etc/real-name.conf"


def test_walk_recurses_into_symlinked_directory(tmp_path: Path) -> None:
    outside = tmp_path / "outside" / "plugins"
    outside.mkdir(parents=True)
    (outside / "a.so").write_bytes(b"\x7fELF")
    src = tmp_path / "src"
    src.mkdir()
    os.symlink(outside, src / "linked")

    files = walk_directory(DirectoryMapping(str(src), "/usr/lib/tool"))

    assert [f.destination_path for f in files] == ["/usr/lib/tool/plugins/a.so"]
    assert files[0].source_path == str(outside / "a.so")


def test_walk_keeps_dangling_symlink_for_the_backend(tmp_path: Path) -> None:
    src = tmp_path / "src"
    src.mkdir()
    os.symlink(tmp_path / "missing.txt", src / "dangling")

    files = walk_directory(DirectoryMapping(str(src), "/data"))

    assert [f.destination_path for f in files] == ["/data/missing.txt"]


def test_walk_rejects_symlink_to_root(tmp_path: Path) -> None:
    src = tmp_path / "src"
    src.mkdir()
    os.symlink("/", src / "root")

    with pytest.raises(PathHasNoFilename):
        walk_directory(DirectoryMapping(str(src), "/data"))


def test_walk_missing_source_root(tmp_path: Path) -> None:
    missing = tmp_path / "nope"
    with pytest.raises(IoFailure) as excinfo:
        walk_directory(DirectoryMapping(str(missing), "/data"))
    assert str(missing) in str(excinfo.value)


def test_walk_rejects_symlink_loop(tmp_path: Path) -> None:
    src = tmp_path / "src"
    (src / "nested").mkdir(parents=True)
    (src / "nested" / "file.txt").write_text("x", encoding="utf-8")
    os.symlink(src, src / "nested" / "back-to-top")

    with pytest.raises(IoFailure) as excinfo:
        walk_directory(DirectoryMapping(str(src), "/opt/x"))
    assert "symlink loop" in str(excinfo.value)
    assert "back-to-top" in str(excinfo.value)


def test_walk_rejects_self_link(tmp_path: Path) -> None:
    src = tmp_path / "src"
    src.mkdir()
    os.symlink(src, src / "self")

    with pytest.raises(IoFailure):
        walk_directory(DirectoryMapping(str(src), "/opt/x"))


def test_walk_allows_sibling_links_to_same_directory(tmp_path: Path) -> None:
    shared = tmp_path / "shared"
    shared.mkdir()
    (shared / "lib.so").write_bytes(b"\x7fELF")
    src = tmp_path / "src"
    (src / "a").mkdir(parents=True)
    (src / "b").mkdir()
    os.symlink(shared, src / "a" / "link")
    os.symlink(shared, src / "b" / "link")

    files = walk_directory(DirectoryMapping(str(src), "/opt/x"))

    assert {f.destination_path for f in files} == {"/opt/x/a/shared/lib.so", "/opt/x/b/shared/lib.so"}
