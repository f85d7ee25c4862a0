from __future__ import annotations

from pathlib import Path

import pytest

from rpm_builder.backend import BuiltPackage, PgpSigner
from rpm_builder.models import BuildSpec


class RecordingBackend:
    """In-memory package backend that remembers what it was asked to build."""

    def __init__(self, payload: bytes = b"\xed\xab\xee\xdb") -> None:
        self.payload = payload
        self.builds: list[tuple[BuildSpec, PgpSigner | None]] = []

    def build(self, spec: BuildSpec, signer: PgpSigner | None = None) -> BuiltPackage:
        self.builds.append((spec, signer))
        return BuiltPackage(identifier=spec.identifier, payload=self.payload, spec=spec, signed=signer is not None)


@pytest.fixture
def recording_backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty working directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("RPM_BUILDER_SIGNING_KEY", raising=False)
    return tmp_path
