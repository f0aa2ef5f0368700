"""Test startup path resolution."""

import pytest

from mcmas_runner.infrastructure.config import VerifierConfig, resolve_paths
from mcmas_runner.infrastructure.config import paths as paths_module


@pytest.fixture(autouse=True)
def no_mcmas_on_path(monkeypatch):
    monkeypatch.setattr(paths_module.shutil, "which", lambda name: None)


def test_explicit_paths_win(tmp_path):
    executable = tmp_path / "bin" / "mcmas"
    executable.parent.mkdir()
    executable.write_text("#!/bin/sh\n")
    models = tmp_path / "mine"
    models.mkdir()

    resolved = resolve_paths(VerifierConfig(executable=executable, models_dir=models), base_dir=tmp_path)

    assert resolved.executable == executable
    assert resolved.models_dir == models
    assert resolved.ok


def test_bundled_layout_is_found(tmp_path):
    system_files = tmp_path / "System Files"
    system_files.mkdir()
    (system_files / "mcmas").write_text("#!/bin/sh\n")
    (tmp_path / "Verification Models").mkdir()

    resolved = resolve_paths(VerifierConfig(), base_dir=tmp_path)

    assert resolved.executable == system_files / "mcmas"
    assert resolved.models_dir == tmp_path / "Verification Models"
    assert resolved.warnings == ()


def test_binary_next_to_base_preferred(tmp_path):
    (tmp_path / "mcmas").write_text("#!/bin/sh\n")
    (tmp_path / "System Files").mkdir()
    (tmp_path / "System Files" / "mcmas").write_text("#!/bin/sh\n")

    resolved = resolve_paths(VerifierConfig(), base_dir=tmp_path)

    assert resolved.executable == tmp_path / "mcmas"


def test_missing_locations_are_warnings(tmp_path):
    resolved = resolve_paths(VerifierConfig(), base_dir=tmp_path)

    assert not resolved.ok
    assert any("Models folder not found" in w for w in resolved.warnings)
    assert any("MCMAS binary not found" in w for w in resolved.warnings)
    assert resolved.executable == tmp_path / "System Files" / "mcmas"
