"""Test model discovery."""

import pytest

from mcmas_runner.domain.exceptions import CatalogError
from mcmas_runner.domain.models import ItemStatus
from mcmas_runner.infrastructure.catalog.scanner import ModelScanner


def test_scan_lists_matching_files_sorted(models_dir):
    for name in ("muddy.ispl", "bit.ispl", "notes.txt", "card.ISPL"):
        (models_dir / name).write_text("x")
    (models_dir / "dir.ispl").mkdir()

    items = ModelScanner().scan(models_dir)

    assert [item.name for item in items] == ["bit.ispl", "muddy.ispl"]
    assert all(item.path.is_absolute() for item in items)
    assert all(item.status is ItemStatus.PENDING and not item.selected for item in items)


def test_extension_without_dot(models_dir):
    (models_dir / "a.smv").write_text("x")
    (models_dir / "b.ispl").write_text("x")

    items = ModelScanner("smv").scan(models_dir)

    assert [item.name for item in items] == ["a.smv"]


def test_missing_folder_raises(tmp_path):
    with pytest.raises(CatalogError):
        ModelScanner().scan(tmp_path / "missing")


def test_empty_extension_rejected():
    with pytest.raises(ValueError):
        ModelScanner("")
