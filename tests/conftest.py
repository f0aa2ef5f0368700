import sys
import os
import textwrap
from pathlib import Path

import pytest

# Ensure src/ is on sys.path so 'mcmas_runner' is importable without installing
SRC = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src'))
if SRC not in sys.path:
    sys.path.insert(0, SRC)


@pytest.fixture
def python_verifier():
    """The running interpreter stands in for the verifier: it executes the model file."""
    return Path(sys.executable)


@pytest.fixture
def models_dir(tmp_path):
    path = tmp_path / "models"
    path.mkdir()
    return path


@pytest.fixture
def make_model(models_dir):
    """Write a model file whose 'verification' is the given Python source."""

    def _make(name: str, source: str) -> Path:
        path = models_dir / name
        path.write_text(textwrap.dedent(source), encoding='utf-8')
        return path

    return _make
