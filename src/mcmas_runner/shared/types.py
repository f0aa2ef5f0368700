"""Common type definitions."""

from typing import Callable, Union
from pathlib import Path

# Type alias for paths
PathLike = Union[str, Path]

# Receives each chunk of text appended to the batch log
LogListener = Callable[[str], None]
