# workdir.py
from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


@contextmanager
def pushd(path: str | Path) -> Iterator[Path]:
    """
    Change into `path` for the duration of the block.

    The previous working directory is restored on every exit path, including
    exceptions and KeyboardInterrupt.

    Raises:
        FileNotFoundError: if `path` does not exist.
        NotADirectoryError: if `path` is not a directory.
    """
    target = Path(path).expanduser().resolve()
    if not target.exists():
        raise FileNotFoundError(f"directory not found: {target}")
    if not target.is_dir():
        raise NotADirectoryError(f"not a directory: {target}")

    original_cwd = os.getcwd()
    os.chdir(target)
    try:
        yield target
    finally:
        os.chdir(original_cwd)
