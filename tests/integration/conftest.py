import subprocess
import sys
from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def run_archive() -> Callable[..., subprocess.CompletedProcess]:
    """Runs a built archive with the current interpreter, capturing its output."""

    def _run(archive: Path, cwd: Path) -> subprocess.CompletedProcess:
        return subprocess.run(
            [sys.executable, str(archive)],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=60,
        )

    return _run
