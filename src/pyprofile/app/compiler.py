import logging
import shlex
import shutil
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from pyprofile.common.errors import BuildError

log = logging.getLogger(__name__)


class Compiler(Protocol):
    def build(
        self,
        source_dir: Path,
        output: Path,
        entry: Optional[str],
        flags: Sequence[str],
    ) -> None: ...


class ZipappCompiler:
    """
    Bundles the processed tree into a runnable archive with
    ``python -m zipapp``. The archive is staged outside ``source_dir`` so the
    output never ends up inside itself, then moved into place.
    """

    def __init__(self, python: Optional[str] = None):
        self.python = python or sys.executable

    def command(
        self,
        source_dir: Path,
        output: Path,
        entry: Optional[str],
        flags: Sequence[str],
    ) -> List[str]:
        cmd = [self.python, "-m", "zipapp", str(source_dir), "-o", str(output)]
        cmd.extend(flags)
        if entry:
            cmd.extend(["-m", entry])
        return cmd

    def build(
        self,
        source_dir: Path,
        output: Path,
        entry: Optional[str],
        flags: Sequence[str],
    ) -> None:
        with tempfile.TemporaryDirectory(prefix="pyprofile-build") as staging:
            staged = Path(staging) / output.name
            cmd = self.command(source_dir, staged, entry, flags)
            log.debug(f"Running: {shlex.join(cmd)}")
            result = subprocess.run(cmd)
            if result.returncode != 0:
                raise BuildError(result.returncode, shlex.join(cmd))
            output.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(staged), str(output))
