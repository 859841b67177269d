from pathlib import Path

from pyprofile.app import InstrumentRunner, ZipappCompiler


def get_project_root() -> Path:
    return Path.cwd()


def make_runner() -> InstrumentRunner:
    # Composition root: the real zipapp compiler against the working directory.
    return InstrumentRunner(root_path=get_project_root(), compiler=ZipappCompiler())
