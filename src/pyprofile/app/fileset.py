"""
Resolves command-line targets into the set of files to process.

Targets may be explicit source files, a directory, or an importable module
name. Files keep their position relative to ``Fileset.root`` when copied into
the work directory, so a package directory is rooted at its parent and keeps
its import name inside the archive.
"""

import importlib.util
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from pyprofile.common.errors import FilesetError

log = logging.getLogger(__name__)

IGNORED_DIRS = {"__pycache__"}


@dataclass
class Fileset:
    root: Path
    paths: List[Path] = field(default_factory=list)


def _is_package(directory: Path) -> bool:
    return (directory / "__init__.py").is_file()


def _relevant(name: str, suffixes: Sequence[str]) -> bool:
    return any(name.endswith(suffix) for suffix in suffixes)


def _directory_fileset(directory: Path, suffixes: Sequence[str]) -> Fileset:
    directory = directory.resolve()
    root = directory.parent if _is_package(directory) else directory
    paths: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(directory):
        dirnames[:] = sorted(
            d for d in dirnames if d not in IGNORED_DIRS and not d.startswith(".")
        )
        for filename in sorted(filenames):
            if _relevant(filename, suffixes):
                paths.append(Path(dirpath) / filename)
    return Fileset(root=root, paths=paths)


def _find_module(name: str) -> Optional[Path]:
    try:
        spec = importlib.util.find_spec(name)
    except (ImportError, ValueError) as e:
        log.debug(f"Could not resolve module {name}: {e}")
        return None
    if spec is None:
        return None
    if spec.submodule_search_locations:
        return Path(list(spec.submodule_search_locations)[0])
    if spec.origin and spec.origin.endswith(".py"):
        return Path(spec.origin)
    return None


def resolve_fileset(
    targets: Sequence[str], cwd: Path, suffixes: Sequence[str]
) -> Fileset:
    if not targets:
        return _directory_fileset(cwd, suffixes)

    if len(targets) == 1:
        target = cwd / targets[0]
        if target.is_file():
            target = target.resolve()
            return Fileset(root=target.parent, paths=[target])
        if target.is_dir():
            return _directory_fileset(target, suffixes)

        located = _find_module(targets[0])
        if located is None:
            raise FilesetError(
                f"'{targets[0]}' is neither a file, a directory nor an importable module"
            )
        located = located.resolve()
        if located.is_dir():
            return _directory_fileset(located, suffixes)
        return Fileset(root=located.parent, paths=[located])

    paths: List[Path] = []
    directory: Optional[Path] = None
    for arg in targets:
        path = (cwd / arg).resolve()
        if not path.exists():
            raise FilesetError(f"{arg}: no such file")
        if not path.is_file():
            raise FilesetError(f"{arg}: not a file; only one package may be given")
        if directory is None:
            directory = path.parent
        if directory != path.parent:
            raise FilesetError(
                f"named files must all be in one directory; have '{directory}' and '{path.parent}'"
            )
        paths.append(path)
    return Fileset(root=paths[0].parent, paths=paths)


def output_name(targets: Sequence[str], cwd: Path) -> str:
    """
    Base name for the default profile and archive: the working directory
    when nothing was named, otherwise the first target without its extension
    (or the last component of a dotted module name).
    """
    if not targets:
        return cwd.resolve().name

    first = targets[0]
    path = cwd / first
    if not path.exists():
        return first.rsplit(".", 1)[-1]
    name = path.resolve().name
    if "." in name:
        return name[: name.rindex(".")]
    return name
