import logging
import os
import shutil
from pathlib import Path

log = logging.getLogger(__name__)


def create_exclusive(path: Path):
    """Opens ``path`` for binary writing, failing if it already exists."""
    path.parent.mkdir(parents=True, exist_ok=True)
    return open(path, "xb")


def copy_file(src: Path, dest: Path) -> None:
    """Copies a file to a new location. An existing destination is an error."""
    with open(src, "rb") as in_file, create_exclusive(dest) as out_file:
        shutil.copyfileobj(in_file, out_file)


def duplicate_file(src: Path, dest: Path) -> None:
    """
    Duplicates a file: tries a symlink to the absolute source first and falls
    back to copying when the platform or filesystem refuses links. An existing
    destination is an error in both cases.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    try:
        os.symlink(src.resolve(), dest)
        return
    except FileExistsError:
        raise
    except OSError as e:
        log.debug(f"Symlink {dest} -> {src} refused ({e}); copying instead.")
    copy_file(src, dest)
