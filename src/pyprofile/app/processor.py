import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pyprofile.common.errors import (
    DuplicationError,
    OutputCreationError,
    OutputExistsError,
)
from pyprofile.common.fs import create_exclusive, duplicate_file
from pyprofile.instrument import (
    DEFAULT_SIGNATURE,
    EntrySignature,
    SourceTree,
    has_entry_point,
    instrument,
    parse_source,
    write_tree,
)

log = logging.getLogger(__name__)

SOURCE_SUFFIX = ".py"


@dataclass(frozen=True)
class ProcessingTask:
    source: Path
    destination: Path
    profile_path: str


class FileProcessor:
    """
    Runs parse -> instrument -> serialize for single files.

    Every method returns whether the file contained the entry point and
    raises a ProcessingError subclass naming the file on failure.
    """

    def __init__(self, signature: EntrySignature = DEFAULT_SIGNATURE):
        self.signature = signature

    def _duplicate(self, source: Path, destination: Path) -> None:
        try:
            duplicate_file(source, destination)
        except FileExistsError as e:
            raise OutputExistsError(source, f"Error duplicating file: {e}") from e
        except OSError as e:
            raise DuplicationError(source, f"Error duplicating file: {e}") from e

    def _load(self, source: Path, profile_path: str) -> Optional[SourceTree]:
        tree = parse_source(source)
        if not has_entry_point(tree, self.signature):
            return None
        instrument(tree, profile_path, self.signature)
        return tree

    def process(self, task: ProcessingTask) -> bool:
        return self.process_file(task.source, task.destination, task.profile_path)

    def process_file(self, source: Path, destination: Path, profile_path: str) -> bool:
        """Instruments source files; any other file is duplicated unchanged."""
        if source.suffix == SOURCE_SUFFIX:
            return self.process_to_new_location(source, destination, profile_path)
        self._duplicate(source, destination)
        return False

    def process_to_new_location(
        self, source: Path, destination: Path, profile_path: str
    ) -> bool:
        tree = self._load(source, profile_path)
        if tree is None:
            log.debug(f"No entry point in {source}; duplicating.")
            self._duplicate(source, destination)
            return False

        try:
            out_file = create_exclusive(destination)
        except FileExistsError as e:
            raise OutputExistsError(source, f"Failed to create file: {e}") from e
        except OSError as e:
            raise OutputCreationError(source, f"Failed to create file: {e}") from e

        with out_file:
            write_tree(tree, out_file)
        return True

    def process_in_place(self, source: Path, profile_path: str) -> bool:
        # Never truncate anything that is not a source file.
        if source.suffix != SOURCE_SUFFIX:
            return False

        tree = self._load(source, profile_path)
        if tree is None:
            return False

        try:
            out_file = open(source, "wb")
        except OSError as e:
            raise OutputCreationError(source, f"Failed to truncate file: {e}") from e

        with out_file:
            write_tree(tree, out_file)
        return True
