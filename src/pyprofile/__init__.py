from pyprofile.instrument import (
    EntrySignature,
    SourceTree,
    has_entry_point,
    has_import,
    instrument,
)
from pyprofile.app import FileProcessor, InstrumentRunner, RunOptions

__version__ = "0.1.0"

__all__ = [
    "EntrySignature",
    "SourceTree",
    "has_entry_point",
    "has_import",
    "instrument",
    "FileProcessor",
    "InstrumentRunner",
    "RunOptions",
]
