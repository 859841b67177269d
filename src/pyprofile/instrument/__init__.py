from .tree import (
    DEFAULT_SIGNATURE,
    EntrySignature,
    SourceTree,
    parse_source,
    write_tree,
)
from .nodes import Preamble, PreambleNames, build_import, build_preamble
from .inspector import has_entry_point, has_import, is_entry_function, used_names
from .transformer import (
    PROFILER_MODULE,
    REQUIRED_IMPORTS,
    STATS_MODULE,
    STREAM_MODULE,
    ProfileInstrumenter,
    free_preamble_names,
    instrument,
)

__all__ = [
    "DEFAULT_SIGNATURE",
    "EntrySignature",
    "SourceTree",
    "parse_source",
    "write_tree",
    "Preamble",
    "PreambleNames",
    "build_import",
    "build_preamble",
    "has_entry_point",
    "has_import",
    "is_entry_function",
    "used_names",
    "PROFILER_MODULE",
    "REQUIRED_IMPORTS",
    "STATS_MODULE",
    "STREAM_MODULE",
    "ProfileInstrumenter",
    "free_preamble_names",
    "instrument",
]
