from .processor import FileProcessor, ProcessingTask, SOURCE_SUFFIX
from .fileset import Fileset, resolve_fileset, output_name
from .compiler import Compiler, ZipappCompiler
from .runner import InstrumentRunner, RunOptions, RunResult

__all__ = [
    "FileProcessor",
    "ProcessingTask",
    "SOURCE_SUFFIX",
    "Fileset",
    "resolve_fileset",
    "output_name",
    "Compiler",
    "ZipappCompiler",
    "InstrumentRunner",
    "RunOptions",
    "RunResult",
]
