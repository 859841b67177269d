import logging
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from pyprofile.common import bus
from pyprofile.common.errors import NoEntryPointError
from pyprofile.config import DEFAULT_SUFFIXES
from pyprofile.instrument import DEFAULT_SIGNATURE, EntrySignature
from pyprofile.needle import L
from .compiler import Compiler, ZipappCompiler
from .fileset import Fileset, output_name, resolve_fileset
from .processor import FileProcessor, ProcessingTask

log = logging.getLogger(__name__)


@dataclass
class RunOptions:
    targets: List[str] = field(default_factory=list)
    output: Optional[str] = None
    profile: Optional[str] = None
    in_place: bool = False
    print_work: bool = False
    build_flags: List[str] = field(default_factory=list)
    signature: EntrySignature = DEFAULT_SIGNATURE
    suffixes: List[str] = field(default_factory=lambda: list(DEFAULT_SUFFIXES))


@dataclass
class RunResult:
    output: Path
    profile_path: str
    work_dir: Path
    instrumented: List[Path] = field(default_factory=list)


def make_work_dir() -> Path:
    base = Path(tempfile.mkdtemp(prefix="pyprofile"))
    work_dir = base / datetime.now().strftime("%Y-%m-%dT%H_%M_%S")
    work_dir.mkdir(mode=0o700, parents=True)
    return work_dir


def entry_reference(
    work_dir: Path, entry_file: Path, signature: EntrySignature
) -> Optional[str]:
    """The zipapp ``-m`` argument, or None when the archive has a __main__.py."""
    if (work_dir / "__main__.py").exists():
        return None
    module = ".".join(entry_file.relative_to(work_dir).with_suffix("").parts)
    return f"{module}:{signature.function}"


class InstrumentRunner:
    def __init__(
        self,
        root_path: Path,
        compiler: Optional[Compiler] = None,
    ):
        self.root_path = root_path
        self.compiler = compiler or ZipappCompiler()

    def _tasks(
        self, fileset: Fileset, work_dir: Path, profile_path: str
    ) -> Sequence[ProcessingTask]:
        return [
            ProcessingTask(
                source=path,
                destination=work_dir / path.relative_to(fileset.root),
                profile_path=profile_path,
            )
            for path in fileset.paths
        ]

    def run(self, options: RunOptions) -> RunResult:
        fileset = resolve_fileset(options.targets, self.root_path, options.suffixes)
        name = output_name(options.targets, self.root_path)

        profile_path = options.profile or f"{name}.prof"
        output = Path(options.output or f"{name}.profile.pyz")
        if not output.is_absolute():
            output = self.root_path / output

        bus.debug(L.run.will_compile, output=output)
        bus.debug(L.run.profile_target, profile=profile_path)

        work_dir = fileset.root if options.in_place else make_work_dir()
        if options.print_work:
            bus.info(L.run.work_dir, path=work_dir)

        processor = FileProcessor(options.signature)
        instrumented: List[Path] = []
        entry_file: Optional[Path] = None
        # The first failing file aborts the run; files already written stay.
        for task in self._tasks(fileset, work_dir, profile_path):
            if options.in_place:
                found = processor.process_in_place(task.source, task.profile_path)
            else:
                found = processor.process(task)

            if found:
                instrumented.append(task.source)
                entry_file = entry_file or task.destination
                bus.debug(
                    L.run.instrumented,
                    function=options.signature.function,
                    path=task.source,
                )
            elif options.in_place:
                log.debug(f"{task.source} left unchanged")
            else:
                bus.debug(L.run.duplicated, path=task.source)

        if entry_file is None:
            raise NoEntryPointError(options.signature.function)

        bus.debug(L.run.compiling)
        self.compiler.build(
            work_dir,
            output,
            entry_reference(work_dir, entry_file, options.signature),
            options.build_flags,
        )
        bus.success(L.run.success, output=output)

        return RunResult(
            output=output,
            profile_path=profile_path,
            work_dir=work_dir,
            instrumented=instrumented,
        )
