from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence


@dataclass
class RecordingCompiler:
    """A Compiler that records its calls and snapshots the tree it was handed."""

    calls: List[Dict[str, object]] = field(default_factory=list)
    snapshot: Dict[str, bytes] = field(default_factory=dict)

    def build(
        self,
        source_dir: Path,
        output: Path,
        entry: Optional[str],
        flags: Sequence[str],
    ) -> None:
        self.calls.append(
            {"source_dir": source_dir, "output": output, "entry": entry, "flags": list(flags)}
        )
        for path in sorted(source_dir.rglob("*")):
            if path.is_file():
                self.snapshot[path.relative_to(source_dir).as_posix()] = path.read_bytes()
