"""
The parsed form of one source file.

A SourceTree pairs a libcst Module with the file it came from and the module
name the file declares. libcst nodes are immutable, so "mutating" a tree means
replacing its ``module`` attribute with a transformed copy.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Union

import libcst as cst

from pyprofile.common.errors import ProcessingError, SerializationError, SourceParseError


@dataclass(frozen=True)
class EntrySignature:
    """Names the entry module and the zero-argument function programs start from."""

    module: str = "__main__"
    function: str = "main"


DEFAULT_SIGNATURE = EntrySignature()


@dataclass
class SourceTree:
    path: Path
    module: cst.Module
    module_name: str

    @classmethod
    def from_code(
        cls, code: Union[str, bytes], path: Union[str, Path] = "<string>"
    ) -> "SourceTree":
        path = Path(path)
        try:
            module = cst.parse_module(code)
        except cst.ParserSyntaxError as e:
            raise SourceParseError(
                path, e.message, line=e.editor_line, column=e.editor_column
            ) from e
        except UnicodeDecodeError as e:
            raise SourceParseError(path, str(e)) from e
        return cls(path=path, module=module, module_name=declared_module_name(path, module))

    @property
    def code(self) -> str:
        return self.module.code


def _main_guard_name(stmt: cst.BaseStatement) -> Optional[str]:
    # Matches `if __name__ == "<x>":` and `if "<x>" == __name__:`
    if not isinstance(stmt, cst.If):
        return None
    test = stmt.test
    if not isinstance(test, cst.Comparison) or len(test.comparisons) != 1:
        return None
    target = test.comparisons[0]
    if not isinstance(target.operator, cst.Equal):
        return None

    left, right = test.left, target.comparator
    if isinstance(right, cst.Name):
        left, right = right, left
    if (
        isinstance(left, cst.Name)
        and left.value == "__name__"
        and isinstance(right, cst.SimpleString)
    ):
        value = right.evaluated_value
        return value if isinstance(value, str) else None
    return None


def declared_module_name(path: Path, module: cst.Module) -> str:
    """
    The name a file runs under: the string its top-level ``__name__`` guard
    compares against, ``__main__`` for a ``__main__.py`` file, and otherwise
    the file stem.
    """
    if path.name == "__main__.py":
        return "__main__"
    for stmt in module.body:
        guard = _main_guard_name(stmt)
        if guard is not None:
            return guard
    return path.stem


def parse_source(path: Path) -> SourceTree:
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ProcessingError(path, f"Failed to read file: {e}") from e
    return SourceTree.from_code(data, path)


def write_tree(tree: SourceTree, out_file: BinaryIO) -> None:
    try:
        out_file.write(tree.module.bytes)
    except (OSError, UnicodeEncodeError) as e:
        raise SerializationError(tree.path, f"Failed to write output: {e}") from e
