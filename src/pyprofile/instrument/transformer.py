import logging
from typing import List, Sequence, Union

import libcst as cst

from pyprofile.common import bus
from pyprofile.needle import L
from .inspector import has_import, is_entry_function, used_names
from .nodes import Preamble, PreambleNames, build_import, build_preamble
from .tree import DEFAULT_SIGNATURE, EntrySignature, SourceTree

log = logging.getLogger(__name__)

STREAM_MODULE = "sys"
PROFILER_MODULE = "cProfile"
STATS_MODULE = "marshal"
# Insertion order of missing imports.
REQUIRED_IMPORTS = (STREAM_MODULE, PROFILER_MODULE, STATS_MODULE)


def _is_docstring(stmt: cst.BaseStatement) -> bool:
    return (
        isinstance(stmt, cst.SimpleStatementLine)
        and len(stmt.body) == 1
        and isinstance(stmt.body[0], cst.Expr)
        and isinstance(stmt.body[0].value, (cst.SimpleString, cst.ConcatenatedString))
    )


def _is_future_import(stmt: cst.BaseStatement) -> bool:
    return (
        isinstance(stmt, cst.SimpleStatementLine)
        and len(stmt.body) > 0
        and all(
            isinstance(small, cst.ImportFrom)
            and isinstance(small.module, cst.Name)
            and small.module.value == "__future__"
            for small in stmt.body
        )
    )


class ProfileInstrumenter(cst.CSTTransformer):
    """
    Prepends ``imports`` to the module and splices ``preamble`` into every
    module-level function matching ``signature``.
    """

    def __init__(
        self,
        preamble: Preamble,
        imports: Sequence[cst.SimpleStatementLine],
        signature: EntrySignature = DEFAULT_SIGNATURE,
    ):
        self.preamble = preamble
        self.imports = list(imports)
        self.signature = signature
        self.instrumented: List[str] = []

    def visit_ClassDef(self, node: cst.ClassDef) -> bool:
        return False

    def visit_FunctionDef(self, node: cst.FunctionDef) -> bool:
        # Only module-level functions are candidates; nested defs stay untouched.
        return False

    def _splice(
        self, body: Union[cst.IndentedBlock, cst.SimpleStatementSuite]
    ) -> cst.IndentedBlock:
        if isinstance(body, cst.SimpleStatementSuite):
            # Convert "def main(): stmt" into an indented block.
            statements: List[cst.BaseStatement] = [
                cst.SimpleStatementLine(
                    body=[small.with_changes(semicolon=cst.MaybeSentinel.DEFAULT)]
                )
                for small in body.body
            ]
            block = cst.IndentedBlock(header=body.trailing_whitespace, body=[])
        else:
            statements = list(body.body)
            block = body

        head: List[cst.BaseStatement] = []
        if statements and _is_docstring(statements[0]):
            head, statements = statements[:1], statements[1:]

        return block.with_changes(body=[*head, *self.preamble.wrap(statements)])

    def leave_FunctionDef(
        self, original_node: cst.FunctionDef, updated_node: cst.FunctionDef
    ) -> cst.FunctionDef:
        if not is_entry_function(original_node, self.signature):
            return updated_node
        self.instrumented.append(original_node.name.value)
        return updated_node.with_changes(body=self._splice(updated_node.body))

    def leave_Module(
        self, original_node: cst.Module, updated_node: cst.Module
    ) -> cst.Module:
        if not self.imports:
            return updated_node

        body = list(updated_node.body)
        # The docstring and __future__ imports must stay ahead of everything else.
        index = 1 if body and _is_docstring(body[0]) else 0
        while index < len(body) and _is_future_import(body[index]):
            index += 1

        return updated_node.with_changes(
            body=[*body[:index], *self.imports, *body[index:]]
        )


def free_preamble_names(tree: SourceTree) -> PreambleNames:
    """The first numbered set of preamble names that ``tree`` does not use yet."""
    taken = used_names(tree)
    index = 1
    while any(name in taken for name in PreambleNames.numbered(index).all()):
        index += 1
    return PreambleNames.numbered(index)


def instrument(
    tree: SourceTree,
    profile_path: str,
    signature: EntrySignature = DEFAULT_SIGNATURE,
) -> None:
    """
    Adds the profiling preamble to ``tree``'s entry function and imports the
    modules it needs. Replaces ``tree.module``; performs no I/O.

    Not idempotent: instrumenting an already instrumented tree adds a second
    preamble, with its own names, and warns about the existing cProfile
    import.
    """
    staged: List[cst.SimpleStatementLine] = []
    for module_path in REQUIRED_IMPORTS:
        if not has_import(tree, module_path):
            bus.debug(L.instrument.debug.import_added, module=module_path, path=tree.path)
            staged.append(build_import(module_path))
        elif module_path == PROFILER_MODULE:
            bus.warning(
                L.instrument.warning.profiler_imported, module=module_path, path=tree.path
            )

    preamble = build_preamble(
        profile_path, tree.module.config_for_parsing, free_preamble_names(tree)
    )
    transformer = ProfileInstrumenter(preamble, staged, signature)
    tree.module = tree.module.visit(transformer)

    for function in transformer.instrumented:
        log.debug(f"Instrumented {function}() in {tree.path}")
        bus.debug(L.instrument.debug.preamble_added, function=function, path=tree.path)
