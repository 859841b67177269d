from typing import Optional, Set

import libcst as cst
from libcst.helpers import get_full_name_for_node

from .tree import DEFAULT_SIGNATURE, EntrySignature, SourceTree


def _returns_nothing(returns: Optional[cst.Annotation]) -> bool:
    if returns is None:
        return True
    annotation = returns.annotation
    return isinstance(annotation, cst.Name) and annotation.value == "None"


def is_entry_function(node: cst.FunctionDef, signature: EntrySignature) -> bool:
    params = node.params
    return (
        node.name.value == signature.function
        and node.asynchronous is None
        and not params.posonly_params
        and not params.params
        and not isinstance(params.star_arg, cst.Param)
        and not params.kwonly_params
        and params.star_kwarg is None
        and _returns_nothing(node.returns)
    )


class _ModuleLevelVisitor(cst.CSTVisitor):
    """
    Walks module-level statements, including the bodies of module-level
    compound statements such as ``if`` or ``try``, but never descends into a
    class or function body. Stops visiting once ``found`` is set.
    """

    def __init__(self):
        self.found = False

    def on_visit(self, node: cst.CSTNode) -> bool:
        if self.found:
            return False
        return super().on_visit(node)

    def visit_ClassDef(self, node: cst.ClassDef) -> Optional[bool]:
        return False

    def visit_FunctionDef(self, node: cst.FunctionDef) -> Optional[bool]:
        return False


class EntryPointFinder(_ModuleLevelVisitor):
    def __init__(self, signature: EntrySignature):
        super().__init__()
        self.signature = signature

    def visit_FunctionDef(self, node: cst.FunctionDef) -> Optional[bool]:
        if is_entry_function(node, self.signature):
            self.found = True
        return False


class ImportFinder(_ModuleLevelVisitor):
    def __init__(self, module_path: str):
        super().__init__()
        self.module_path = module_path

    def _binds_module(self, alias: cst.ImportAlias) -> bool:
        if get_full_name_for_node(alias.name) != self.module_path:
            return False
        if alias.asname is None:
            return True
        # `import sys as sys` still binds `sys`; `import sys as s` does not.
        bound = alias.asname.name
        return isinstance(bound, cst.Name) and bound.value == self.module_path

    def visit_Import(self, node: cst.Import) -> Optional[bool]:
        if any(self._binds_module(alias) for alias in node.names):
            self.found = True
        return False


class _NameCollector(cst.CSTVisitor):
    def __init__(self):
        self.names: Set[str] = set()

    def visit_Name(self, node: cst.Name) -> Optional[bool]:
        self.names.add(node.value)
        return None


def used_names(tree: SourceTree) -> Set[str]:
    """Every identifier that appears anywhere in ``tree``."""
    collector = _NameCollector()
    tree.module.visit(collector)
    return collector.names


def has_entry_point(
    tree: SourceTree, signature: EntrySignature = DEFAULT_SIGNATURE
) -> bool:
    if tree.module_name != signature.module:
        return False
    finder = EntryPointFinder(signature)
    tree.module.visit(finder)
    return finder.found


def has_import(tree: SourceTree, module_path: str) -> bool:
    finder = ImportFinder(module_path)
    tree.module.visit(finder)
    return finder.found
