"""
Builders for the nodes the instrumenter splices into a module.

The preamble gives the entry function this shape::

    def main():
        try:
            _profile_output = open("<profile>", "wb")
        except OSError as _profile_error:
            sys.stderr.write("Couldn't open <profile>: " + str(_profile_error) + "\\n")
            return
        _profiler = cProfile.Profile()
        try:
            _profiler.enable()
        except ValueError as _profile_error:
            sys.stderr.write("Couldn't start profiling: " + str(_profile_error) + "\\n")
        try:
            ...  # original body
        finally:
            _profiler.disable()
            _profiler.create_stats()
            marshal.dump(_profiler.stats, _profile_output)
            _profile_output.close()

The stats go through the handle opened at startup, so the profile lands where
it was opened even if the program changes directory. A preamble nested inside
another one (a re-instrumented file) binds numbered names, and its ``enable``
fails harmlessly when the interpreter allows only one active profiler.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, cast

import libcst as cst
from libcst.helpers import parse_template_statement

_TEMPLATE_INDENT = "    "

_OPEN_TEMPLATE = """\
try:
    {output} = open({path}, "wb")
except OSError as {error}:
    sys.stderr.write({message} + str({error}) + "\\n")
    return
"""

_CREATE_TEMPLATE = "{profiler} = cProfile.Profile()\n"

_ENABLE_TEMPLATE = """\
try:
    {profiler}.enable()
except ValueError as {error}:
    sys.stderr.write("Couldn't start profiling: " + str({error}) + "\\n")
"""

_GUARD_TEMPLATE = """\
try:
    pass
finally:
    {profiler}.disable()
    {profiler}.create_stats()
    marshal.dump({profiler}.stats, {output})
    {output}.close()
"""


@dataclass(frozen=True)
class PreambleNames:
    """The identifiers one preamble binds inside the function it wraps."""

    profiler: str = "_profiler"
    output: str = "_profile_output"
    error: str = "_profile_error"

    @classmethod
    def numbered(cls, index: int) -> "PreambleNames":
        # 1 -> _profiler, 2 -> _profiler_2, ...
        if index <= 1:
            return cls()
        base = cls()
        return cls(
            profiler=f"{base.profiler}_{index}",
            output=f"{base.output}_{index}",
            error=f"{base.error}_{index}",
        )

    def all(self) -> Tuple[str, str, str]:
        return (self.profiler, self.output, self.error)


DEFAULT_NAMES = PreambleNames()


def string_literal(value: str) -> cst.SimpleString:
    """A double-quoted literal that evaluates back to exactly ``value``."""
    escaped = "".join('\\"' if char == '"' else repr(char)[1:-1] for char in value)
    return cst.SimpleString(f'"{escaped}"')


def _reindent(template: str, config: cst.PartialParserConfig) -> str:
    # Unset fields of a PartialParserConfig hold an AutoConfig sentinel.
    indent = config.default_indent
    if not isinstance(indent, str):
        return template
    return template.replace(_TEMPLATE_INDENT, indent)


@dataclass(frozen=True)
class Preamble:
    setup: Tuple[cst.BaseStatement, ...]
    guard: cst.Try
    names: PreambleNames = DEFAULT_NAMES

    def wrap(self, body: Sequence[cst.BaseStatement]) -> List[cst.BaseStatement]:
        """Returns the setup statements followed by ``body`` under the stop guard."""
        inner = list(body) or [cst.SimpleStatementLine(body=[cst.Pass()])]
        guarded = self.guard.with_changes(body=self.guard.body.with_changes(body=inner))
        return [*self.setup, guarded]


def build_preamble(
    profile_path: str,
    config: Optional[cst.PartialParserConfig] = None,
    names: PreambleNames = DEFAULT_NAMES,
) -> Preamble:
    config = config or cst.PartialParserConfig()
    profiler = cst.Name(names.profiler)
    output = cst.Name(names.output)
    error = cst.Name(names.error)

    open_stmt = parse_template_statement(
        _reindent(_OPEN_TEMPLATE, config),
        config=config,
        output=output,
        error=error,
        path=string_literal(profile_path),
        message=string_literal(f"Couldn't open {profile_path}: "),
    )
    create_stmt = parse_template_statement(
        _CREATE_TEMPLATE, config=config, profiler=profiler
    )
    enable_stmt = parse_template_statement(
        _reindent(_ENABLE_TEMPLATE, config),
        config=config,
        profiler=profiler,
        error=error,
    )
    guard = cast(
        cst.Try,
        parse_template_statement(
            _reindent(_GUARD_TEMPLATE, config),
            config=config,
            profiler=profiler,
            output=output,
        ),
    )
    return Preamble(setup=(open_stmt, create_stmt, enable_stmt), guard=guard, names=names)


def _dotted_name(path: str) -> cst.BaseExpression:
    parts = path.split(".")
    node: cst.BaseExpression = cst.Name(parts[0])
    for part in parts[1:]:
        node = cst.Attribute(value=node, attr=cst.Name(part))
    return node


def build_import(module_path: str) -> cst.SimpleStatementLine:
    return cst.SimpleStatementLine(
        body=[cst.Import(names=[cst.ImportAlias(name=_dotted_name(module_path))])]
    )
