import shlex
from typing import List, Optional

import typer

from pyprofile.app import RunOptions
from pyprofile.common import bus
from pyprofile.common.errors import ConfigError, PyprofileError
from pyprofile.config import load_config_from_path
from pyprofile.instrument import EntrySignature
from pyprofile.needle import L, needle
from .factories import get_project_root, make_runner
from .rendering import CliRenderer

app = typer.Typer(
    name="pyprofile",
    help=needle.get(L.cli.app.description),
    add_completion=False,
)


@app.command()
def main(
    targets: Optional[List[str]] = typer.Argument(
        None, help=needle.get(L.cli.argument.targets.help)
    ),
    output: Optional[str] = typer.Option(
        None, "-o", "--output", help=needle.get(L.cli.option.output.help)
    ),
    profile: Optional[str] = typer.Option(
        None, "-p", "--profile", help=needle.get(L.cli.option.profile.help)
    ),
    inplace: bool = typer.Option(
        False, "--inplace", help=needle.get(L.cli.option.inplace.help)
    ),
    work: bool = typer.Option(False, "--work", help=needle.get(L.cli.option.work.help)),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help=needle.get(L.cli.option.verbose.help)
    ),
    buildflags: str = typer.Option(
        "", "--buildflags", help=needle.get(L.cli.option.buildflags.help)
    ),
    entry_module: Optional[str] = typer.Option(
        None, "--entry-module", help=needle.get(L.cli.option.entry_module.help)
    ),
    entry_function: Optional[str] = typer.Option(
        None, "--entry-function", help=needle.get(L.cli.option.entry_function.help)
    ),
):
    # The CLI is the composition root: it picks the renderer and the config.
    bus.set_renderer(CliRenderer(verbose=verbose))
    root_path = get_project_root()
    needle.add_root(root_path / ".pyprofile")

    try:
        config = load_config_from_path(root_path)
    except ConfigError as e:
        bus.error(L.error.config, error=str(e))
        raise typer.Exit(code=1)

    try:
        build_flags = shlex.split(buildflags) if buildflags else config.build_flags
    except ValueError as e:
        bus.error(L.error.buildflags, error=str(e))
        raise typer.Exit(code=1)

    options = RunOptions(
        targets=list(targets or []),
        output=output,
        profile=profile,
        in_place=inplace,
        print_work=work,
        build_flags=build_flags,
        signature=EntrySignature(
            module=entry_module or config.entry_module,
            function=entry_function or config.entry_function,
        ),
        suffixes=config.suffixes,
    )

    try:
        make_runner().run(options)
    except PyprofileError as e:
        bus.error(L.error.fatal, error=str(e))
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
