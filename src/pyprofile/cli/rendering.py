import typer

from pyprofile.common.messaging import Renderer

# Messages share stderr with the zipapp build, so anything but plain info
# lines carries the program name. Info lines stay bare: the work directory
# line is meant to be pasted into a shell.
PREFIX = "pyprofile: "

_STYLES = {
    "debug": {"fg": typer.colors.BRIGHT_BLACK},
    "info": {},
    "success": {"fg": typer.colors.GREEN},
    "warning": {"fg": typer.colors.YELLOW},
    "error": {"fg": typer.colors.RED, "bold": True},
}


class CliRenderer(Renderer):
    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def render(self, message: str, level: str):
        if level == "debug" and not self.verbose:
            return
        if level != "info":
            message = PREFIX + message
        typer.secho(message, err=True, **_STYLES.get(level, {}))
