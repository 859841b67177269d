from pathlib import Path
from typing import Optional, Union


class PyprofileError(Exception):
    pass


class ProcessingError(PyprofileError):
    """A file-level failure, always tagged with the file it came from."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Error processing {self.path}: {reason}")


class SourceParseError(ProcessingError):
    def __init__(
        self,
        path: Union[str, Path],
        reason: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.line = line
        self.column = column
        if line is not None:
            reason = f"Parser error at line {line}, column {column}: {reason}"
        else:
            reason = f"Parser error: {reason}"
        super().__init__(path, reason)


class OutputCreationError(ProcessingError):
    pass


class OutputExistsError(OutputCreationError):
    pass


class SerializationError(ProcessingError):
    pass


class DuplicationError(ProcessingError):
    pass


class FilesetError(PyprofileError):
    pass


class NoEntryPointError(PyprofileError):
    def __init__(self, function: str = "main"):
        self.function = function
        super().__init__(f"Couldn't find a {function}() function to instrument")


class BuildError(PyprofileError):
    def __init__(self, returncode: int, command: str):
        self.returncode = returncode
        self.command = command
        super().__init__(f"'{command}' exited with status {returncode}")


class ConfigError(PyprofileError):
    pass
