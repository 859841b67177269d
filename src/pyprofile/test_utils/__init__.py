from .bus import SpyBus
from .workspace import WorkspaceFactory
from .compiler import RecordingCompiler

__all__ = ["SpyBus", "WorkspaceFactory", "RecordingCompiler"]
