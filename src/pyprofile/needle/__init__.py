from .pointer import L, SemanticPointer
from .runtime import needle, Needle
from .loader import Loader, FileHandler, JsonHandler

__all__ = ["L", "SemanticPointer", "needle", "Needle", "Loader", "FileHandler", "JsonHandler"]
