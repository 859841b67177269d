import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

log = logging.getLogger(__name__)


class FileHandler(Protocol):
    def match(self, path: Path) -> bool: ...

    def load(self, path: Path) -> Dict[str, Any]: ...


class JsonHandler:
    """Standard handler for JSON catalog files."""

    def match(self, path: Path) -> bool:
        return path.suffix.lower() == ".json"

    def load(self, path: Path) -> Dict[str, Any]:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)


class Loader:
    def __init__(self, handlers: Optional[List[FileHandler]] = None):
        self.handlers = handlers or [JsonHandler()]

    def _load_and_merge_file(self, path: Path, registry: Dict[str, str]):
        for handler in self.handlers:
            if handler.match(path):
                try:
                    content = handler.load(path)
                except (OSError, ValueError) as e:
                    log.debug(f"Skipping unreadable catalog file {path}: {e}")
                    return
                # Keys are full FQNs at the top level.
                for key, value in content.items():
                    registry[key] = str(value)
                return

    def load_directory(self, root_path: Path) -> Dict[str, str]:
        registry: Dict[str, str] = {}

        if not root_path.is_dir():
            return registry

        for dirpath, _, filenames in os.walk(root_path):
            for filename in sorted(filenames):
                self._load_and_merge_file(Path(dirpath) / filename, registry)

        return registry
