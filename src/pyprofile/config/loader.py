import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib

from pyprofile.common.errors import ConfigError

DEFAULT_SUFFIXES = [".py", ".pyi", ".pth", ".json", ".toml", ".cfg", ".ini", ".txt"]


@dataclass
class PyprofileConfig:
    entry_module: str = "__main__"
    entry_function: str = "main"
    build_flags: List[str] = field(default_factory=list)
    suffixes: List[str] = field(default_factory=lambda: list(DEFAULT_SUFFIXES))
    root_path: Path = field(default_factory=Path.cwd)


def _find_pyproject_toml(search_path: Path) -> Path:
    current_dir = search_path.resolve()
    while current_dir.parent != current_dir:
        pyproject_path = current_dir / "pyproject.toml"
        if pyproject_path.is_file():
            return pyproject_path
        current_dir = current_dir.parent
    raise FileNotFoundError("Could not find pyproject.toml in any parent directory.")


def _expect(data: Dict[str, Any], key: str, kind: type, default: Any) -> Any:
    value = data.get(key, default)
    if not isinstance(value, kind):
        raise ConfigError(
            f"[tool.pyprofile] {key} must be of type {kind.__name__}, "
            f"got {type(value).__name__}"
        )
    return value


def _expect_str_list(data: Dict[str, Any], key: str, default: List[str]) -> List[str]:
    value = _expect(data, key, list, default)
    if not all(isinstance(item, str) for item in value):
        raise ConfigError(f"[tool.pyprofile] {key} must be a list of strings")
    return list(value)


def load_config_from_path(search_path: Path) -> PyprofileConfig:
    try:
        config_path = _find_pyproject_toml(search_path)
    except FileNotFoundError:
        return PyprofileConfig(root_path=search_path.resolve())

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{config_path}: {e}") from e

    section: Dict[str, Any] = data.get("tool", {}).get("pyprofile", {})
    defaults = PyprofileConfig()

    return PyprofileConfig(
        entry_module=_expect(section, "entry_module", str, defaults.entry_module),
        entry_function=_expect(section, "entry_function", str, defaults.entry_function),
        build_flags=_expect_str_list(section, "build_flags", defaults.build_flags),
        suffixes=_expect_str_list(section, "suffixes", defaults.suffixes),
        root_path=config_path.parent,
    )
