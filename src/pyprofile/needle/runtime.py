import os
from pathlib import Path
from typing import Dict, List, Optional, Union

from .loader import Loader
from .pointer import SemanticPointer

ASSETS_ROOT = Path(__file__).resolve().parent.parent / "assets"


class Needle:
    """
    Resolves semantic pointers to message templates.

    Catalogs are JSON files under ``<root>/needle/<lang>/``. Later roots
    override earlier ones, so adding a project's ``.pyprofile`` directory as a
    root lets it reword any message via ``.pyprofile/needle/<lang>/*.json``.
    """

    def __init__(self, roots: Optional[List[Path]] = None):
        self.default_lang = "en"
        self.roots = roots if roots is not None else [ASSETS_ROOT]
        self._registry: Dict[str, Dict[str, str]] = {}  # lang -> {fqn: value}
        self._loader = Loader()

    def add_root(self, path: Path):
        if path not in self.roots:
            self.roots.append(path)
            self._registry.clear()

    def _ensure_lang_loaded(self, lang: str):
        if lang in self._registry:
            return

        merged: Dict[str, str] = {}
        for root in self.roots:
            merged.update(self._loader.load_directory(root / "needle" / lang))
        self._registry[lang] = merged

    def get(
        self, pointer: Union[SemanticPointer, str], lang: Optional[str] = None
    ) -> str:
        """
        Lookup order: target language, default language, the key itself.
        """
        key = str(pointer)
        target_lang = lang or os.getenv("PYPROFILE_LANG", self.default_lang)

        self._ensure_lang_loaded(target_lang)
        val = self._registry[target_lang].get(key)
        if val is not None:
            return val

        if target_lang != self.default_lang:
            self._ensure_lang_loaded(self.default_lang)
            val = self._registry[self.default_lang].get(key)
            if val is not None:
                return val

        return key


needle = Needle()
