from .loader import PyprofileConfig, load_config_from_path, DEFAULT_SUFFIXES

__all__ = ["PyprofileConfig", "load_config_from_path", "DEFAULT_SUFFIXES"]
