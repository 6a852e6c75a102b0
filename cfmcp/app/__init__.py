"""Application configuration for cfmcp."""

from .config import SetupSettings, client_config_paths, load_settings

__all__ = ["SetupSettings", "client_config_paths", "load_settings"]
