"""Configuration package."""
from src.nodepack_runtime.config.settings import get_settings, reset_settings, Settings

__all__ = ["get_settings", "reset_settings", "Settings"]
