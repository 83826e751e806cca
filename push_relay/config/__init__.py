"""Configuration package for Push Relay."""

from .base import BaseSettings
from .database import DatabaseConfig
from .relay import RelaySettings, get_settings

__all__ = ["BaseSettings", "DatabaseConfig", "RelaySettings", "get_settings"]
