"""
Configuration package for sourcegen

Provides application settings via environment variables using pydantic-settings.
"""

from .settings import appsettings, AppSettings, FailurePolicy

__all__ = ["appsettings", "AppSettings", "FailurePolicy"]
