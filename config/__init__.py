"""Configuration package for the supplier desk application."""

from .app_settings import AppSettings, AppConfig, app_config

__all__ = [
    'AppSettings',
    'AppConfig',
    'app_config'
]
