"""Settings de processo e de sessão."""

from __future__ import annotations

from config.settings.base.core import BaseSettings, Environment, get_base_settings
from config.settings.base.session import (
    SessionSettings,
    SessionStoreBackend,
    get_session_settings,
)

__all__ = [
    "BaseSettings",
    "Environment",
    "SessionSettings",
    "SessionStoreBackend",
    "get_base_settings",
    "get_session_settings",
]
