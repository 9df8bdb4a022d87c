"""Configuration helpers for the analytics pipeline and CLI."""

from __future__ import annotations

from .loader import AppSettings, get_settings, reset_settings_cache


__all__ = ["AppSettings", "get_settings", "reset_settings_cache"]
