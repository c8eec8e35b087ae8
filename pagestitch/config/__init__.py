"""Configuration helpers for pagestitch."""

from .settings import PageStitchSettings, get_settings


__all__ = ["PageStitchSettings", "get_settings"]
