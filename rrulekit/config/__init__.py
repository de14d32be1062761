"""Configuration management for rrulekit."""

from .settings import RRuleSettings, get_settings, reset_settings

__all__ = ["RRuleSettings", "get_settings", "reset_settings"]
