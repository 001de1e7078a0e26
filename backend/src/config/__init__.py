"""
Configuration module for DailyPulse backend.

Provides centralized, environment-driven settings for:
- Notification deep links and icon
- Firebase Cloud Messaging credentials
- Access token signing
- Report-created webhook
"""

from backend.src.config.settings import AppSettings, get_settings

__all__ = [
    "AppSettings",
    "get_settings",
]
