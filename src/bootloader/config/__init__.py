"""
Configuration for bootloader.

Settings come from BOOTLOADER_* environment variables (or a .env file);
credentials are merged into the in-memory working state only.
"""

from bootloader.config.credentials import SUPPORTED_IAAS, apply_credentials
from bootloader.config.settings import Settings, get_settings

__all__ = [
    "SUPPORTED_IAAS",
    "Settings",
    "apply_credentials",
    "get_settings",
]
