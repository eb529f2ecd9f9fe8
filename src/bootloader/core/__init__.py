"""Core modules for bootloader - centralized error definitions."""

from bootloader.core.errors import (
    BootloaderError,
    CompoundError,
    ConfigurationError,
    ExitCode,
    PartialStateProvider,
    ProviderError,
    StateError,
    ValidationError,
    combine_errors,
    format_error_message,
    main_with_error_handling,
)

__all__ = [
    "ExitCode",
    "BootloaderError",
    "ConfigurationError",
    "ProviderError",
    "ValidationError",
    "StateError",
    "CompoundError",
    "PartialStateProvider",
    "combine_errors",
    "main_with_error_handling",
    "format_error_message",
]
