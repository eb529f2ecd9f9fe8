"""
Unified error handling for bootloader commands.

This module provides the error taxonomy, exit codes, the compound error
used when a workflow step and its state recovery both fail, and the
decorator that maps errors to exit codes for CLI handlers.

Exit Codes:
- 0: Success
- 10: Configuration error
- 11: Provider error (cloud, infrastructure tool or director failure)
- 12: Validation error
- 13: State error (state file missing, unreadable or incompatible)
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Callable, Protocol, TypeVar, runtime_checkable

import structlog

if TYPE_CHECKING:
    from bootloader.storage.models import State

logger = structlog.get_logger()

COMPOUND_ERROR_HEADER = "the following errors occurred:"


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    CONFIG_ERROR = 10
    PROVIDER_ERROR = 11
    VALIDATION_ERROR = 12
    STATE_ERROR = 13
    UNKNOWN_ERROR = 127


class BootloaderError(Exception):
    """Base exception for bootloader errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(BootloaderError):
    """Raised for configuration-related errors."""

    exit_code = ExitCode.CONFIG_ERROR


class ProviderError(BootloaderError):
    """Raised when an external collaborator fails."""

    exit_code = ExitCode.PROVIDER_ERROR


class ValidationError(BootloaderError):
    """Raised when a precondition does not hold."""

    exit_code = ExitCode.VALIDATION_ERROR


class StateError(BootloaderError):
    """Raised for state file problems."""

    exit_code = ExitCode.STATE_ERROR


# === Precondition failures ===


class DirectorAlreadyExistsError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            'Director already exists, you must re-create your environment to use "--no-director"'
        )


class EnvNameAlreadyExistsError(ValidationError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"It looks like an environment already exists with the name '{name}'. "
            "Please provide a different name.",
            details={"env_id": name},
        )
        self.name = name


class InvalidEnvNameError(ValidationError):
    def __init__(self, name: str) -> None:
        super().__init__(
            "Names must start with a letter and be alphanumeric or hyphenated.",
            details={"env_id": name},
        )
        self.name = name


class IaasMismatchError(ConfigurationError):
    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            "The iaas type cannot be changed for an existing environment. "
            f"The current iaas type is {current}.",
            details={"requested": requested},
        )


class DirectorNotManagedError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Error bootloader does not manage this director.")


class OpsFileReadError(ConfigurationError):
    def __init__(self, cause: OSError) -> None:
        super().__init__(f"error reading ops-file contents: {cause}")
        self.cause = cause


# === State file failures ===


class IncompatibleSchemaError(StateError):
    def __init__(self, version: int) -> None:
        super().__init__(
            "Existing environment state is incompatible with this version of bootloader. "
            "Create a new environment to continue.",
            details={"schema_version": version},
        )
        self.version = version


class NewerSchemaError(StateError):
    def __init__(self, version: int) -> None:
        super().__init__(
            "Existing environment was created with a newer version of bootloader. "
            f"Please upgrade to a version of bootloader compatible with schema version {version}."
        )
        self.version = version


class StateDirectoryMissingError(StateError):
    def __init__(self, directory: str) -> None:
        super().__init__(f"state directory does not exist: {directory}")
        self.directory = directory


class StateCorruptError(StateError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"state file {path} could not be read: {reason}")
        self.path = path


class StateNotFoundError(StateError):
    def __init__(self) -> None:
        super().__init__(
            "bbl-state.json not found, ensure you're running this command in the proper "
            "state directory or create a new environment with bootloader up"
        )


class PropertyUnsetError(StateError):
    def __init__(self, property_name: str) -> None:
        super().__init__(
            f"Could not retrieve {property_name}, please make sure you are "
            "targeting the proper state dir."
        )
        self.property_name = property_name


# === Collaborator failures ===


class EnvIDGenerationError(ProviderError):
    def __init__(self, attempts: int) -> None:
        super().__init__(f"could not generate a unique environment name after {attempts} attempts")


class RetriesExhaustedError(ProviderError):
    def __init__(self, attempts: int, last_error: BaseException | None) -> None:
        super().__init__(f"made {attempts} attempts, last error: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


class DirectorResponseError(ProviderError):
    def __init__(self, status_code: int, reason: str) -> None:
        super().__init__(f"unexpected http response {status_code} {reason}")
        self.status_code = status_code


class KeyPairUpdateError(ProviderError):
    """Raised when ssh key material cannot be registered with the project."""


@runtime_checkable
class PartialStateProvider(Protocol):
    """A failure that still produced state worth persisting."""

    def recover_state(self) -> State:
        ...


class PartialStateError(ProviderError):
    """Collaborator failure carrying the state built before it failed.

    ``recover_state`` returns the carried state, or raises ``recover_error``
    when the collaborator could not reconstruct it.
    """

    def __init__(
        self,
        message: str,
        state: State | None = None,
        recover_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self._state = state
        self._recover_error = recover_error

    def recover_state(self) -> State:
        if self._recover_error is not None:
            raise self._recover_error
        if self._state is None:
            raise ProviderError(f"no state recorded for failure: {self.message}")
        return self._state


class InfrastructureApplyError(PartialStateError):
    """The infrastructure tool failed part-way through an apply or destroy."""


class ManagerCreateError(PartialStateError):
    """Director or jumpbox creation failed after writing deployment state."""

    def __init__(self, state: State, cause: BaseException) -> None:
        super().__init__(str(cause), state=state)
        self.cause = cause


class ManagerDeleteError(PartialStateError):
    """Director or jumpbox deletion failed after writing deployment state."""

    def __init__(self, state: State, cause: BaseException) -> None:
        super().__init__(str(cause), state=state)
        self.cause = cause


# === Compound errors ===


class CompoundError(BootloaderError):
    """Two failures reported as one, primary first."""

    def __init__(self, primary: BaseException, secondary: BaseException) -> None:
        message = f"{COMPOUND_ERROR_HEADER}\n{primary},\n{secondary}"
        super().__init__(message)
        self.primary = primary
        self.secondary = secondary
        if isinstance(primary, BootloaderError):
            self.exit_code = primary.exit_code


def combine_errors(primary: BaseException, secondary: BaseException | None) -> BaseException:
    """Combine a workflow failure with a recovery or persistence failure.

    Returns ``primary`` itself when there is no secondary failure so callers
    matching on the exact error keep working.
    """
    if secondary is None:
        return primary
    return CompoundError(primary, secondary)


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI handlers that provides unified error handling.

    Catches exceptions and converts them to appropriate exit codes, printing
    a single human-readable message for the operator.

    Exit codes:
        - BootloaderError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130 (standard for SIGINT)
        - Other exceptions: Returns 127 (unknown error)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            from bootloader.cli.ux import error as print_error

            try:
                return func(*args, **kwargs)
            except BootloaderError as e:
                if log_errors:
                    logger.error(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=int(e.exit_code),
                        **e.details,
                    )
                print_error(format_error_message(e))
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130  # Standard exit code for SIGINT
            except Exception as e:
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=int(ExitCode.UNKNOWN_ERROR),
                    )
                print_error(str(e))
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: BootloaderError) -> str:
    """Format an error message for display to users."""
    return error.message
