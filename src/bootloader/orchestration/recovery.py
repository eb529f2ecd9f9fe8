"""Partial state recovery for failed workflow steps."""

from __future__ import annotations

from typing import NoReturn, Protocol

import structlog

from bootloader.core.errors import PartialStateProvider, combine_errors
from bootloader.storage.models import State

logger = structlog.get_logger()


class StateSaver(Protocol):
    def save(self, state: State) -> State:
        ...


def persist_partial_state(store: StateSaver, failure: BaseException) -> BaseException:
    """Save whatever state ``failure`` still carries and return the error to report.

    The failure itself is returned when it carries no state or its state was
    saved. A recovery or save failure is combined with it, failure first, and
    nothing is saved.
    """
    if not isinstance(failure, PartialStateProvider):
        return failure

    try:
        partial = failure.recover_state()
    except Exception as recover_error:
        logger.error("partial_state_recovery_failed", error=str(recover_error))
        return combine_errors(failure, recover_error)

    try:
        store.save(partial)
    except Exception as save_error:
        logger.error("partial_state_save_failed", error=str(save_error))
        return combine_errors(failure, save_error)

    logger.warning("partial_state_saved", error=str(failure))
    return failure


def raise_with_partial_state(store: StateSaver, failure: BaseException) -> NoReturn:
    error = persist_partial_state(store, failure)
    if error is failure:
        raise failure
    raise error from failure
