"""Shared utility functions for Walkup Voice."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from src.core.exceptions import SubmissionPendingError


def configure_logging(level: str = "INFO") -> None:
    """Apply the configured log level to the root logger (entry points only)."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_identity_phrase(first_name: str, last_name: str) -> str:
    """Join first and last name with one space and trim the result."""
    return f"{first_name} {last_name}".strip()


class BusyFlag:
    """Loading indicator that is true exactly while a request is outstanding."""

    def __init__(self) -> None:
        self._busy = False

    def __bool__(self) -> bool:
        return self._busy

    @property
    def is_set(self) -> bool:
        return self._busy

    @contextmanager
    def hold(self) -> Iterator[None]:
        """Set the flag for the duration of the block, clearing it on every exit.

        Raises:
            SubmissionPendingError: If the flag is already set.
        """
        if self._busy:
            raise SubmissionPendingError()
        self._busy = True
        try:
            yield
        finally:
            self._busy = False
