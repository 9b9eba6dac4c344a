"""Logging utilities for the stackit_webhook package."""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

# NullHandler on the package logger, the host decides where records go
_root = logging.getLogger("stackit_webhook")
_root.addHandler(logging.NullHandler())

# Fields describing the challenge currently being solved
_challenge: ContextVar[dict[str, str] | None] = ContextVar("challenge", default=None)


@contextmanager
def challenge_context(domain: str, record_name: str) -> Iterator[None]:
    """Tag every record logged inside the block with the challenge it serves.

    Contexts nest; leaving the block restores the enclosing challenge.

    Args:
        domain: The domain under challenge.
        record_name: Fully qualified name of the challenge TXT record.
    """
    token = _challenge.set({"domain": domain, "record_name": record_name})
    try:
        yield
    finally:
        _challenge.reset(token)


def get_challenge_extra() -> dict[str, str]:
    """Fields for ``extra=``, or an empty dict outside a challenge."""
    fields = _challenge.get()
    return dict(fields) if fields else {}


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the stackit_webhook namespace."""
    return logging.getLogger(name)


class Timer:
    """Context manager measuring a block in milliseconds.

    Usage:
        with Timer() as t:
            repository.create_rrset(rrset)
        logger.info("done", extra={"elapsed_ms": t.elapsed_ms})
    """

    def __init__(self) -> None:
        self.elapsed_ms: float = 0
        self._start: float = 0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args: object) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000
