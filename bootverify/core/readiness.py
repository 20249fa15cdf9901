"""Readiness polling with cooperative cancellation.

:func:`poll_immediate` evaluates a condition right away and then at a
fixed interval until it holds, the timeout elapses, or the shared
cancellation event is set.  Sleeping is done on the event itself so a
cancel wakes the poller at once.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from bootverify.cluster.protocol import ClusterClient


class WaitTimeoutError(TimeoutError):
    """Raised when a condition did not hold within the allotted time."""


class PollCancelledError(RuntimeError):
    """Raised when the cancellation event is set while polling.

    Cancellation is not a failure; callers translate this into "no result".
    """


def poll_immediate(
    condition: Callable[[], bool],
    *,
    interval: float,
    timeout: float,
    cancel: threading.Event,
    clock: Callable[[], float] = time.monotonic,
) -> None:
    """Block until *condition* returns ``True``.

    Parameters
    ----------
    condition:
        Called once immediately and then every *interval* seconds.  Any
        exception it raises propagates unchanged; it is never retried.
    interval:
        Seconds between polls.
    timeout:
        Total budget in seconds, measured on *clock* so slow polls count
        against it.
    cancel:
        Checked before every poll and used for sleeping.

    Raises
    ------
    WaitTimeoutError
        The budget ran out before *condition* held.
    PollCancelledError
        *cancel* was set.
    """
    deadline = clock() + timeout
    while True:
        if cancel.is_set():
            raise PollCancelledError("polling cancelled")
        if condition():
            return
        remaining = deadline - clock()
        if remaining <= 0:
            raise WaitTimeoutError(f"condition not met within {timeout:g}s")
        if cancel.wait(min(interval, remaining)):
            raise PollCancelledError("polling cancelled")


def wait_vm_ready(
    client: ClusterClient,
    namespace: str,
    name: str,
    *,
    timeout: float,
    cancel: threading.Event,
    interval: float = 1.0,
) -> None:
    """Wait for the VM *name* to report ``status.ready``.

    A failed fetch (including not-found) propagates immediately.
    """

    def _ready() -> bool:
        return client.get_vm(namespace, name).ready

    try:
        poll_immediate(_ready, interval=interval, timeout=timeout, cancel=cancel)
    except WaitTimeoutError as exc:
        raise WaitTimeoutError(
            f"VM {namespace}/{name} not ready within {timeout:g}s"
        ) from exc
