"""
Run control for long algorithm loops.

The engine never yields, so a caller that must stay responsive hands the
whole driver run to :func:`run_in_background` and keeps a
:class:`CancellationToken` to stop it between iterations.
"""
from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from .core.errors import RunCancelledError

ProgressCallback = Callable[[int, int], None]

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


class CancellationToken:
    """Cooperative stop flag checked once per driver iteration."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise RunCancelledError("Run cancelled")


def checkpoint(token: Optional[CancellationToken],
               progress: Optional[ProgressCallback],
               done: int, total: int) -> None:
    """Per-iteration hook: honour cancellation, then report progress."""
    if token is not None:
        token.raise_if_cancelled()
    if progress is not None:
        progress(done, total)


def _default_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='qubitlab')
        return _executor


def run_in_background(fn: Callable, *args,
                      executor: Optional[ThreadPoolExecutor] = None,
                      **kwargs) -> Future:
    """
    Submit a blocking driver run to a worker thread.

    Example:
        >>> token = CancellationToken()
        >>> future = run_in_background(GroverSearch(3).search, 5, token=token)
        >>> result = future.result()
    """
    pool = executor if executor is not None else _default_executor()
    return pool.submit(fn, *args, **kwargs)
