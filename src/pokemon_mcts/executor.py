# src/pokemon_mcts/executor.py

"""Deadline-bounded execution of a decision.

The work runs on a dedicated daemon thread while the caller waits for at
most `deadline` seconds. On expiry the worker is told to stop through a
cancellation token and abandoned; it is never interrupted, and it does not
keep the process alive.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any

from pokemon_mcts.config import DECISION_DEADLINE_SECONDS


class TimeoutExceeded(Exception):
    """The decision did not complete before the deadline. The side forfeits."""

    def __init__(self, side: int | None, deadline: float):
        super().__init__(f"Decision exceeded the {deadline}s deadline (side {side}).")
        self.side = side
        self.deadline = deadline


class WorkerFailure(Exception):
    """The decision worker raised. Fatal to the match, never retried."""

    def __init__(self, side: int | None, message: str):
        super().__init__(f"Decision worker failed (side {side}): {message}")
        self.side = side


class BoundedExecutor:
    def __init__(self, deadline: float = DECISION_DEADLINE_SECONDS):
        if deadline <= 0:
            raise ValueError(f"deadline must be positive, got {deadline}")
        self.deadline = deadline

    def run(
        self,
        fn: Callable[..., Any],
        *args,
        side: int | None = None,
    ) -> tuple[Any, float]:
        """Run `fn(*args, cancel=token)` on a worker thread.

        Args:
            fn: The work. Receives a `threading.Event` as `cancel` keyword.
            side: Reported in errors.
        Returns:
            The result of `fn` and the elapsed time in milliseconds.
        Raises:
            TimeoutExceeded: `fn` did not return within the deadline.
            WorkerFailure: `fn` raised.
        """
        cancel = threading.Event()
        future: Future = Future()

        def _timed():
            if not future.set_running_or_notify_cancel():
                return
            start_time = time.perf_counter()
            try:
                result = fn(*args, cancel=cancel)
            except BaseException as e:
                future.set_exception(e)
            else:
                future.set_result((result, (time.perf_counter() - start_time) * 1000))

        # Daemon, so an abandoned worker never holds up interpreter exit.
        worker = threading.Thread(target=_timed, name="decision", daemon=True)
        worker.start()
        try:
            return future.result(timeout=self.deadline)
        except FuturesTimeoutError as e:
            # TimeoutError raised by `fn` itself is a failure, not an expiry.
            if future.done() and future.exception() is e:
                raise WorkerFailure(side, repr(e)) from e
            cancel.set()
            raise TimeoutExceeded(side, self.deadline) from e
        except Exception as e:
            raise WorkerFailure(side, repr(e)) from e

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(deadline={self.deadline})"
