"""Shared test helpers."""

import threading
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from booking.domain.errors import DomainError

NOW = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)


def race(call: Callable, args: Iterable) -> list:
    """Run ``call`` once per argument, all threads released at the same moment.

    Returns each call's result, or the DomainError it raised.
    """
    args = list(args)
    barrier = threading.Barrier(len(args))

    def attempt(arg):
        barrier.wait()
        try:
            return call(arg)
        except DomainError as exc:
            return exc

    with ThreadPoolExecutor(max_workers=len(args)) as pool:
        return list(pool.map(attempt, args))
