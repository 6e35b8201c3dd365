from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Callable, Iterator

from ._errors import Cancelled

__all__ = ["CancellationToken"]


class CancellationToken:
    """Cooperative cancellation signal shared between a caller and a call.

    Hand the same token to one or more client calls and call :meth:`cancel`
    from any thread. A call that has not finished yet aborts its HTTP
    exchange and raises :class:`~vidme_kit.Cancelled`.

    Examples:
        token = CancellationToken()
        token.cancel_after(10)
        vm.search_videos("cats", cancel=token)
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], object]] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Signal cancellation and run every registered abort callback once."""
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def cancel_after(self, seconds: float) -> threading.Timer:
        """Cancel the token once *seconds* have elapsed.

        The returned timer is already started; ``cancel()`` it to disarm.
        """
        timer = threading.Timer(seconds, self.cancel)
        timer.daemon = True
        timer.start()
        return timer

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise Cancelled("operation was cancelled")

    @contextmanager
    def register(self, callback: Callable[[], object]) -> Iterator[None]:
        """Run *callback* on cancellation for the duration of the ``with`` block.

        If the token is already cancelled the callback runs immediately.
        """
        with self._lock:
            fire_now = self._event.is_set()
            if not fire_now:
                self._callbacks.append(callback)
        if fire_now:
            callback()
        try:
            yield
        finally:
            with self._lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)
