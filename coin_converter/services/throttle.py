from __future__ import annotations

from typing import Any, Generic, TypeVar

from coin_converter.services.reactive import Signal
from coin_converter.services.scheduler import LoopScheduler

T = TypeVar("T")


class ThrottledValue(Generic[T]):
    """Trailing-edge throttle over a source signal.

    `output` changes at most once per `interval_sec`. A change arriving inside
    the window replaces the single pending timer, so only the latest source
    value is ever emitted late.
    """

    def __init__(self, source: Signal[T], interval_sec: float, scheduler: LoopScheduler) -> None:
        if interval_sec < 0:
            raise ValueError("interval_sec must be >= 0")
        self.source = source
        self.interval_sec = interval_sec
        self.scheduler = scheduler
        self.output: Signal[T] = Signal(source.get(), name=f"{source.name}:throttled")
        self.last_emitted_at = scheduler.now()
        self.emissions = 0
        self._pending: Any = None
        self._unsubscribe = None
        self.closed = False

    @property
    def value(self) -> T:
        return self.output.get()

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def start(self) -> None:
        if self._unsubscribe is not None or self.closed:
            return
        self._unsubscribe = self.source.subscribe(self._on_source_change)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _emit(self) -> None:
        self._pending = None
        if self.closed:
            return
        self.last_emitted_at = self.scheduler.now()
        self.emissions += 1
        self.output.set(self.source.get())

    def _on_source_change(self, _value: T) -> None:
        self._cancel_pending()
        elapsed = self.scheduler.now() - self.last_emitted_at
        if elapsed >= self.interval_sec:
            self._emit()
            return
        self._pending = self.scheduler.call_later(self.interval_sec - elapsed, self._emit)

    def close(self) -> None:
        self.closed = True
        self._cancel_pending()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
