from __future__ import annotations

from typing import Callable, Generic, Sequence, TypeVar

T = TypeVar("T")


class Signal(Generic[T]):
    """Observable value cell; subscribers are called synchronously on change."""

    def __init__(self, value: T, *, name: str = "", dedupe: bool = True) -> None:
        self._value = value
        self.name = name
        self.dedupe = dedupe
        self._subscribers: list[Callable[[T], None]] = []

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> bool:
        if self.dedupe and value == self._value:
            return False
        self._value = value
        for callback in list(self._subscribers):
            callback(value)
        return True

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)


class Effect:
    """Re-runs `run` whenever any dependency signal changes."""

    def __init__(self, dependencies: Sequence[Signal], run: Callable[[], None]) -> None:
        self.dependencies = tuple(dependencies)
        self._run = run
        self._unsubscribers: list[Callable[[], None]] = []
        self.active = False
        self.runs = 0

    def activate(self) -> None:
        if self.active:
            return
        self.active = True
        for dep in self.dependencies:
            self._unsubscribers.append(dep.subscribe(self._on_change))
        self.rerun()

    def _on_change(self, _value: object) -> None:
        self.rerun()

    def rerun(self) -> None:
        if not self.active:
            return
        self.runs += 1
        self._run()

    def dispose(self) -> None:
        self.active = False
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
