"""Observable state holders for view-models."""

from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")
A = TypeVar("A")
B = TypeVar("B")
R = TypeVar("R")

Subscriber = Callable[[T], None]


class Observable(Generic[T]):
    """Holds a value and notifies subscribers synchronously when it changes.

    Setting a value equal to the current one does not notify anybody, so
    subscribers only see distinct states.
    """

    def __init__(self, value: T) -> None:
        self._value = value
        self._subscribers: list[Subscriber[T]] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        """Replace the value and publish it to subscribers."""
        if value == self._value:
            return
        self._value = value
        for subscriber in list(self._subscribers):
            subscriber(value)

    def update(self, transform: Callable[[T], T]) -> None:
        """Replace the value with ``transform(current)``."""
        self.set(transform(self._value))

    def subscribe(
        self, subscriber: Subscriber[T], emit_current: bool = True
    ) -> Callable[[], None]:
        """Register a subscriber and return a function that removes it."""
        self._subscribers.append(subscriber)
        if emit_current:
            subscriber(self._value)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe


def combine(
    first: Observable[A],
    second: Observable[B],
    transform: Callable[[A, B], R],
) -> Observable[R]:
    """Return an observable recomputed from both inputs on every change."""
    derived: Observable[R] = Observable(transform(first.value, second.value))

    def recompute(_changed: object) -> None:
        derived.set(transform(first.value, second.value))

    first.subscribe(recompute, emit_current=False)
    second.subscribe(recompute, emit_current=False)
    return derived
