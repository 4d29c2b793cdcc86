"""Remote-backed collections with fetch and mutation dispatch."""

import logging
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from legal_aid_client.services.observable import Observable
from legal_aid_client.services.scope import ScreenScope

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class UpdateStrategy(Enum):
    """How local state follows a successful remote write."""

    PATCH = "patch"
    REMOVE = "remove"
    REFETCH = "refetch"


@dataclass(frozen=True)
class Mutation(Generic[T]):
    """A remote write and the way its result is folded into local state.

    ``write`` runs on a worker thread. For ``PATCH`` it returns the
    server-confirmed row, for ``REMOVE`` it returns the removed row (or a
    row carrying its key) and for ``REFETCH`` its return value is ignored.
    """

    description: str
    write: Callable[[], T | None]
    strategy: UpdateStrategy


@dataclass
class RemoteCollection(Generic[T]):
    """Raw rows of one remote table as seen by a single screen."""

    name: str
    scope: ScreenScope
    fetch: Callable[[], list[T]]
    key: Callable[[T], Hashable]
    items: Observable[list[T]] = field(default_factory=lambda: Observable([]))
    loading: Observable[bool] = field(default_factory=lambda: Observable(False))
    last_error: Observable[Exception | None] = field(
        default_factory=lambda: Observable(None)
    )

    async def load(self) -> list[T]:
        """Replace local rows with a fresh fetch; failures yield no rows."""
        self.loading.set(True)
        try:
            rows = await self.scope.run_remote(self.fetch)
        except Exception as exc:
            _logger.exception("Failed to load %s", self.name)
            self.last_error.set(exc)
            rows = []
        else:
            self.last_error.set(None)
        finally:
            self.loading.set(False)
        self.items.set(list(rows))
        return self.items.value

    async def apply(self, mutation: Mutation[T]) -> T | None:
        """Run a remote write, then patch, prune or reload local rows.

        Local rows only change after the write is acknowledged. A failed
        write is logged and leaves local rows untouched.
        """
        try:
            row = await self.scope.run_remote(mutation.write)
        except Exception as exc:
            _logger.exception("Failed to %s in %s", mutation.description, self.name)
            self.last_error.set(exc)
            return None
        if mutation.strategy is UpdateStrategy.REFETCH:
            await self.load()
            return row
        self.last_error.set(None)
        if row is None:
            _logger.warning(
                "No confirmed row for %s in %s", mutation.description, self.name
            )
            return None
        if mutation.strategy is UpdateStrategy.PATCH:
            self.items.set(self._merged(row))
        else:
            self.items.set(self._without(row))
        return row

    def _merged(self, row: T) -> list[T]:
        row_key = self.key(row)
        merged: list[T] = []
        replaced = False
        for current in self.items.value:
            if self.key(current) == row_key:
                merged.append(row)
                replaced = True
            else:
                merged.append(current)
        if not replaced:
            merged.append(row)
        return merged

    def _without(self, row: T) -> list[T]:
        row_key = self.key(row)
        return [
            current for current in self.items.value if self.key(current) != row_key
        ]
