"""Head-insertion stack used for handlers and processors."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator
from typing import Generic, TypeVar

from .errors import EmptyStackError

T = TypeVar("T")


class Stack(Generic[T]):
    """Ordered sequence where the newest item sits at the head.

    ``replace`` installs a declared list in reverse so that iteration
    order matches the declared left-to-right order.
    """

    def __init__(self, items: Iterable[T] = (), *, kind: str = "item"):
        self._kind = kind
        self._items: deque[T] = deque()
        self.replace(items)

    def push(self, item: T) -> None:
        self._items.appendleft(item)

    def pop(self) -> T:
        if not self._items:
            raise EmptyStackError(f"You tried to pop from an empty {self._kind} stack.")
        return self._items.popleft()

    def replace(self, items: Iterable[T]) -> None:
        self._items.clear()
        for item in reversed(list(items)):
            self.push(item)

    def __iter__(self) -> Iterator[T]:
        return iter(tuple(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"Stack(kind={self._kind!r}, items={list(self._items)!r})"
