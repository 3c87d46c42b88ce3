"""Transaction boundary contract that services depend on."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TypeAlias


class UnitOfWork(ABC):
    """A ``with`` scope whose repositories (``users``, ``projects``, ...) share one transaction."""

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...


UowFactory: TypeAlias = Callable[[], UnitOfWork]
