"""Transaction boundary interface."""

from abc import ABC, abstractmethod
from typing import AsyncContextManager


class UnitOfWork(ABC):
    """
    Groups the writes of one use case into a single atomic transaction.

    Leaving the context normally commits; any exception rolls back and
    propagates. Storage failures surface as PersistenceException.
    """

    @abstractmethod
    def transaction(self) -> AsyncContextManager[None]:
        ...
