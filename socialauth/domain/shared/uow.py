from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """Makes the writes of one request durable."""

    @abstractmethod
    async def commit(self) -> None:
        """Commit pending writes.

        Raises:
            PersistenceError: If the writes could not be committed
        """
        ...
