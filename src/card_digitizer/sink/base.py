"""Abstract base class for record sinks."""

from abc import ABC, abstractmethod

from card_digitizer.models.record import CardRecord


class RecordSink(ABC):
    """Abstract base class for record sinks."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this sink."""
        ...

    @abstractmethod
    def save(self, record: CardRecord) -> str:
        """
        Persist a record.

        Args:
            record: Card record to store.

        Returns:
            Identifier assigned by the destination.

        Raises:
            ValueError: If the destination rejects the record.
        """
        ...

    @abstractmethod
    def check(self) -> bool:
        """Return True if the destination is reachable with the current credentials."""
        ...
