"""Object store contract shared by every storage backend."""

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict


class StoredObject(BaseModel):
    """Where an uploaded object ended up."""

    model_config = ConfigDict(frozen=True)

    key: str
    url: str


class ObjectStore(ABC):
    """
    Contract for durable byte storage addressed by key.

    The pipeline depends on this interface, never on a concrete backend.
    Every failure surfaces as StorageError carrying the key and operation.
    """

    @abstractmethod
    def upload(self, key: str, data: bytes, content_type: str) -> StoredObject:
        """
        Store data under key, replacing anything already there.

        Raises:
            StorageError: If the write fails
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Remove the object stored under key. Deleting a missing key is not an error.

        Raises:
            StorageError: If the delete fails
        """

    @abstractmethod
    def public_url(self, key: str) -> str:
        """URL clients use to fetch the object stored under key."""
