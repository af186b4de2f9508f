"""Abstract contract for the key-value store holding image records."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any


class KeyValueStore(ABC):
    """Contract for storing serialized records by key.

    Implementations could be S3, an edge KV namespace, Redis, etc.
    Services receive an instance explicitly and never look one up globally.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Fetch the value stored under ``key``.

        Returns:
            The stored text, or ``None`` when the key is absent

        Raises:
            StorageFailureError: If the store rejects the read
        """

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value.

        Raises:
            StorageFailureError: If the store rejects the write
        """

    @abstractmethod
    def list_keys(self) -> Sequence[Any]:
        """Enumerate every stored key.

        Entries are either plain strings or objects exposing the key as
        ``key`` or ``name``.

        Raises:
            StorageFailureError: If enumeration fails
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; deleting a missing key is not an error.

        Raises:
            StorageFailureError: If the store rejects the deletion
        """
