"""Abstract contract for album existence checks."""

from abc import ABC, abstractmethod


class AlbumDirectory(ABC):
    """Read-only view of the album store used by orphan reconciliation."""

    @abstractmethod
    def exists(self, album_id: str) -> bool:
        """Return True if the album still exists.

        Raises:
            RepositoryError: If the lookup fails
        """
