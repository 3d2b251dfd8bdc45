"""Abstract contract for image metadata persistence."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from core.models.image import ImageRecord

ImageKey = tuple[str, str]  # (album_id, image_id)
Patch = dict[str, Any]


class ImageRepository(ABC):
    """Contract for storing and retrieving image records.

    Records are addressed by the compound (image_id, album_id) key so that an
    image id can never be resolved through the wrong album.
    """

    @abstractmethod
    def insert(self, *, record: ImageRecord) -> None:
        """Persist a new record.

        Raises:
            RepositoryError: If the write fails or the key already exists
        """

    @abstractmethod
    def find_by_album(self, *, album_id: str) -> list[ImageRecord]:
        """Return every record of an album, newest first.

        Raises:
            RepositoryError: If the query fails
        """

    @abstractmethod
    def find_one(self, *, image_id: str, album_id: str) -> ImageRecord | None:
        """Return the record for the compound key, or None.

        Raises:
            RepositoryError: If the lookup fails
        """

    @abstractmethod
    def find_all(self) -> list[ImageRecord]:
        """Return every record in the store.

        Raises:
            RepositoryError: If the scan fails
        """

    @abstractmethod
    def update_one(
        self,
        *,
        image_id: str,
        album_id: str,
        set_fields: Patch | None = None,
        append_fields: Patch | None = None,
        expected_fields: Patch | None = None,
    ) -> ImageRecord | None:
        """Apply a patch to an existing record.

        Args:
            image_id: Image identifier
            album_id: Owning album identifier
            set_fields: Attributes to overwrite
            append_fields: List attributes to extend, value is a list of items
            expected_fields: Attribute values the stored record must still hold

        Returns:
            The updated record, or None if the key does not resolve or an
            expected value no longer matches

        Raises:
            RepositoryError: If the patch is empty or touches an immutable
                field, or if the update fails
        """

    @abstractmethod
    def delete_one(self, *, image_id: str, album_id: str) -> int:
        """Delete a single record.

        Returns:
            Number of records removed (0 if already absent)

        Raises:
            RepositoryError: If deletion fails
        """

    @abstractmethod
    def delete_many(
        self,
        *,
        album_id: str | None = None,
        keys: Iterable[ImageKey] | None = None,
    ) -> int:
        """Delete every record matching the filter.

        Exactly one of ``album_id`` or ``keys`` must be given.

        Returns:
            Number of records removed

        Raises:
            RepositoryError: If the filter is missing or ambiguous, or deletion fails
        """
