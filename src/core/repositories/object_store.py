"""Abstract contract for image binary storage."""

from abc import ABC, abstractmethod


class ObjectStore(ABC):
    """Contract for storing and retrieving image files.

    Implementations could be S3, GCS, local disk, etc.
    The lifecycle manager depends on this interface, not the implementation.
    """

    @abstractmethod
    def put(
        self,
        *,
        album_id: str,
        image_id: str,
        file_data: bytes,
        content_type: str,
    ) -> str:
        """Store image bytes under a new unique key and return it.

        Args:
            album_id: Owning album, used to namespace the key
            image_id: Freshly generated image identifier
            file_data: Binary image content
            content_type: MIME type (e.g., 'image/jpeg')

        Returns:
            Opaque object key for later retrieval

        Raises:
            ObjectStoreError: If the write fails or times out
        """

    @abstractmethod
    def fetch(self, *, key: str) -> tuple[bytes, str, int]:
        """Fetch image bytes by key.

        Returns:
            Tuple of (content_bytes, content_type, content_length)

        Raises:
            NotFoundError: If the object doesn't exist
            ObjectStoreError: If the download fails
        """

    @abstractmethod
    def delete(self, *, key: str) -> None:
        """Delete image bytes by key.

        Deleting a missing object is not an error.

        Raises:
            ObjectStoreError: If deletion fails or times out
        """
