"""Image lifecycle management across the object store and metadata repository.

The two stores cannot be updated atomically. Consistency comes from ordering
and from an explicit reconciliation sweep:

- upload writes the object first and the record last, so a failure in
  between leaves at most an orphaned object (invisible to clients)
- every delete path attempts object deletion first, then removes the
  record(s); the record's absence is authoritative
- records whose album disappeared out of band are removed by
  ``reconcile_orphans``
"""

import uuid
from collections.abc import Sequence
from typing import Any

from aws_lambda_powertools import Logger

from core.models.errors import NotFoundError, ObjectStoreError, RepositoryError, ValidationError
from core.models.image import (
    BulkDeleteResult,
    Comment,
    DeleteResult,
    ImageRecord,
    ReconcileResult,
    UploadedFile,
)
from core.repositories.album_directory import AlbumDirectory
from core.repositories.image_repository import ImageRepository
from core.repositories.object_store import ObjectStore
from core.services.fanout import settle_all
from core.utils.constants import (
    COMMENT_ID_PREFIX,
    DEFAULT_DELETE_MAX_WORKERS,
    ERROR_CODE_IMAGE_NOT_FOUND,
    ERROR_CODE_METADATA_UPDATE_CONFLICT,
    FAVORITE_TOGGLE_ATTEMPTS,
    IMAGE_ID_PREFIX,
)
from core.utils.time import utc_now_iso
from core.utils.validators import (
    parse_tags,
    validate_comment_text,
    validate_image_file,
    validate_image_metadata,
    validate_person,
)

logger = Logger(UTC=True)


class ImageLifecycleManager:
    """Application service owning every image state transition.

    Collaborators are process-scoped and injected at construction.
    """

    def __init__(
        self,
        *,
        object_store: ObjectStore,
        images: ImageRepository,
        albums: AlbumDirectory,
        max_workers: int = DEFAULT_DELETE_MAX_WORKERS,
    ) -> None:
        self.object_store = object_store
        self.images = images
        self.albums = albums
        self.max_workers = max_workers

    @staticmethod
    def generate_image_id() -> str:
        """Generate a unique image identifier."""
        return f"{IMAGE_ID_PREFIX}{uuid.uuid4().hex}"

    @staticmethod
    def generate_comment_id() -> str:
        return f"{COMMENT_ID_PREFIX}{uuid.uuid4().hex}"

    # ------------------------------------------------------------------
    # Upload
    # ------------------------------------------------------------------

    def upload(
        self,
        *,
        album_id: str,
        file: UploadedFile,
        tags: Any = None,
        person: Any = None,
    ) -> ImageRecord:
        """Store an image and create its record.

        The upload flow is:
        1. Validate file and metadata (no store is touched on failure)
        2. Write the bytes to the object store under a new key
        3. Persist the record referencing that key
        4. On record failure, make one best-effort attempt to remove the object

        Raises:
            ValidationError: If the file or metadata is invalid
            ObjectStoreError: If the object write fails (no record is created)
            RepositoryError: If the record cannot be persisted
        """
        validate_image_file(file)
        parsed_tags, parsed_person = validate_image_metadata(tags, person)

        image_id = self.generate_image_id()
        logger.debug(
            "Starting image upload",
            extra={"album_id": album_id, "image_id": image_id, "size": file.size},
        )

        try:
            object_key = self.object_store.put(
                album_id=album_id,
                image_id=image_id,
                file_data=file.data,
                content_type=file.content_type,
            )
        except ObjectStoreError:
            logger.exception(
                "Image upload to object store failed",
                extra={"album_id": album_id, "image_id": image_id},
            )
            raise

        record = ImageRecord(
            image_id=image_id,
            album_id=album_id,
            object_key=object_key,
            image_name=file.filename,
            mime_type=file.content_type,
            file_size=file.size,
            tags=parsed_tags,
            person=parsed_person or None,
            favorite=False,
            comments=[],
            created_at=utc_now_iso(),
            updated_at=None,
        )

        try:
            self.images.insert(record=record)
        except RepositoryError:
            logger.exception(
                "Failed to persist image record",
                extra={"image_id": image_id, "object_key": object_key},
            )

            try:
                self.object_store.delete(key=object_key)
            except ObjectStoreError:
                logger.warning(
                    "Failed to clean up uploaded object after record failure",
                    extra={"object_key": object_key},
                )

            raise

        logger.info(
            "Image uploaded successfully",
            extra={"image_id": image_id, "album_id": album_id},
        )
        return record

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_album_images(self, album_id: str, *, favorites_only: bool = False) -> list[ImageRecord]:
        records = self.images.find_by_album(album_id=album_id)
        if favorites_only:
            records = [record for record in records if record.favorite]
        return records

    def get_image(self, image_id: str, album_id: str) -> ImageRecord:
        """Resolve a record by its compound key.

        Raises:
            NotFoundError: If no record matches both ids
        """
        record = self.images.find_one(image_id=image_id, album_id=album_id)

        if record is None:
            logger.warning(
                "Image record not found",
                extra={"image_id": image_id, "album_id": album_id},
            )
            raise NotFoundError(
                message="Image not found",
                error_code=ERROR_CODE_IMAGE_NOT_FOUND,
                details={"image_id": image_id, "album_id": album_id},
            )

        return record

    def fetch_image_file(self, image_id: str, album_id: str) -> tuple[bytes, str, ImageRecord]:
        """Return the image bytes, their content type and the record."""
        record = self.get_image(image_id, album_id)
        body, content_type, _ = self.object_store.fetch(key=record.object_key)
        return body, content_type or record.mime_type, record

    # ------------------------------------------------------------------
    # Deletes
    # ------------------------------------------------------------------

    def delete_single(self, image_id: str, album_id: str) -> DeleteResult:
        """Delete one image.

        Object deletion is best-effort: a failure is logged and reported in
        ``storage_errors`` but never blocks removal of the record.

        Raises:
            NotFoundError: If no record matches both ids
            RepositoryError: If the record cannot be removed
        """
        record = self.get_image(image_id, album_id)

        storage_errors: list[str] = []
        try:
            self.object_store.delete(key=record.object_key)
        except ObjectStoreError as exc:
            message = f"Failed to delete image {image_id} from object store: {exc.message}"
            logger.warning(message, extra={"image_id": image_id, "object_key": record.object_key})
            storage_errors.append(message)

        self.images.delete_one(image_id=image_id, album_id=album_id)

        logger.info(
            "Image deleted",
            extra={"image_id": image_id, "album_id": album_id, "storage_errors": len(storage_errors)},
        )
        return DeleteResult(
            deleted=True,
            image_id=image_id,
            object_key=record.object_key,
            storage_errors=storage_errors,
        )

    def delete_all_for_album(self, album_id: str) -> BulkDeleteResult:
        """Delete every image of an album.

        Object deletions run concurrently and all of them settle before the
        single bulk metadata delete. The metadata count is authoritative.
        """
        records = self.images.find_by_album(album_id=album_id)

        if not records:
            return BulkDeleteResult(deleted_count=0, errors=[])

        errors = self._delete_objects(records, label="image")
        deleted_count = self.images.delete_many(album_id=album_id)

        logger.info(
            f"Deleted {deleted_count} images from album {album_id}",
            extra={"album_id": album_id, "deleted_count": deleted_count, "errors": len(errors)},
        )
        return BulkDeleteResult(deleted_count=deleted_count, errors=errors)

    def reconcile_orphans(self) -> ReconcileResult:
        """Remove records (and their objects) whose album no longer exists.

        Album existence is resolved once per distinct album id. An album
        lookup failure aborts the sweep before anything is deleted.
        """
        records = self.images.find_all()

        album_ids = sorted({record.album_id for record in records})
        missing_albums = {album_id for album_id in album_ids if not self.albums.exists(album_id)}
        orphans = [record for record in records if record.album_id in missing_albums]

        if not orphans:
            logger.info("No orphaned images found", extra={"scanned": len(records)})
            return ReconcileResult(cleaned_count=0, errors=[], scanned_count=len(records))

        errors = self._delete_objects(orphans, label="orphaned image")
        cleaned_count = self.images.delete_many(keys=[record.key for record in orphans])

        logger.info(
            f"Cleaned up {cleaned_count} orphaned images",
            extra={
                "scanned": len(records),
                "cleaned_count": cleaned_count,
                "orphaned_albums": len(missing_albums),
                "errors": len(errors),
            },
        )
        return ReconcileResult(
            cleaned_count=cleaned_count,
            errors=errors,
            scanned_count=len(records),
            orphaned_album_ids=sorted(missing_albums),
        )

    def _delete_objects(self, records: Sequence[ImageRecord], *, label: str) -> list[str]:
        """Best-effort concurrent object deletion; returns error messages."""
        outcomes = settle_all(
            lambda record: self.object_store.delete(key=record.object_key),
            records,
            max_workers=self.max_workers,
            thread_name_prefix="object-delete",
        )

        errors: list[str] = []
        for outcome in outcomes:
            if outcome.ok:
                continue
            reason = outcome.error.message if isinstance(outcome.error, ObjectStoreError) else str(outcome.error)
            message = f"Failed to delete {label} {outcome.item.image_id} from object store: {reason}"
            logger.warning(message, extra={"object_key": outcome.item.object_key})
            errors.append(message)

        return errors

    # ------------------------------------------------------------------
    # Metadata mutations
    # ------------------------------------------------------------------

    def toggle_favorite(self, image_id: str, album_id: str) -> ImageRecord:
        """Flip the favorite flag, conditional on the value that was read.

        Raises:
            NotFoundError: If the record does not resolve
            RepositoryError: If concurrent toggles keep winning the race
        """
        for attempt in range(1, FAVORITE_TOGGLE_ATTEMPTS + 1):
            record = self.get_image(image_id, album_id)
            updated = self.images.update_one(
                image_id=image_id,
                album_id=album_id,
                set_fields={"favorite": not record.favorite, "updated_at": utc_now_iso()},
                expected_fields={"favorite": record.favorite},
            )
            if updated is not None:
                return updated

            logger.info(
                "Favorite flag changed concurrently, retrying",
                extra={"image_id": image_id, "album_id": album_id, "attempt": attempt},
            )

        raise RepositoryError(
            message="Image was modified concurrently, please retry",
            error_code=ERROR_CODE_METADATA_UPDATE_CONFLICT,
            details={"image_id": image_id, "album_id": album_id},
        )

    def add_comment(self, image_id: str, album_id: str, *, author_id: str, text: Any) -> ImageRecord:
        comment = Comment(
            comment_id=self.generate_comment_id(),
            author_id=author_id,
            text=validate_comment_text(text),
            created_at=utc_now_iso(),
        )
        return self._update(
            image_id,
            album_id,
            append_fields={"comments": [comment.model_dump()]},
        )

    def update_metadata(
        self,
        image_id: str,
        album_id: str,
        *,
        tags: Any = None,
        person: Any = None,
    ) -> ImageRecord:
        """Replace tags and/or person; omitted (None) fields are left unchanged.

        An empty person string clears the field.
        """
        if tags is None and person is None:
            raise ValidationError(message="Provide tags or person to update")

        set_fields: dict[str, Any] = {}
        if tags is not None:
            set_fields["tags"] = parse_tags(tags)
        if person is not None:
            set_fields["person"] = validate_person(person) or None

        return self._update(image_id, album_id, set_fields=set_fields)

    def _update(
        self,
        image_id: str,
        album_id: str,
        *,
        set_fields: dict[str, Any] | None = None,
        append_fields: dict[str, Any] | None = None,
    ) -> ImageRecord:
        set_fields = {**(set_fields or {}), "updated_at": utc_now_iso()}
        record = self.images.update_one(
            image_id=image_id,
            album_id=album_id,
            set_fields=set_fields,
            append_fields=append_fields,
        )

        if record is None:
            raise NotFoundError(
                message="Image not found",
                error_code=ERROR_CODE_IMAGE_NOT_FOUND,
                details={"image_id": image_id, "album_id": album_id},
            )

        return record
