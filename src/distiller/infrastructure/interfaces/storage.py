"""Abstract interface for object storage operations."""

from abc import ABC, abstractmethod
from pathlib import Path

from distiller.domain.models import Artifact


class StorageClient(ABC):
    """Abstract base class for object storage backends."""

    @abstractmethod
    def list_buckets(self) -> list[str]:
        """
        Lists the buckets visible to the current credentials.

        Raises:
            BucketSelectionError: If the listing fails.
        """

    @abstractmethod
    def bucket_region(self, bucket_name: str) -> str:
        """
        Determines the home region of a bucket.

        Args:
            bucket_name: The storage bucket name.

        Returns:
            The region name. Never empty.

        Raises:
            RegionResolutionError: If the bucket cannot be queried.
        """

    @abstractmethod
    def upload(self, path: Path, bucket_name: str, region: str) -> Artifact:
        """
        Streams a local file into a bucket with at-rest encryption.

        Args:
            path: Canonical path of the local file.
            bucket_name: The destination bucket.
            region: The bucket's region; the upload targets that endpoint.

        Returns:
            The artifact locator of the uploaded object.

        Raises:
            StorageUploadError: If the upload fails.
        """

    @abstractmethod
    def delete(self, artifact: Artifact) -> None:
        """
        Deletes an uploaded object.

        Raises:
            StorageDeleteError: If the delete fails.
        """
