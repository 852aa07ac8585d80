"""Amazon S3 implementation of the StorageClient interface."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from boto3.exceptions import S3UploadFailedError
from boto3.s3.transfer import TransferConfig
from botocore.exceptions import BotoCoreError, ClientError

from distiller.domain.models import Artifact
from distiller.exceptions import (
    BucketSelectionError,
    RegionResolutionError,
    StorageDeleteError,
    StorageUploadError,
)
from distiller.infrastructure.interfaces import StorageClient

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"

# GetBucketLocation reports buckets in us-east-1 with an empty constraint,
# and very old eu-west-1 buckets with the legacy "EU" value.
_LOCATION_ALIASES = {"": DEFAULT_REGION, "EU": "eu-west-1"}

SERVER_SIDE_ENCRYPTION = "AES256"

_MB = 1024 * 1024


def default_transfer_config() -> TransferConfig:
    """Multipart settings that stream large audio files from disk in chunks."""
    return TransferConfig(
        multipart_threshold=16 * _MB,
        multipart_chunksize=16 * _MB,
        max_concurrency=4,
        use_threads=True,
    )


class S3StorageClient(StorageClient):
    """Handles bucket discovery, uploads and cleanup on Amazon S3."""

    def __init__(
        self,
        client: Any,
        regional_client_factory: Callable[[str], Any],
        transfer_config: TransferConfig | None = None,
    ):
        self._client = client
        self._regional_client_factory = regional_client_factory
        self._regional_clients: dict[str, Any] = {}
        self._transfer_config = transfer_config or default_transfer_config()

    def list_buckets(self) -> list[str]:
        try:
            response = self._client.list_buckets()
        except (BotoCoreError, ClientError) as e:
            logger.exception("S3 bucket listing failed")
            raise BucketSelectionError(f"Error getting bucket list: {e}", e) from e
        names = [bucket["Name"] for bucket in response.get("Buckets", [])]
        logger.info("Buckets listed", extra={"bucket_count": len(names)})
        return names

    def bucket_region(self, bucket_name: str) -> str:
        try:
            response = self._client.get_bucket_location(Bucket=bucket_name)
        except (BotoCoreError, ClientError) as e:
            logger.exception(
                "S3 bucket location lookup failed", extra={"bucket_name": bucket_name}
            )
            raise RegionResolutionError(bucket_name, e) from e

        constraint = response.get("LocationConstraint") or ""
        region = _LOCATION_ALIASES.get(constraint, constraint)
        logger.info(
            "Bucket region resolved",
            extra={"bucket_name": bucket_name, "region": region},
        )
        return region

    def upload(self, path: Path, bucket_name: str, region: str) -> Artifact:
        key = path.name
        client = self._regional_client(region)
        try:
            client.upload_file(
                Filename=str(path),
                Bucket=bucket_name,
                Key=key,
                ExtraArgs={"ServerSideEncryption": SERVER_SIDE_ENCRYPTION},
                Config=self._transfer_config,
            )
        except (S3UploadFailedError, BotoCoreError, ClientError, OSError) as e:
            logger.exception(
                "S3 upload failed",
                extra={"bucket_name": bucket_name, "object_name": key},
            )
            raise StorageUploadError(key, e) from e

        artifact = Artifact(bucket=bucket_name, key=key, region=region)
        logger.info(
            "File uploaded to S3",
            extra={"uri": artifact.uri, "size": path.stat().st_size, "region": region},
        )
        return artifact

    def delete(self, artifact: Artifact) -> None:
        client = self._regional_client(artifact.region)
        try:
            client.delete_object(Bucket=artifact.bucket, Key=artifact.key)
        except (BotoCoreError, ClientError) as e:
            logger.exception("S3 delete failed", extra={"uri": artifact.uri})
            raise StorageDeleteError(artifact.key, e) from e
        logger.info("Object deleted from S3", extra={"uri": artifact.uri})

    def _regional_client(self, region: str) -> Any:
        if region not in self._regional_clients:
            self._regional_clients[region] = self._regional_client_factory(region)
        return self._regional_clients[region]
