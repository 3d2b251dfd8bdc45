"""Thin adapter for interacting with Amazon S3."""

from collections.abc import Mapping
import os
from typing import Any, Protocol

import boto3
from botocore.config import Config

from core.utils.constants import (
    DEFAULT_OBJECT_STORE_CONNECT_TIMEOUT,
    DEFAULT_OBJECT_STORE_MAX_ATTEMPTS,
    DEFAULT_OBJECT_STORE_READ_TIMEOUT,
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_IMAGE_S3_BUCKET_NAME,
    ENV_OBJECT_STORE_CONNECT_TIMEOUT,
    ENV_OBJECT_STORE_MAX_ATTEMPTS,
    ENV_OBJECT_STORE_READ_TIMEOUT,
)
from core.utils.environment import get_int_env, require_env


class _Boto3S3Client(Protocol):
    """Internal typing for boto3 S3 client (AWS-facing only)."""

    def put_object(
        self,
        *,
        Bucket: str,
        Key: str,
        Body: bytes,
        ContentType: str,
        Metadata: Mapping[str, str],
    ) -> Any: ...

    def get_object(
        self,
        *,
        Bucket: str,
        Key: str,
    ) -> Mapping[str, Any]: ...

    def delete_object(
        self,
        *,
        Bucket: str,
        Key: str,
    ) -> Any: ...


class S3AdapterProtocol(Protocol):
    """Minimal S3 adapter protocol (repository-facing)."""

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> None: ...

    def get_object(self, *, key: str) -> Mapping[str, Any]: ...

    def delete_object(self, *, key: str) -> None: ...


def build_client_config() -> Config:
    """Client timeouts so a hung call surfaces as an ordinary failure."""
    return Config(
        connect_timeout=get_int_env(
            ENV_OBJECT_STORE_CONNECT_TIMEOUT, DEFAULT_OBJECT_STORE_CONNECT_TIMEOUT
        ),
        read_timeout=get_int_env(
            ENV_OBJECT_STORE_READ_TIMEOUT, DEFAULT_OBJECT_STORE_READ_TIMEOUT
        ),
        retries={
            "max_attempts": get_int_env(
                ENV_OBJECT_STORE_MAX_ATTEMPTS, DEFAULT_OBJECT_STORE_MAX_ATTEMPTS
            ),
            "mode": "standard",
        },
    )


class S3Adapter:
    """Low-level S3 operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 S3 client
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self) -> None:
        """Create S3 client from environment configuration."""
        self._bucket = require_env(ENV_IMAGE_S3_BUCKET_NAME)
        self._client: _Boto3S3Client = boto3.client(
            "s3",
            endpoint_url=os.getenv(ENV_AWS_ENDPOINT_URL),
            region_name=os.getenv(ENV_AWS_REGION),
            config=build_client_config(),
        )

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> None:
        """Store object in S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.put_object(
            Bucket=self._bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
            Metadata=metadata,
        )

    def get_object(self, *, key: str) -> Mapping[str, Any]:
        """Fetch object from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        response = self._client.get_object(
            Bucket=self._bucket,
            Key=key,
        )
        return response

    def delete_object(self, *, key: str) -> None:
        """Delete object from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.delete_object(
            Bucket=self._bucket,
            Key=key,
        )
