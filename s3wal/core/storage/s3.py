"""
S3-compatible object store backed by boto3.

Works against AWS S3 and S3-compatible servers (MinIO, R2, ...) that
support conditional writes with If-None-Match. Timeouts and retries are
configured on the botocore client, never in the log itself.
"""

from typing import Any, Iterator, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from s3wal.core.storage.base import ObjectStore
from s3wal.errors import NotFound, StoreError, WriteConflict
from s3wal.utils.config import WALConfig
from s3wal.utils.context import OperationContext, check_context
from s3wal.utils.logging import get_logger

logger = get_logger(__name__)

CONTENT_TYPE = "application/octet-stream"

_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}
_CONFLICT_CODES = {"PreconditionFailed", "412", "ConditionalRequestConflict", "409"}


def _error_code(err: ClientError) -> str:
    return str(err.response.get("Error", {}).get("Code", ""))


class S3ObjectStore(ObjectStore):
    """
    Object store on top of a boto3 S3 client.
    
    Attributes:
        client: boto3 S3 client
    """
    
    def __init__(self, client: Any):
        """
        Initialize the store.
        
        Args:
            client: boto3 S3 client (or anything exposing the same calls)
        """
        self.client = client
    
    @classmethod
    def from_config(cls, config: WALConfig) -> "S3ObjectStore":
        """
        Build a store with a client configured from settings.
        
        Credentials come from boto3's default provider chain.
        
        Args:
            config: Endpoint, region, timeout and retry settings
        
        Returns:
            Configured store
        """
        client = boto3.Session(region_name=config.region).client(
            "s3",
            region_name=config.region,
            endpoint_url=config.endpoint_url,
            config=BotoConfig(
                connect_timeout=config.connect_timeout_s,
                read_timeout=config.read_timeout_s,
                retries={"max_attempts": config.max_attempts, "mode": config.retry_mode},
            ),
        )
        
        logger.info(
            "Created S3 client",
            endpoint_url=config.endpoint_url,
            region=config.region,
            max_attempts=config.max_attempts,
        )
        
        return cls(client)
    
    def put(
        self,
        bucket: str,
        key: str,
        data: bytes,
        if_absent: bool = True,
        ctx: Optional[OperationContext] = None,
    ) -> None:
        check_context(ctx, "put")
        
        kwargs: dict[str, Any] = {
            "Bucket": bucket,
            "Key": key,
            "Body": data,
            "ContentType": CONTENT_TYPE,
        }
        if if_absent:
            kwargs["IfNoneMatch"] = "*"
        
        try:
            self.client.put_object(**kwargs)
        except ClientError as e:
            if if_absent and _error_code(e) in _CONFLICT_CODES:
                raise WriteConflict(key) from e
            raise StoreError("put", key, str(e)) from e
        except BotoCoreError as e:
            raise StoreError("put", key, str(e)) from e
    
    def get(
        self,
        bucket: str,
        key: str,
        ctx: Optional[OperationContext] = None,
    ) -> bytes:
        check_context(ctx, "get")
        
        try:
            resp = self.client.get_object(Bucket=bucket, Key=key)
            body = resp["Body"]
            try:
                return body.read()
            finally:
                body.close()
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                raise NotFound(key) from e
            raise StoreError("get", key, str(e)) from e
        except BotoCoreError as e:
            raise StoreError("get", key, str(e)) from e
    
    def list_keys(
        self,
        bucket: str,
        prefix: str,
        ctx: Optional[OperationContext] = None,
    ) -> Iterator[str]:
        paginator = self.client.get_paginator("list_objects_v2")
        pages = iter(paginator.paginate(Bucket=bucket, Prefix=prefix))
        
        while True:
            check_context(ctx, "list")
            try:
                page = next(pages)
            except StopIteration:
                return
            except ClientError as e:
                raise StoreError("list", prefix, str(e)) from e
            except BotoCoreError as e:
                raise StoreError("list", prefix, str(e)) from e
            
            for obj in page.get("Contents", []):
                yield obj["Key"]
