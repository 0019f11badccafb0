"""S3-compatible object store client.

boto3 is synchronous; every call is pushed to a worker thread so the event
loop keeps serving other requests during bulk deletes.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any

import anyio
import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings
from app.core.logging import TRACE_LEVEL, get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

logger = get_logger(__name__)

# S3 DeleteObjects accepts at most 1000 keys per request.
DELETE_BATCH_SIZE = 1000
_MISSING_KEY_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


class ObjectStoreError(RuntimeError):
    pass


class ObjectNotFoundError(ObjectStoreError):
    pass


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class ObjectStore:
    """Thin async facade over a boto3 S3 client bound to one bucket."""

    def __init__(self, *, bucket: str | None = None, client: Any | None = None) -> None:
        self._bucket = (bucket if bucket is not None else settings.object_store_bucket).strip()
        self._client = client

    @property
    def bucket(self) -> str:
        if not self._bucket:
            raise ObjectStoreError("OBJECT_STORE_BUCKET is not configured.")
        return self._bucket

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = boto3.client(
                "s3",
                region_name=settings.object_store_region,
                endpoint_url=settings.object_store_endpoint_url,
            )
        return self._client

    async def _call(self, func: Callable[..., Any], **kwargs: Any) -> Any:
        try:
            return await anyio.to_thread.run_sync(partial(func, **kwargs))
        except ClientError as exc:
            if _error_code(exc) in _MISSING_KEY_CODES:
                raise ObjectNotFoundError(str(exc)) from exc
            raise ObjectStoreError(str(exc)) from exc
        except BotoCoreError as exc:
            raise ObjectStoreError(str(exc)) from exc

    async def delete_object(self, key: str) -> None:
        """Delete one object; a key that is already gone counts as deleted."""
        logger.log(TRACE_LEVEL, "object_store.delete key=%s", key)
        try:
            await self._call(self.client.delete_object, Bucket=self.bucket, Key=key)
        except ObjectNotFoundError:
            return

    async def get_object_body(self, key: str) -> bytes:
        response = await self._call(self.client.get_object, Bucket=self.bucket, Key=key)
        body = response["Body"]
        try:
            return await anyio.to_thread.run_sync(body.read)
        finally:
            body.close()

    async def list_keys(self, prefix: str) -> list[str]:
        keys: list[str] = []
        token: str | None = None
        while True:
            params: dict[str, Any] = {"Bucket": self.bucket, "Prefix": prefix}
            if token:
                params["ContinuationToken"] = token
            response = await self._call(self.client.list_objects_v2, **params)
            keys.extend(item["Key"] for item in response.get("Contents", []))
            if not response.get("IsTruncated"):
                return keys
            token = response.get("NextContinuationToken")

    async def delete_prefix(self, prefix: str) -> int:
        """Delete every object under ``prefix`` and return how many were removed."""
        if not prefix:
            raise ValueError("Refusing to delete an empty prefix.")
        keys = await self.list_keys(prefix)
        for start in range(0, len(keys), DELETE_BATCH_SIZE):
            batch = keys[start : start + DELETE_BATCH_SIZE]
            response = await self._call(
                self.client.delete_objects,
                Bucket=self.bucket,
                Delete={"Objects": [{"Key": key} for key in batch], "Quiet": True},
            )
            errors = response.get("Errors") or []
            if errors:
                first = errors[0]
                raise ObjectStoreError(
                    f"Failed to delete {len(errors)} object(s) under {prefix}: "
                    f"{first.get('Key')} {first.get('Code')} {first.get('Message')}"
                )
        logger.debug("object_store.delete_prefix prefix=%s deleted=%s", prefix, len(keys))
        return len(keys)
