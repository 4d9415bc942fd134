from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Optional

import aioboto3
from botocore.exceptions import ClientError

from s3_broker.models.broker import ServiceInstance
from s3_broker.services.config import AwsConfig
from s3_broker.services.naming import ResourceNamer


logger = logging.getLogger(__name__)

TAG_INSTANCE_ID = "serviceInstanceId"
TAG_SERVICE_ID = "serviceDefinitionId"
TAG_PLAN_ID = "planId"
TAG_ORGANIZATION_GUID = "organizationGuid"
TAG_SPACE_GUID = "spaceGuid"

_MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}


class S3ServiceError(RuntimeError):
    pass


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class S3Service:
    """Bucket lifecycle for service instances.

    The bucket's tag set is the only record of an instance: it is written at
    creation and read back to reconstruct the instance on lookup.
    """

    def __init__(self, config: AwsConfig, namer: ResourceNamer, *, session: Optional[Any] = None) -> None:
        self._config = config
        self._namer = namer
        self._session = session or aioboto3.Session()

    def _client(self) -> Any:
        return self._session.client("s3", **self._config.client_kwargs("s3"))

    def bucket_name(self, instance_id: str) -> str:
        return self._namer.bucket_name(instance_id)

    async def create_bucket(
        self,
        *,
        instance_id: str,
        service_id: str,
        plan_id: str,
        organization_guid: str,
        space_guid: str,
    ) -> str:
        """Create and tag the bucket for an instance.

        Returns:
            The bucket name.

        Raises:
            S3ServiceError: if creation or tagging fails. A tagging failure leaves
                the bucket in place, untagged.
        """

        bucket_name = self._namer.bucket_name(instance_id)
        logger.info("Creating bucket '%s' for service instance '%s'", bucket_name, instance_id)

        create_kwargs: dict[str, Any] = {"Bucket": bucket_name}
        region_name = self._config.region_name
        if region_name and region_name != "us-east-1":
            create_kwargs["CreateBucketConfiguration"] = {"LocationConstraint": region_name}

        tag_set = [
            {"Key": TAG_INSTANCE_ID, "Value": instance_id},
            {"Key": TAG_SERVICE_ID, "Value": service_id},
            {"Key": TAG_PLAN_ID, "Value": plan_id},
            {"Key": TAG_ORGANIZATION_GUID, "Value": organization_guid},
            {"Key": TAG_SPACE_GUID, "Value": space_guid},
        ]

        s3_client: Any = self._client()
        async with s3_client as s3:
            try:
                await s3.create_bucket(**create_kwargs)
            except Exception as exc:
                logger.exception("S3 create_bucket failed (bucket=%s)", bucket_name)
                raise S3ServiceError(f"Failed to create bucket {bucket_name}") from exc

            try:
                await s3.put_bucket_tagging(Bucket=bucket_name, Tagging={"TagSet": tag_set})
            except Exception as exc:
                logger.exception("S3 put_bucket_tagging failed; bucket '%s' exists untagged", bucket_name)
                raise S3ServiceError(f"Failed to tag bucket {bucket_name}") from exc

        return bucket_name

    async def delete_bucket(self, *, instance_id: str) -> None:
        bucket_name = self._namer.bucket_name(instance_id)
        logger.info("Deleting bucket '%s' for service instance '%s'", bucket_name, instance_id)
        try:
            s3_client: Any = self._client()
            async with s3_client as s3:
                await s3.delete_bucket(Bucket=bucket_name)
        except Exception as exc:
            logger.exception("S3 delete_bucket failed (bucket=%s)", bucket_name)
            raise S3ServiceError(f"Failed to delete bucket {bucket_name}") from exc

    async def empty_bucket(self, *, instance_id: str) -> None:
        """Delete all objects, then all object versions and delete markers."""

        bucket_name = self._namer.bucket_name(instance_id)
        try:
            s3_client: Any = self._client()
            async with s3_client as s3:
                await self._delete_all_objects(s3, bucket_name)
                await self._delete_all_versions(s3, bucket_name)
        except Exception as exc:
            logger.exception("S3 empty_bucket failed (bucket=%s)", bucket_name)
            raise S3ServiceError(f"Failed to empty bucket {bucket_name}") from exc

    @staticmethod
    async def _delete_all_objects(s3: Any, bucket_name: str) -> None:
        logger.info("Deleting all objects from bucket '%s'", bucket_name)
        paginator = s3.get_paginator("list_objects_v2")
        async for page in paginator.paginate(Bucket=bucket_name):
            for obj in page.get("Contents", []):
                await s3.delete_object(Bucket=bucket_name, Key=obj["Key"])

    @staticmethod
    async def _delete_all_versions(s3: Any, bucket_name: str) -> None:
        logger.info("Deleting all object versions from bucket '%s'", bucket_name)
        paginator = s3.get_paginator("list_object_versions")
        async for page in paginator.paginate(Bucket=bucket_name):
            for version in [*page.get("Versions", []), *page.get("DeleteMarkers", [])]:
                await s3.delete_object(Bucket=bucket_name, Key=version["Key"], VersionId=version["VersionId"])

    async def find_instance(self, *, instance_id: str) -> Optional[ServiceInstance]:
        """Reconstruct an instance from its bucket tags.

        Returns None when the bucket does not exist or was not tagged by the broker.
        """

        bucket_name = self._namer.bucket_name(instance_id)
        try:
            s3_client: Any = self._client()
            async with s3_client as s3:
                if not await self._bucket_exists(s3, bucket_name):
                    return None
                return await self._instance_for_bucket(s3, bucket_name)
        except Exception as exc:
            logger.exception("S3 find_instance failed (bucket=%s)", bucket_name)
            raise S3ServiceError(f"Failed to look up service instance {instance_id}") from exc

    async def list_instances(self) -> AsyncIterator[ServiceInstance]:
        """Scan every bucket in the account, yielding those tagged by the broker."""

        try:
            s3_client: Any = self._client()
            async with s3_client as s3:
                paginator = s3.get_paginator("list_buckets")
                async for page in paginator.paginate():
                    for bucket in page.get("Buckets", []):
                        instance = await self._instance_for_bucket(s3, bucket["Name"])
                        if instance is not None:
                            yield instance
        except Exception as exc:
            logger.exception("S3 list_instances failed")
            raise S3ServiceError("Failed to list service instances") from exc

    @staticmethod
    async def _bucket_exists(s3: Any, bucket_name: str) -> bool:
        try:
            await s3.head_bucket(Bucket=bucket_name)
        except ClientError as exc:
            if _error_code(exc) in _MISSING_BUCKET_CODES:
                return False
            raise
        return True

    @staticmethod
    async def _instance_for_bucket(s3: Any, bucket_name: str) -> Optional[ServiceInstance]:
        try:
            response = await s3.get_bucket_tagging(Bucket=bucket_name)
        except ClientError as exc:
            if _error_code(exc) == "NoSuchTagSet":
                return None
            raise

        tags = {tag["Key"]: tag["Value"] for tag in response.get("TagSet", [])}
        return S3Service._instance_from_tags(tags)

    @staticmethod
    def _instance_from_tags(tags: dict[str, str]) -> Optional[ServiceInstance]:
        instance_id = tags.get(TAG_INSTANCE_ID)
        if instance_id is None:
            # Bucket in this account that the broker did not create.
            return None

        return ServiceInstance(
            id=instance_id,
            service_definition_id=tags.get(TAG_SERVICE_ID),
            plan_id=tags.get(TAG_PLAN_ID),
            organization_guid=tags.get(TAG_ORGANIZATION_GUID),
            space_guid=tags.get(TAG_SPACE_GUID),
        )
