from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import aioboto3
from botocore.exceptions import ClientError

from s3_broker.services.config import AwsConfig
from s3_broker.services.naming import ResourceNamer
from s3_broker.services.policy import BucketGroupPolicy


logger = logging.getLogger(__name__)


class IamServiceError(RuntimeError):
    pass


class IamEntityNotFoundError(IamServiceError):
    pass


@dataclass(frozen=True)
class IamUser:
    user_name: str
    arn: Optional[str] = None

    @staticmethod
    def from_iam_user(user: dict[str, Any]) -> "IamUser":
        return IamUser(user_name=str(user.get("UserName")), arn=user.get("Arn"))


@dataclass(frozen=True)
class AccessKey:
    access_key_id: str
    secret_access_key: str

    @staticmethod
    def from_iam_access_key(key: dict[str, Any]) -> "AccessKey":
        return AccessKey(
            access_key_id=str(key.get("AccessKeyId")),
            secret_access_key=str(key.get("SecretAccessKey")),
        )


class IamService:
    """IAM side of an instance: one group with an inline bucket policy, and one
    user with access keys per binding.

    A user can only be deleted once it belongs to no group and owns no access
    keys; callers are responsible for that ordering.
    """

    def __init__(
        self,
        config: AwsConfig,
        namer: ResourceNamer,
        policy: BucketGroupPolicy,
        *,
        session: Optional[Any] = None,
    ) -> None:
        self._config = config
        self._namer = namer
        self._policy = policy
        self._session = session or aioboto3.Session()

    def _client(self) -> Any:
        return self._session.client("iam", **self._config.client_kwargs("iam"))

    def group_name(self, instance_id: str) -> str:
        return self._namer.group_name(instance_id)

    async def _call(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        try:
            iam_client: Any = self._client()
            async with iam_client as iam:
                return await getattr(iam, operation)(**kwargs)
        except Exception as exc:
            logger.exception("IAM %s failed (%s)", operation, kwargs.get("UserName") or kwargs.get("GroupName"))
            if isinstance(exc, ClientError) and exc.response.get("Error", {}).get("Code") == "NoSuchEntity":
                raise IamEntityNotFoundError(f"IAM {operation} failed: no such entity") from exc
            raise IamServiceError(f"IAM {operation} failed") from exc

    # -----------------
    # Groups and policy
    # -----------------

    async def create_group(self, *, instance_id: str) -> str:
        group_name = self._namer.group_name(instance_id)
        logger.info("Creating group '%s' for service instance '%s'", group_name, instance_id)
        await self._call("create_group", GroupName=group_name, Path=self._namer.group_path)
        return group_name

    async def delete_group(self, *, instance_id: str) -> None:
        group_name = self._namer.group_name(instance_id)
        logger.info("Deleting group '%s' for service instance '%s'", group_name, instance_id)
        await self._call("delete_group", GroupName=group_name)

    async def apply_group_policy(self, *, instance_id: str, bucket_name: str) -> None:
        group_name = self._namer.group_name(instance_id)
        document = self._policy.render(bucket_name)
        logger.info("Putting policy document on group '%s': %s", group_name, document)
        await self._call(
            "put_group_policy",
            GroupName=group_name,
            PolicyName=self._namer.policy_name(instance_id),
            PolicyDocument=document,
        )

    async def delete_group_policy(self, *, instance_id: str) -> None:
        group_name = self._namer.group_name(instance_id)
        logger.info("Deleting policy document for group '%s'", group_name)
        await self._call(
            "delete_group_policy",
            GroupName=group_name,
            PolicyName=self._namer.policy_name(instance_id),
        )

    # -----------------
    # Users and keys
    # -----------------

    async def create_user(self, *, binding_id: str) -> IamUser:
        user_name = self._namer.user_name(binding_id)
        logger.info("Creating user '%s' for service binding '%s'", user_name, binding_id)
        response = await self._call("create_user", UserName=user_name, Path=self._namer.user_path)
        return IamUser.from_iam_user(response.get("User", {"UserName": user_name}))

    async def delete_user(self, *, binding_id: str) -> None:
        user_name = self._namer.user_name(binding_id)
        logger.info("Deleting user '%s' for service binding '%s'", user_name, binding_id)
        await self._call("delete_user", UserName=user_name)

    async def create_access_key(self, *, user: IamUser) -> AccessKey:
        response = await self._call("create_access_key", UserName=user.user_name)
        return AccessKey.from_iam_access_key(response["AccessKey"])

    async def add_user_to_group(self, *, user: IamUser, group_name: str) -> None:
        logger.info("Adding user '%s' to group '%s'", user.user_name, group_name)
        await self._call("add_user_to_group", GroupName=group_name, UserName=user.user_name)

    async def remove_user_from_group(self, *, binding_id: str, instance_id: str) -> None:
        user_name = self._namer.user_name(binding_id)
        group_name = self._namer.group_name(instance_id)
        logger.info("Removing user '%s' from group '%s'", user_name, group_name)
        await self._call("remove_user_from_group", GroupName=group_name, UserName=user_name)

    async def delete_user_access_keys(self, *, binding_id: str) -> int:
        """Delete every access key of the binding's user.

        Returns:
            The number of keys deleted.
        """

        user_name = self._namer.user_name(binding_id)
        logger.info("Deleting all access keys for user '%s'", user_name)

        deleted = 0
        try:
            iam_client: Any = self._client()
            async with iam_client as iam:
                paginator = iam.get_paginator("list_access_keys")
                async for page in paginator.paginate(UserName=user_name):
                    for key in page.get("AccessKeyMetadata", []):
                        await iam.delete_access_key(UserName=user_name, AccessKeyId=key["AccessKeyId"])
                        deleted += 1
        except Exception as exc:
            logger.exception("IAM delete_user_access_keys failed (user=%s)", user_name)
            raise IamServiceError(f"Failed to delete access keys for user {user_name}") from exc

        return deleted
