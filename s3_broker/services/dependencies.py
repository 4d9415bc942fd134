from __future__ import annotations

import hmac
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from starlette import status

from s3_broker.models.catalog import Catalog
from s3_broker.services.config import (
    AwsConfig,
    BrokerAuthConfig,
    CatalogConfig,
    CredentialsConfig,
    NamingConfig,
)
from s3_broker.services.iam_service import IamService
from s3_broker.services.naming import ResourceNamer
from s3_broker.services.plan import BasicPlan, Plan
from s3_broker.services.policy import BucketGroupPolicy
from s3_broker.services.s3_service import S3Service


_basic_auth = HTTPBasic(auto_error=False)


def get_bucket_group_policy_from_app(app: FastAPI) -> BucketGroupPolicy:
    policy = getattr(app.state, "bucket_group_policy", None)
    if policy is None:
        raise RuntimeError("Bucket group policy not initialized (app.state.bucket_group_policy)")
    if not isinstance(policy, BucketGroupPolicy):
        raise RuntimeError("Unexpected bucket_group_policy type")
    return policy


def get_bucket_group_policy(request: Request) -> BucketGroupPolicy:
    return get_bucket_group_policy_from_app(request.app)


def get_resource_namer() -> ResourceNamer:
    return ResourceNamer(NamingConfig.from_env())


def get_s3_service(namer: ResourceNamer = Depends(get_resource_namer)) -> S3Service:
    """FastAPI dependency provider for an S3Service instance."""

    return S3Service(AwsConfig.from_env(), namer)


def get_iam_service(
    namer: ResourceNamer = Depends(get_resource_namer),
    policy: BucketGroupPolicy = Depends(get_bucket_group_policy),
) -> IamService:
    return IamService(AwsConfig.from_env(), namer, policy)


def get_plan(
    s3: S3Service = Depends(get_s3_service),
    iam: IamService = Depends(get_iam_service),
) -> Plan:
    """Dependency provider for the plan backing every lifecycle route."""

    return BasicPlan(s3=s3, iam=iam, credentials=CredentialsConfig.from_env())


def get_catalog() -> Catalog:
    return Catalog.from_config(CatalogConfig.from_env())


def get_broker_auth_config() -> BrokerAuthConfig:
    return BrokerAuthConfig.from_env()


def require_broker_auth(
    credentials: Optional[HTTPBasicCredentials] = Depends(_basic_auth),
    config: BrokerAuthConfig = Depends(get_broker_auth_config),
) -> None:
    """Reject requests without the configured basic-auth credentials."""

    if not config.enabled:
        return

    if credentials is not None:
        username_ok = hmac.compare_digest(credentials.username.encode("utf-8"), config.username.encode("utf-8"))
        password_ok = hmac.compare_digest(
            credentials.password.encode("utf-8"), (config.password or "").encode("utf-8")
        )
        if username_ok and password_ok:
            return

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid broker credentials",
        headers={"WWW-Authenticate": "Basic"},
    )
