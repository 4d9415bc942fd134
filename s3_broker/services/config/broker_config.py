from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class NamingConfig:
    """Prefixes and IAM paths used to derive resource names from broker ids."""

    bucket_name_prefix: str = "cloud-foundry-"
    group_path: str = "/cloud-foundry/s3/"
    group_name_prefix: str = "cloud-foundry-s3-"
    policy_name_prefix: str = "cloud-foundry-s3-"
    user_path: str = "/cloud-foundry/s3/"
    user_name_prefix: str = "cloud-foundry-s3-"

    @staticmethod
    def from_env() -> "NamingConfig":
        defaults = NamingConfig()
        return NamingConfig(
            bucket_name_prefix=os.getenv("BUCKET_NAME_PREFIX", defaults.bucket_name_prefix),
            group_path=os.getenv("GROUP_PATH", defaults.group_path),
            group_name_prefix=os.getenv("GROUP_NAME_PREFIX", defaults.group_name_prefix),
            policy_name_prefix=os.getenv("POLICY_NAME_PREFIX", defaults.policy_name_prefix),
            user_path=os.getenv("USER_PATH", defaults.user_path),
            user_name_prefix=os.getenv("USER_NAME_PREFIX", defaults.user_name_prefix),
        )


@dataclass(frozen=True)
class CredentialsConfig:
    """What a binding hands back to the application besides its access key."""

    host: str = "s3.amazonaws.com"
    uri_scheme: str = "s3"

    @staticmethod
    def from_env() -> "CredentialsConfig":
        host = (os.getenv("S3_HOST") or "").strip() or "s3.amazonaws.com"
        uri_scheme = (os.getenv("S3_URI_SCHEME") or "").strip() or "s3"
        return CredentialsConfig(host=host, uri_scheme=uri_scheme)


@dataclass(frozen=True)
class CatalogConfig:
    service_id: str = "s3"
    service_name: str = "amazon-s3"
    plan_id: str = "s3-basic-plan"
    plan_name: str = "basic"

    @staticmethod
    def from_env() -> "CatalogConfig":
        defaults = CatalogConfig()
        return CatalogConfig(
            service_id=os.getenv("SERVICE_ID", defaults.service_id),
            service_name=os.getenv("SERVICE_NAME", defaults.service_name),
            plan_id=os.getenv("PLAN_ID", defaults.plan_id),
            plan_name=os.getenv("PLAN_NAME", defaults.plan_name),
        )


@dataclass(frozen=True)
class BrokerAuthConfig:
    """Basic-auth credentials the platform uses to call the broker.

    Authentication is disabled when no password is configured.
    """

    username: str = "user"
    password: Optional[str] = None

    @property
    def enabled(self) -> bool:
        return bool(self.password)

    @staticmethod
    def from_env() -> "BrokerAuthConfig":
        return BrokerAuthConfig(
            username=os.getenv("SECURITY_USER_NAME", "user"),
            password=os.getenv("SECURITY_USER_PASSWORD") or None,
        )
