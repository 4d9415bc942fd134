"""Tests for environment-driven configuration."""

from __future__ import annotations

import pytest

from s3_broker.services.config import AwsConfig, BrokerAuthConfig, CatalogConfig, CredentialsConfig, NamingConfig


def test_naming_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("BUCKET_NAME_PREFIX", "GROUP_PATH", "GROUP_NAME_PREFIX", "POLICY_NAME_PREFIX", "USER_PATH", "USER_NAME_PREFIX"):
        monkeypatch.delenv(name, raising=False)

    assert NamingConfig.from_env() == NamingConfig()


def test_naming_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BUCKET_NAME_PREFIX", "tenant-")
    monkeypatch.setenv("USER_PATH", "/apps/")

    config = NamingConfig.from_env()

    assert config.bucket_name_prefix == "tenant-"
    assert config.user_path == "/apps/"
    assert config.group_name_prefix == "cloud-foundry-s3-"


def test_aws_client_kwargs_without_proxy() -> None:
    config = AwsConfig(region_name="eu-west-1", s3_endpoint_url="http://localhost:9000")

    assert config.client_kwargs("s3") == {"region_name": "eu-west-1", "endpoint_url": "http://localhost:9000"}
    assert config.client_kwargs("iam") == {"region_name": "eu-west-1"}


def test_aws_client_kwargs_with_credentials_and_proxy() -> None:
    config = AwsConfig(
        aws_access_key_id="AKIA",
        aws_secret_access_key="secret",
        proxy_host="proxy.local",
        proxy_port=3128,
        proxy_username="u",
        proxy_password="p",
    )

    kwargs = config.client_kwargs("iam")

    assert kwargs["aws_access_key_id"] == "AKIA"
    assert kwargs["aws_secret_access_key"] == "secret"
    assert kwargs["config"].proxies == {"http": "http://u:p@proxy.local:3128", "https": "http://u:p@proxy.local:3128"}


def test_aws_config_rejects_non_numeric_proxy_port(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PROXY_PORT", "not-a-port")

    with pytest.raises(ValueError):
        AwsConfig.from_env()


def test_credentials_config_blank_host_uses_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("S3_HOST", "  ")
    monkeypatch.delenv("S3_URI_SCHEME", raising=False)

    assert CredentialsConfig.from_env() == CredentialsConfig(host="s3.amazonaws.com", uri_scheme="s3")


def test_catalog_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLAN_ID", "custom-plan")

    assert CatalogConfig.from_env().plan_id == "custom-plan"


def test_broker_auth_disabled_without_password(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SECURITY_USER_PASSWORD", raising=False)

    assert BrokerAuthConfig.from_env().enabled is False
