from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Optional

from botocore.config import Config


@dataclass(frozen=True)
class AwsConfig:
    """Runtime configuration for the S3 and IAM clients.

    Credentials are optional; when unset the default botocore chain applies
    (env vars, profiles/SSO, instance role, etc.).
    """

    region_name: Optional[str] = None
    s3_endpoint_url: Optional[str] = None
    iam_endpoint_url: Optional[str] = None
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    proxy_host: Optional[str] = None
    proxy_port: Optional[int] = None
    proxy_username: Optional[str] = None
    proxy_password: Optional[str] = None

    @staticmethod
    def from_env() -> "AwsConfig":
        region_name = os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION")

        proxy_port_raw = os.getenv("PROXY_PORT")
        proxy_port: Optional[int] = None
        if proxy_port_raw:
            try:
                proxy_port = int(proxy_port_raw)
            except ValueError as exc:
                raise ValueError("Invalid PROXY_PORT; must be an integer") from exc

        return AwsConfig(
            region_name=region_name,
            s3_endpoint_url=os.getenv("S3_ENDPOINT_URL"),
            iam_endpoint_url=os.getenv("IAM_ENDPOINT_URL"),
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY"),
            aws_secret_access_key=os.getenv("AWS_SECRET_KEY"),
            proxy_host=os.getenv("PROXY_HOST"),
            proxy_port=proxy_port,
            proxy_username=os.getenv("PROXY_USERNAME"),
            proxy_password=os.getenv("PROXY_PASSWORD"),
        )

    def proxy_url(self) -> Optional[str]:
        if not self.proxy_host:
            return None

        auth = ""
        if self.proxy_username:
            auth = self.proxy_username
            if self.proxy_password:
                auth = f"{auth}:{self.proxy_password}"
            auth = f"{auth}@"

        port = f":{self.proxy_port}" if self.proxy_port else ""
        return f"http://{auth}{self.proxy_host}{port}"

    def client_kwargs(self, service_name: str) -> dict[str, Any]:
        """Keyword arguments for ``session.client(service_name, **kwargs)``."""

        kwargs: dict[str, Any] = {"region_name": self.region_name}

        endpoint_url = self.s3_endpoint_url if service_name == "s3" else self.iam_endpoint_url
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url

        if self.aws_access_key_id and self.aws_secret_access_key:
            kwargs["aws_access_key_id"] = self.aws_access_key_id
            kwargs["aws_secret_access_key"] = self.aws_secret_access_key

        proxy = self.proxy_url()
        if proxy:
            kwargs["config"] = Config(proxies={"http": proxy, "https": proxy})

        return kwargs
