from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from s3_broker.services.config import CatalogConfig


class PlanDefinition(BaseModel):
    id: str
    name: str
    description: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    free: bool = True


class ServiceDefinition(BaseModel):
    id: str
    name: str
    description: str
    bindable: bool
    plan_updateable: bool
    plans: list[PlanDefinition]
    tags: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    requires: list[str] = Field(default_factory=list)
    dashboard_client: Optional[dict[str, Any]] = None


class Catalog(BaseModel):
    services: list[ServiceDefinition]

    @staticmethod
    def from_config(config: CatalogConfig) -> "Catalog":
        plan = PlanDefinition(
            id=config.plan_id,
            name=config.plan_name,
            description="An S3 plan providing a single bucket with unlimited storage.",
            metadata={"bullets": ["Single S3 bucket", "Unlimited storage", "Unlimited number of objects"]},
        )
        service = ServiceDefinition(
            id=config.service_id,
            name=config.service_name,
            description="Amazon S3 is storage for the Internet.",
            bindable=True,
            plan_updateable=False,
            plans=[plan],
            tags=["s3", "object-storage"],
            metadata={
                "displayName": "Amazon S3",
                "imageUrl": "http://a1.awsstatic.com/images/logos/aws_logo.png",
                "longDescription": "Amazon S3 Service",
                "providerDisplayName": "Amazon",
                "documentationUrl": "http://aws.amazon.com/s3",
                "supportUrl": "http://aws.amazon.com/s3",
            },
            requires=["syslog_drain"],
        )
        return Catalog(services=[service])
