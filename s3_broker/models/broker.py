from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, Field


class ServiceInstance(BaseModel):
    id: str = Field(..., description="Broker service instance id")
    service_definition_id: Optional[str] = None
    plan_id: Optional[str] = None
    organization_guid: Optional[str] = None
    space_guid: Optional[str] = None


class ServiceInstanceBinding(BaseModel):
    id: str = Field(..., description="Broker service binding id")
    service_instance_id: str
    credentials: dict[str, Union[str, int]] = Field(default_factory=dict)
    app_guid: Optional[str] = None


class CreateServiceInstanceRequest(BaseModel):
    service_id: str
    plan_id: str
    organization_guid: str
    space_guid: str
    parameters: Optional[dict[str, Any]] = None


class CreateServiceInstanceBindingRequest(BaseModel):
    service_id: str
    plan_id: str
    app_guid: Optional[str] = None
    parameters: Optional[dict[str, Any]] = None


class CreateServiceInstanceBindingResponse(BaseModel):
    credentials: dict[str, Union[str, int]]


class EmptyResponse(BaseModel):
    pass


class ErrorResponse(BaseModel):
    description: str
